from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

from sqlmodel import select

from shop_admin.models.db import get_session
from shop_admin.models.order import Order
from shop_admin.services.query_pipeline import (
    CollectionSchema,
    QueryRequest,
    QueryResult,
    SortKey,
    SortKind,
    run_query,
)
from shop_admin.utils.exceptions import NotFoundError
from shop_admin.utils.logging_config import get_logger
from shop_admin.utils.timeutils import utcnow

logger = get_logger(__name__)

ORDER_QUERY = CollectionSchema(
    search_fields=(
        lambda o: o.id,
        lambda o: o.customer_name,
        lambda o: o.customer_email,
    ),
    filter_fields={"status": "status", "paymentStatus": "payment_status"},
    sort_keys={
        "createdAt": SortKey("created_at", SortKind.TEMPORAL),
        "updatedAt": SortKey("updated_at", SortKind.TEMPORAL),
        "orderDate": SortKey("order_date", SortKind.TEMPORAL),
        "total": SortKey("total", SortKind.NUMERIC),
    },
    date_field="order_date",
    default_sort_by="createdAt",
)


class OrderService:
    """Order CRUD on the ``orders`` table."""

    def list_all(self, user_id: Optional[str] = None) -> List[Order]:
        with get_session() as session:
            statement = select(Order)
            if user_id is not None:
                statement = statement.where(Order.user_id == user_id)
            return list(session.exec(statement).all())

    def list_orders(self, request: QueryRequest, *, user_id: Optional[str] = None) -> QueryResult[Order]:
        return run_query(self.list_all(user_id), request, ORDER_QUERY)

    def get_order(self, order_id: str) -> Order:
        with get_session() as session:
            order = session.get(Order, order_id)
        if not order:
            raise NotFoundError("Order")
        return order

    def create_order(
        self,
        *,
        customer_info: Dict[str, Any],
        items: List[Dict[str, Any]],
        total: float,
        user_id: Optional[str] = None,
    ) -> Order:
        now = utcnow()
        with get_session() as session:
            order_id = self._next_order_id(session)
            order = Order(
                id=order_id,
                user_id=user_id,
                status="pending",
                total=total,
                order_date=now,
                customer_info=customer_info,
                items=items,
                payment_status="pending",
                shipping_address=customer_info.get("address"),
                created_at=now,
                updated_at=now,
            )
            session.add(order)
            session.commit()
            session.refresh(order)
        logger.info(f"Order created: {order.id} total={order.total}")
        return order

    def update_order(self, order_id: str, changes: Dict[str, Any]) -> Order:
        with get_session() as session:
            order = session.get(Order, order_id)
            if not order:
                raise NotFoundError("Order")
            for key, value in changes.items():
                if key in ("id", "created_at"):
                    continue
                setattr(order, key, value)
            order.updated_at = utcnow()
            session.add(order)
            session.commit()
            session.refresh(order)
        logger.info(f"Order updated: {order_id} fields={sorted(changes)}")
        return order

    def update_status(self, order_id: str, status: str) -> Order:
        return self.update_order(order_id, {"status": status})

    def update_payment_status(self, order_id: str, payment_status: str) -> Order:
        return self.update_order(order_id, {"payment_status": payment_status})

    def add_tracking(self, order_id: str, *, tracking_number: Optional[str], carrier: Optional[str]) -> Order:
        return self.update_order(order_id, {"tracking_number": tracking_number, "carrier": carrier})

    def delete_order(self, order_id: str) -> None:
        with get_session() as session:
            order = session.get(Order, order_id)
            if not order:
                raise NotFoundError("Order")
            session.delete(order)
            session.commit()
        logger.info(f"Order deleted: {order_id}")

    @staticmethod
    def _next_order_id(session) -> str:
        stamp = int(time.time() * 1000)
        # two orders in the same millisecond would collide on the primary key
        while session.get(Order, f"ORD-{stamp}") is not None:
            stamp += 1
        return f"ORD-{stamp}"
