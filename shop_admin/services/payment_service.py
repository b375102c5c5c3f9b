from __future__ import annotations

import secrets
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlmodel import select

from shop_admin.models.db import get_session
from shop_admin.models.payment import Payment, PaymentStatus
from shop_admin.services.query_pipeline import (
    CollectionSchema,
    QueryRequest,
    QueryResult,
    SortKey,
    SortKind,
    apply_date_range,
    run_query,
)
from shop_admin.utils.exceptions import NotFoundError
from shop_admin.utils.logging_config import get_logger
from shop_admin.utils.timeutils import utcnow

logger = get_logger(__name__)

PAYMENT_METHODS = [
    {"id": "bank_transfer", "name": "Bank transfer", "icon": "🏦"},
    {"id": "momo", "name": "MoMo", "icon": "💳"},
    {"id": "zalopay", "name": "ZaloPay", "icon": "📱"},
    {"id": "vnpay", "name": "VNPay", "icon": "💰"},
]

PAYMENT_QUERY = CollectionSchema(
    search_fields=(
        lambda p: p.id,
        lambda p: p.order_id,
    ),
    filter_fields={"status": "status"},
    sort_keys={
        "createdAt": SortKey("created_at", SortKind.TEMPORAL),
        "amount": SortKey("amount", SortKind.NUMERIC),
    },
    date_field="created_at",
    default_sort_by="createdAt",
)

ANALYTICS_STATUSES = (
    PaymentStatus.PENDING,
    PaymentStatus.PROCESSING,
    PaymentStatus.COMPLETED,
    PaymentStatus.FAILED,
)


def _payment_id() -> str:
    return f"pi_{uuid.uuid4().hex}"


class PaymentService:
    """Mock payment bookkeeping; no gateway is ever contacted."""

    def list_all(self) -> List[Payment]:
        with get_session() as session:
            return list(session.exec(select(Payment)).all())

    def history(self, request: QueryRequest) -> QueryResult[Payment]:
        return run_query(self.list_all(), request, PAYMENT_QUERY)

    def get_payment(self, payment_id: str) -> Payment:
        with get_session() as session:
            payment = session.get(Payment, payment_id)
        if not payment:
            raise NotFoundError("Payment")
        return payment

    def create_intent(
        self,
        *,
        amount: float,
        order_id: str,
        currency: str = "VND",
        customer_info: Optional[Dict[str, Any]] = None,
    ) -> Payment:
        payment = Payment(
            id=_payment_id(),
            amount=amount,
            currency=currency,
            order_id=order_id,
            status=PaymentStatus.REQUIRES_PAYMENT_METHOD.value,
            client_secret=f"{_payment_id()}_secret_{secrets.token_hex(5)}",
            customer_info=customer_info,
            created_at=utcnow(),
        )
        with get_session() as session:
            session.add(payment)
            session.commit()
            session.refresh(payment)
        logger.info(f"Payment intent created: {payment.id} order={order_id} amount={amount} {currency}")
        return payment

    def process(
        self,
        payment_id: str,
        *,
        payment_method: Optional[str],
        payment_details: Optional[Dict[str, Any]] = None,
    ) -> Payment:
        return self._update(
            payment_id,
            status=PaymentStatus.PROCESSING.value,
            payment_method=payment_method,
            payment_details=payment_details,
            processed_at=utcnow(),
        )

    def confirm(
        self,
        payment_id: str,
        *,
        confirmed_by: str,
        confirmation_data: Optional[Dict[str, Any]] = None,
    ) -> Payment:
        payment = self._update(
            payment_id,
            status=PaymentStatus.COMPLETED.value,
            confirmation_data=confirmation_data,
            confirmed_at=utcnow(),
            confirmed_by=confirmed_by,
        )
        logger.info(f"Payment confirmed: {payment_id} by {confirmed_by}")
        return payment

    def refund(
        self,
        payment_id: str,
        *,
        refunded_by: str,
        amount: Optional[float] = None,
        reason: Optional[str] = None,
    ) -> Dict[str, Any]:
        with get_session() as session:
            payment = session.get(Payment, payment_id)
            if not payment:
                raise NotFoundError("Payment")
            refund = {
                "refundId": f"rf_{uuid.uuid4().hex}",
                "paymentId": payment_id,
                "amount": amount if amount is not None else payment.amount,
                "reason": reason,
                "status": PaymentStatus.PROCESSING.value,
                "refundedBy": refunded_by,
                "createdAt": utcnow().isoformat(),
            }
            # JSON columns are only persisted on reassignment
            payment.refunds = [*(payment.refunds or []), refund]
            session.add(payment)
            session.commit()
        logger.info(f"Refund initiated: {refund['refundId']} payment={payment_id} amount={refund['amount']}")
        return refund

    def status_view(self, payment_id: str) -> Dict[str, Any]:
        payment = self.get_payment(payment_id)
        return {
            "id": payment.id,
            "status": payment.status,
            "amount": payment.amount,
            "currency": payment.currency,
            "orderId": payment.order_id,
            "paymentMethod": payment.payment_method or "bank_transfer",
            "createdAt": payment.created_at,
            "completedAt": payment.confirmed_at if payment.status == PaymentStatus.COMPLETED.value else None,
        }

    def analytics(self, *, date_from: Optional[datetime] = None, date_to: Optional[datetime] = None) -> Dict[str, Any]:
        payments = apply_date_range(self.list_all(), date_from, date_to, PAYMENT_QUERY)
        total_amount = sum(p.amount for p in payments)
        return {
            "totalPayments": len(payments),
            "totalAmount": total_amount,
            "statusBreakdown": {
                status.value: sum(1 for p in payments if p.status == status.value)
                for status in ANALYTICS_STATUSES
            },
            "averageAmount": total_amount / len(payments) if payments else 0,
        }

    def _update(self, payment_id: str, **changes: Any) -> Payment:
        with get_session() as session:
            payment = session.get(Payment, payment_id)
            if not payment:
                raise NotFoundError("Payment")
            for key, value in changes.items():
                setattr(payment, key, value)
            session.add(payment)
            session.commit()
            session.refresh(payment)
        return payment
