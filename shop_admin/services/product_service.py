from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional

from sqlmodel import select

from shop_admin.models.db import get_session
from shop_admin.models.product import Product
from shop_admin.services.query_pipeline import (
    CollectionSchema,
    QueryRequest,
    QueryResult,
    SortKey,
    SortKind,
    run_query,
)
from shop_admin.utils.exceptions import NotFoundError, ValidationError
from shop_admin.utils.logging_config import get_logger
from shop_admin.utils.timeutils import utcnow

logger = get_logger(__name__)

PRODUCT_QUERY = CollectionSchema(
    search_fields=(
        lambda p: p.name,
        lambda p: p.description,
        lambda p: p.brand,
    ),
    filter_fields={"category": "category", "status": "status"},
    sort_keys={
        "createdAt": SortKey("created_at", SortKind.TEMPORAL),
        "updatedAt": SortKey("updated_at", SortKind.TEMPORAL),
        "price": SortKey("price", SortKind.NUMERIC),
        "originalPrice": SortKey("original_price", SortKind.NUMERIC),
        "stock": SortKey("stock", SortKind.NUMERIC),
        "name": SortKey("name", SortKind.STRING),
    },
    date_field="created_at",
    default_sort_by="createdAt",
)

CATEGORIES = [
    ("luxury", "Luxury"),
    ("mens", "Men"),
    ("womens", "Women"),
    ("unisex", "Unisex"),
]

STOCK_OPERATIONS = {"add", "subtract", "set"}


class ProductService:
    """Catalog CRUD on the ``product`` table."""

    def list_all(self) -> List[Product]:
        with get_session() as session:
            return list(session.exec(select(Product)).all())

    def list_products(self, request: QueryRequest) -> QueryResult[Product]:
        return run_query(self.list_all(), request, PRODUCT_QUERY)

    def list_featured(self) -> List[Product]:
        return [p for p in self.list_all() if p.featured and p.status == "active"]

    def list_new_arrivals(self) -> List[Product]:
        return [p for p in self.list_all() if p.is_new and p.status == "active"]

    def category_counts(self) -> List[Dict[str, Any]]:
        products = self.list_all()
        return [
            {
                "id": category_id,
                "name": label,
                "count": sum(1 for p in products if p.category == category_id),
            }
            for category_id, label in CATEGORIES
        ]

    def get_product(self, product_id: str) -> Product:
        with get_session() as session:
            product = session.get(Product, product_id)
        if not product:
            raise NotFoundError("Product")
        return product

    def create_product(self, data: Dict[str, Any]) -> Product:
        now = utcnow()
        fields = dict(data)
        fields.pop("id", None)
        product = Product(
            id=f"prod_{uuid.uuid4()}",
            created_at=now,
            updated_at=now,
            **fields,
        )
        with get_session() as session:
            session.add(product)
            session.commit()
            session.refresh(product)
        logger.info(f"Product created: {product.id} ({product.name})")
        return product

    def update_product(self, product_id: str, changes: Dict[str, Any]) -> Product:
        with get_session() as session:
            product = session.get(Product, product_id)
            if not product:
                raise NotFoundError("Product")
            for key, value in changes.items():
                if key in ("id", "created_at"):
                    continue
                setattr(product, key, value)
            product.updated_at = utcnow()
            session.add(product)
            session.commit()
            session.refresh(product)
        logger.info(f"Product updated: {product_id} fields={sorted(changes)}")
        return product

    def delete_product(self, product_id: str) -> None:
        with get_session() as session:
            product = session.get(Product, product_id)
            if not product:
                raise NotFoundError("Product")
            session.delete(product)
            session.commit()
        logger.info(f"Product deleted: {product_id}")

    def update_stock(self, product_id: str, *, stock: int, operation: Optional[str] = None) -> Product:
        """Adjust stock by ``add``, ``subtract`` (floored at zero) or ``set`` (the default)."""
        operation = operation or "set"
        if operation not in STOCK_OPERATIONS:
            raise ValidationError(f"Invalid stock operation: {operation}")

        with get_session() as session:
            product = session.get(Product, product_id)
            if not product:
                raise NotFoundError("Product")
            if operation == "add":
                product.stock += stock
            elif operation == "subtract":
                product.stock = max(0, product.stock - stock)
            else:
                product.stock = stock
            product.updated_at = utcnow()
            session.add(product)
            session.commit()
            session.refresh(product)
        return product

    def bulk_delete(self, product_ids: List[str]) -> List[Product]:
        deleted = []
        with get_session() as session:
            for product_id in product_ids:
                product = session.get(Product, product_id)
                if product:
                    deleted.append(product)
                    session.delete(product)
            session.commit()
        logger.info(f"Bulk deleted {len(deleted)} products")
        return deleted
