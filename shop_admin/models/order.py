from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import Column, JSON
from sqlmodel import Field, SQLModel

from shop_admin.utils.timeutils import utcnow


class Order(SQLModel, table=True):
    """订单表

    状态流转：pending -> processing -> shipped -> delivered，或 cancelled
    """

    __tablename__ = "orders"

    id: str = Field(primary_key=True)  # ORD-<epoch ms>
    user_id: Optional[str] = Field(default=None, index=True, description="下单用户 ID（匿名下单为空）")
    status: str = Field(default="pending", index=True)
    total: float
    order_date: datetime = Field(default_factory=utcnow, index=True)

    # customer_info 结构: firstName, lastName, email, phone, address
    customer_info: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    # items 结构: [{productId, productName, quantity, price, total}]
    items: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))

    payment_status: str = Field(default="pending", index=True)
    shipping_address: Optional[str] = None
    tracking_number: Optional[str] = None
    carrier: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def customer_name(self) -> str:
        info = self.customer_info or {}
        return f"{info.get('firstName', '')} {info.get('lastName', '')}".strip()

    @property
    def customer_email(self) -> str:
        return (self.customer_info or {}).get("email") or ""
