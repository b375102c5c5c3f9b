from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from sqlalchemy import Column, JSON
from sqlmodel import Field, SQLModel

from shop_admin.utils.timeutils import utcnow


class PaymentStatus(str, Enum):
    """支付状态"""
    REQUIRES_PAYMENT_METHOD = "requires_payment_method"
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class Payment(SQLModel, table=True):
    """支付意向表（模拟支付，不对接真实网关）"""

    id: str = Field(primary_key=True)  # pi_<hex>
    amount: float
    currency: str = Field(default="VND")
    order_id: str = Field(index=True)
    status: str = Field(default=PaymentStatus.REQUIRES_PAYMENT_METHOD.value, index=True)
    client_secret: str
    customer_info: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))

    payment_method: Optional[str] = None
    payment_details: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    processed_at: Optional[datetime] = None

    confirmation_data: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    confirmed_at: Optional[datetime] = None
    confirmed_by: Optional[str] = None

    # refunds 结构: [{refundId, paymentId, amount, reason, status, refundedBy, createdAt}]
    refunds: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=utcnow, index=True)
