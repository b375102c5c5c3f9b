from datetime import datetime
from typing import Any, Dict, Generic, List, Literal, Optional, Set, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from shop_admin.services.query_pipeline import QueryResult


class CamelModel(BaseModel):
    """JSON bodies use camelCase keys; Python code uses snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


ItemT = TypeVar("ItemT", bound=BaseModel)


class Page(CamelModel, Generic[ItemT]):
    data: List[ItemT]
    total: int = 0
    page: int = 1
    limit: int = 10
    total_pages: int = 0

    @classmethod
    def from_result(cls, result: QueryResult, item_model: type) -> "Page":
        return cls(
            data=[item_model.model_validate(item) for item in result.data],
            total=result.total,
            page=result.page,
            limit=result.limit,
            total_pages=result.total_pages,
        )


PRODUCT_NULLABLE_FIELDS = {"original_price", "category", "size"}
ORDER_NULLABLE_FIELDS = {"shipping_address", "tracking_number", "carrier"}


def _sent_fields(model: BaseModel, nullable: Set[str], exclude: Optional[Set[str]] = None) -> Dict[str, Any]:
    changes = model.model_dump(exclude_unset=True, exclude=exclude)
    return {
        key: value
        for key, value in changes.items()
        if value is not None or key in nullable
    }


class MessageResponse(BaseModel):
    message: str


# ========== Auth Schemas ==========

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)
    name: str = Field(min_length=1)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserResponse(CamelModel):
    id: str
    email: str
    name: str
    role: str  # "admin" or "user"
    avatar: Optional[str] = None
    created_at: datetime


class AuthResponse(BaseModel):
    token: str
    user: UserResponse
    message: str


class TokenResponse(BaseModel):
    token: str
    message: str


# ========== Product Schemas ==========

class ProductResponse(CamelModel):
    id: str
    name: str
    description: str = ""
    price: float
    original_price: Optional[float] = None
    featured: bool = False
    is_new: bool = False
    category: Optional[str] = None
    brand: str = ""
    size: Optional[str] = None
    stock: int = 0
    images: List[str] = Field(default_factory=list)
    status: str
    created_at: datetime
    updated_at: datetime


class ProductCreateRequest(CamelModel):
    name: str = Field(min_length=1)
    price: float = Field(gt=0)
    description: str = ""
    original_price: Optional[float] = Field(default=None, gt=0)
    featured: bool = False
    is_new: bool = False
    category: Optional[str] = None
    brand: str = ""
    size: Optional[str] = None
    stock: int = Field(default=0, ge=0)
    images: List[str] = Field(default_factory=list)
    status: str = "active"


class ProductUpdateRequest(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    price: Optional[float] = Field(default=None, gt=0)
    description: Optional[str] = None
    original_price: Optional[float] = Field(default=None, gt=0)
    featured: Optional[bool] = None
    is_new: Optional[bool] = None
    category: Optional[str] = None
    brand: Optional[str] = None
    size: Optional[str] = None
    stock: Optional[int] = Field(default=None, ge=0)
    images: Optional[List[str]] = None
    status: Optional[str] = None

    def to_changes(self) -> Dict[str, Any]:
        """Keys sent in the body; ``null`` clears only the nullable columns."""
        return _sent_fields(self, PRODUCT_NULLABLE_FIELDS)


class ProductMutationResponse(BaseModel):
    product: ProductResponse
    message: str


class StockUpdateRequest(BaseModel):
    stock: int = Field(ge=0)
    operation: Optional[Literal["add", "subtract", "set"]] = None


class BulkDeleteRequest(BaseModel):
    ids: List[str]


class BulkDeleteResponse(CamelModel):
    deleted_products: List[ProductResponse]
    message: str


class CategoryResponse(BaseModel):
    id: str
    name: str
    count: int


# ========== Order Schemas ==========

class CustomerInfo(CamelModel):
    first_name: str = Field(min_length=1)
    last_name: str = ""
    email: EmailStr
    phone: Optional[str] = None
    address: Optional[str] = None


class OrderItem(CamelModel):
    product_id: str
    product_name: str
    quantity: int = Field(ge=1)
    price: float = Field(ge=0)
    total: float = Field(ge=0)


class OrderCreateRequest(CamelModel):
    customer_info: CustomerInfo
    items: List[OrderItem] = Field(min_length=1)
    total: float = Field(gt=0)


class OrderUpdateRequest(CamelModel):
    status: Optional[str] = None
    total: Optional[float] = Field(default=None, gt=0)
    customer_info: Optional[CustomerInfo] = None
    items: Optional[List[OrderItem]] = None
    payment_status: Optional[str] = None
    shipping_address: Optional[str] = None
    tracking_number: Optional[str] = None
    carrier: Optional[str] = None

    def to_changes(self) -> Dict[str, Any]:
        """Attribute changes for the order row; nested JSON keeps camelCase keys."""
        changes = _sent_fields(self, ORDER_NULLABLE_FIELDS, exclude={"customer_info", "items"})
        if self.customer_info is not None:
            changes["customer_info"] = self.customer_info.model_dump(by_alias=True)
        if self.items is not None:
            changes["items"] = [item.model_dump(by_alias=True) for item in self.items]
        return changes


class OrderStatusRequest(BaseModel):
    status: str = Field(min_length=1)


class TrackingRequest(CamelModel):
    tracking_number: Optional[str] = None
    carrier: Optional[str] = None


class OrderResponse(CamelModel):
    id: str
    user_id: Optional[str] = None
    status: str
    total: float
    order_date: datetime
    customer_info: Dict[str, Any] = Field(default_factory=dict)
    items: List[Dict[str, Any]] = Field(default_factory=list)
    payment_status: str
    shipping_address: Optional[str] = None
    tracking_number: Optional[str] = None
    carrier: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class OrderMutationResponse(BaseModel):
    order: OrderResponse
    message: str


# ========== Payment Schemas ==========

class PaymentMethodResponse(BaseModel):
    id: str
    name: str
    icon: str


class CreateIntentRequest(CamelModel):
    amount: float = Field(gt=0)
    currency: str = "VND"
    order_id: str = Field(min_length=1)
    customer_info: Optional[Dict[str, Any]] = None


class PaymentIntentResponse(CamelModel):
    id: str
    amount: float
    currency: str
    order_id: str
    status: str
    client_secret: str
    customer_info: Optional[Dict[str, Any]] = None
    created_at: datetime


class CreateIntentResponse(CamelModel):
    payment_intent: PaymentIntentResponse


class PaymentRecordResponse(CamelModel):
    id: str
    amount: float
    currency: str
    order_id: str
    status: str
    payment_method: Optional[str] = None
    processed_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None
    confirmed_by: Optional[str] = None
    refunds: List[Dict[str, Any]] = Field(default_factory=list)
    created_at: datetime


class PaymentStatusResponse(CamelModel):
    id: str
    status: str
    amount: float
    currency: str
    order_id: str
    payment_method: str
    created_at: datetime
    completed_at: Optional[datetime] = None


class ProcessPaymentRequest(CamelModel):
    payment_method: Optional[str] = None
    payment_details: Optional[Dict[str, Any]] = None


class ConfirmPaymentRequest(CamelModel):
    confirmation_data: Optional[Dict[str, Any]] = None


class RefundRequest(BaseModel):
    amount: Optional[float] = Field(default=None, gt=0)
    reason: Optional[str] = None


class PaymentActionResponse(CamelModel):
    success: bool
    payment_id: str
    status: str
    message: str


class RefundResponse(CamelModel):
    success: bool
    refund_id: str
    amount: float
    status: str
    message: str


class PaymentAnalyticsResponse(CamelModel):
    total_payments: int
    total_amount: float
    status_breakdown: Dict[str, int]
    average_amount: float
