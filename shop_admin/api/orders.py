from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from shop_admin.api.auth import get_current_user, get_optional_user
from shop_admin.api.pagination import ListParams
from shop_admin.api.schemas import (
    MessageResponse,
    OrderCreateRequest,
    OrderMutationResponse,
    OrderResponse,
    OrderStatusRequest,
    OrderUpdateRequest,
    Page,
    TrackingRequest,
)
from shop_admin.models.user_account import UserAccount
from shop_admin.services.order_service import OrderService

router = APIRouter(prefix="/orders")

order_service = OrderService()


def _mutation(order, message: str) -> OrderMutationResponse:
    return OrderMutationResponse(order=OrderResponse.model_validate(order), message=message)


@router.post("", response_model=OrderMutationResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    payload: OrderCreateRequest,
    current_user: Optional[UserAccount] = Depends(get_optional_user),
):
    order = order_service.create_order(
        customer_info=payload.customer_info.model_dump(by_alias=True),
        items=[item.model_dump(by_alias=True) for item in payload.items],
        total=payload.total,
        user_id=current_user.id if current_user else None,
    )
    return _mutation(order, "Order created successfully")


@router.get("", response_model=Page[OrderResponse])
def list_orders(
    params: ListParams = Depends(),
    status_filter: Optional[str] = Query(None, alias="status"),
    payment_status: Optional[str] = Query(None, alias="paymentStatus"),
    current_user=Depends(get_current_user),
):
    """获取订单列表（管理端，分页）

    search 匹配订单号、客户姓名、客户邮箱；dateFrom / dateTo 作用于下单时间。
    """
    request = params.to_request({"status": status_filter, "paymentStatus": payment_status})
    result = order_service.list_orders(request)
    return Page[OrderResponse].from_result(result, OrderResponse)


@router.get("/users/{user_id}", response_model=Page[OrderResponse])
def list_user_orders(
    user_id: str,
    params: ListParams = Depends(),
    status_filter: Optional[str] = Query(None, alias="status"),
    current_user=Depends(get_current_user),
):
    request = params.to_request({"status": status_filter})
    result = order_service.list_orders(request, user_id=user_id)
    return Page[OrderResponse].from_result(result, OrderResponse)


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(order_id: str):
    return OrderResponse.model_validate(order_service.get_order(order_id))


@router.patch("/{order_id}/status", response_model=OrderMutationResponse)
def update_order_status(order_id: str, payload: OrderStatusRequest, current_user=Depends(get_current_user)):
    order = order_service.update_status(order_id, payload.status)
    return _mutation(order, "Order status updated successfully")


@router.put("/{order_id}", response_model=OrderMutationResponse)
def update_order(order_id: str, payload: OrderUpdateRequest, current_user=Depends(get_current_user)):
    order = order_service.update_order(order_id, payload.to_changes())
    return _mutation(order, "Order updated successfully")


@router.delete("/{order_id}", response_model=MessageResponse)
def delete_order(order_id: str, current_user=Depends(get_current_user)):
    order_service.delete_order(order_id)
    return MessageResponse(message="Order deleted successfully")


@router.patch("/{order_id}/payment-status", response_model=OrderMutationResponse)
def update_payment_status(order_id: str, payload: OrderStatusRequest, current_user=Depends(get_current_user)):
    order = order_service.update_payment_status(order_id, payload.status)
    return _mutation(order, "Payment status updated successfully")


@router.patch("/{order_id}/tracking", response_model=OrderMutationResponse)
def add_tracking(order_id: str, payload: TrackingRequest, current_user=Depends(get_current_user)):
    order = order_service.add_tracking(
        order_id,
        tracking_number=payload.tracking_number,
        carrier=payload.carrier,
    )
    return _mutation(order, "Tracking number added successfully")
