from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from shop_admin.api.auth import get_current_user
from shop_admin.api.pagination import ListParams
from shop_admin.api.schemas import (
    ConfirmPaymentRequest,
    CreateIntentRequest,
    CreateIntentResponse,
    Page,
    PaymentActionResponse,
    PaymentAnalyticsResponse,
    PaymentIntentResponse,
    PaymentMethodResponse,
    PaymentRecordResponse,
    PaymentStatusResponse,
    ProcessPaymentRequest,
    RefundRequest,
    RefundResponse,
)
from shop_admin.models.user_account import UserAccount
from shop_admin.services.payment_service import PAYMENT_METHODS, PaymentService
from shop_admin.utils.timeutils import parse_timestamp

router = APIRouter(prefix="/payments")

payment_service = PaymentService()


@router.get("/methods", response_model=List[PaymentMethodResponse])
def list_payment_methods():
    return PAYMENT_METHODS


@router.post("/create-intent", response_model=CreateIntentResponse)
def create_payment_intent(payload: CreateIntentRequest):
    payment = payment_service.create_intent(
        amount=payload.amount,
        currency=payload.currency,
        order_id=payload.order_id,
        customer_info=payload.customer_info,
    )
    return CreateIntentResponse(payment_intent=PaymentIntentResponse.model_validate(payment))


@router.get("/history", response_model=Page[PaymentRecordResponse])
def payment_history(
    params: ListParams = Depends(),
    status_filter: Optional[str] = Query(None, alias="status"),
    current_user=Depends(get_current_user),
):
    """支付记录（分页），默认按创建时间倒序"""
    request = params.to_request({"status": status_filter})
    result = payment_service.history(request)
    return Page[PaymentRecordResponse].from_result(result, PaymentRecordResponse)


@router.get("/analytics", response_model=PaymentAnalyticsResponse)
def payment_analytics(
    date_from: Optional[str] = Query(None, alias="dateFrom"),
    date_to: Optional[str] = Query(None, alias="dateTo"),
    current_user=Depends(get_current_user),
):
    return payment_service.analytics(
        date_from=parse_timestamp(date_from, field="dateFrom"),
        date_to=parse_timestamp(date_to, field="dateTo"),
    )


@router.get("/{payment_id}/status", response_model=PaymentStatusResponse)
def get_payment_status(payment_id: str):
    return payment_service.status_view(payment_id)


@router.post("/{payment_id}/process", response_model=PaymentActionResponse)
def process_payment(payment_id: str, payload: Optional[ProcessPaymentRequest] = None):
    payload = payload or ProcessPaymentRequest()
    payment = payment_service.process(
        payment_id,
        payment_method=payload.payment_method,
        payment_details=payload.payment_details,
    )
    return PaymentActionResponse(
        success=True,
        payment_id=payment.id,
        status=payment.status,
        message="Payment is being processed",
    )


@router.post("/{payment_id}/confirm", response_model=PaymentActionResponse)
def confirm_payment(
    payment_id: str,
    payload: Optional[ConfirmPaymentRequest] = None,
    current_user: UserAccount = Depends(get_current_user),
):
    payload = payload or ConfirmPaymentRequest()
    payment = payment_service.confirm(
        payment_id,
        confirmed_by=current_user.id,
        confirmation_data=payload.confirmation_data,
    )
    return PaymentActionResponse(
        success=True,
        payment_id=payment.id,
        status=payment.status,
        message="Payment confirmed successfully",
    )


@router.post("/{payment_id}/refund", response_model=RefundResponse)
def refund_payment(
    payment_id: str,
    payload: Optional[RefundRequest] = None,
    current_user: UserAccount = Depends(get_current_user),
):
    payload = payload or RefundRequest()
    refund = payment_service.refund(
        payment_id,
        refunded_by=current_user.id,
        amount=payload.amount,
        reason=payload.reason,
    )
    return RefundResponse(
        success=True,
        refund_id=refund["refundId"],
        amount=refund["amount"],
        status=refund["status"],
        message="Refund initiated successfully",
    )
