from fastapi import APIRouter

from shop_admin.api.auth import router as auth_router
from shop_admin.api.orders import router as orders_router
from shop_admin.api.payments import router as payments_router
from shop_admin.api.products import router as products_router


router = APIRouter()

router.include_router(auth_router)
router.include_router(products_router)
router.include_router(orders_router)
router.include_router(payments_router)


@router.get("/ping")
def ping():
    return {"msg": "pong"}
