"""Database models and configuration"""

from shop_admin.models.db import init_db, get_session, engine
from shop_admin.models.user_account import UserAccount, UserRole
from shop_admin.models.product import Product
from shop_admin.models.order import Order
from shop_admin.models.payment import Payment, PaymentStatus

__all__ = [
    # Database
    "init_db",
    "get_session",
    "engine",
    # Models
    "UserAccount",
    "UserRole",
    "Product",
    "Order",
    "Payment",
    "PaymentStatus",
]
