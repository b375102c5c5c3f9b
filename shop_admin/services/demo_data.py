"""Demo catalog loaded into an empty database at startup."""
from datetime import datetime, timezone

from sqlmodel import select

from shop_admin.models.db import get_session
from shop_admin.models.order import Order
from shop_admin.models.product import Product
from shop_admin.utils.logging_config import get_logger

logger = get_logger(__name__)


def _demo_products():
    return [
        Product(
            id="prod_123",
            name="Chanel No. 5",
            description="Classic Chanel floral with jasmine and ylang-ylang notes",
            price=1500000,
            original_price=1800000,
            featured=True,
            is_new=False,
            category="luxury",
            brand="Chanel",
            size="100ml",
            stock=10,
            images=["/images/chanel-no5.jpg"],
            status="active",
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
            updated_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        ),
        Product(
            id="prod_124",
            name="Dior Sauvage",
            description="Bold masculine scent with bergamot and pepper notes",
            price=1200000,
            original_price=1400000,
            featured=False,
            is_new=True,
            category="mens",
            brand="Dior",
            size="100ml",
            stock=15,
            images=["/images/dior-sauvage.jpg"],
            status="active",
            created_at=datetime(2024, 1, 10, tzinfo=timezone.utc),
            updated_at=datetime(2024, 1, 10, tzinfo=timezone.utc),
        ),
        Product(
            id="prod_125",
            name="Tom Ford Black Orchid",
            description="Seductive black orchid and vanilla",
            price=2200000,
            original_price=2500000,
            featured=True,
            is_new=True,
            category="unisex",
            brand="Tom Ford",
            size="50ml",
            stock=8,
            images=["/images/tom-ford-black-orchid.jpg"],
            status="active",
            created_at=datetime(2024, 1, 15, tzinfo=timezone.utc),
            updated_at=datetime(2024, 1, 15, tzinfo=timezone.utc),
        ),
    ]


def _demo_orders():
    return [
        Order(
            id="ORD-1703123456789",
            status="pending",
            total=3000000,
            order_date=datetime(2024, 1, 15, tzinfo=timezone.utc),
            customer_info={
                "firstName": "Nguyen",
                "lastName": "Van A",
                "email": "user@rareperfume.vn",
                "phone": "0123456789",
                "address": "123 ABC Street, District 1, Ho Chi Minh City",
            },
            items=[
                {
                    "productId": "prod_123",
                    "productName": "Chanel No. 5",
                    "quantity": 2,
                    "price": 1500000,
                    "total": 3000000,
                }
            ],
            payment_status="pending",
            shipping_address="123 ABC Street, District 1, Ho Chi Minh City",
            created_at=datetime(2024, 1, 15, tzinfo=timezone.utc),
            updated_at=datetime(2024, 1, 15, tzinfo=timezone.utc),
        )
    ]


def seed_demo_data() -> None:
    """Insert the demo products and order into tables that are still empty."""
    with get_session() as session:
        if session.exec(select(Product)).first() is None:
            for product in _demo_products():
                session.add(product)
            logger.info("Seeded demo products")
        if session.exec(select(Order)).first() is None:
            for order in _demo_orders():
                session.add(order)
            logger.info("Seeded demo orders")
        session.commit()
