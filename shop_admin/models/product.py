from datetime import datetime
from typing import List, Optional

from sqlalchemy import Column, JSON
from sqlmodel import Field, SQLModel

from shop_admin.utils.timeutils import utcnow


class Product(SQLModel, table=True):
    """商品表"""

    id: str = Field(primary_key=True)  # prod_<uuid>
    name: str = Field(index=True)
    description: str = ""
    price: float
    original_price: Optional[float] = None
    featured: bool = Field(default=False)
    is_new: bool = Field(default=False)
    category: Optional[str] = Field(default=None, index=True)  # luxury/mens/womens/unisex
    brand: str = ""
    size: Optional[str] = None
    stock: int = Field(default=0)
    images: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    status: str = Field(default="active", index=True)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
