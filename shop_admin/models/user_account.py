import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import Field, SQLModel

from shop_admin.utils.timeutils import utcnow


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


class UserAccount(SQLModel, table=True):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    email: str = Field(index=True, unique=True)
    password_hash: str
    name: str
    role: str = Field(default=UserRole.USER.value, index=True, description="用户角色：admin 或 user")
    avatar: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
