from __future__ import annotations

import os
from typing import Optional, Tuple

from shop_admin.models.user_account import UserAccount, UserRole
from shop_admin.services.auth_gate import AuthenticationGate, extract_bearer_token
from shop_admin.services.credential_store import CredentialStore
from shop_admin.services.token_registry import SessionTokenRegistry
from shop_admin.utils.exceptions import DuplicateEmailError, UnauthenticatedError
from shop_admin.utils.logging_config import get_logger

DEFAULT_ADMIN_EMAIL = os.getenv("SHOP_ADMIN_ADMIN_EMAIL", "admin@rareperfume.vn")
DEFAULT_ADMIN_PASSWORD = os.getenv("SHOP_ADMIN_ADMIN_PASSWORD", "admin123")

logger = get_logger(__name__)


class AuthService:
    """Login, registration and session lifecycle on top of the store and registry."""

    def __init__(
        self,
        *,
        store: Optional[CredentialStore] = None,
        registry: Optional[SessionTokenRegistry] = None,
    ) -> None:
        self.store = store if store is not None else CredentialStore()
        self.registry = registry if registry is not None else SessionTokenRegistry()
        self.gate = AuthenticationGate(self.registry, self.store)

    def register_user(self, *, email: str, password: str, name: str) -> Tuple[UserAccount, str]:
        if self.store.find_by_email(email):
            raise DuplicateEmailError(email)

        user = self.store.insert(email=email, password=password, name=name)
        token = self.registry.issue(user.id)
        logger.info(f"User registered: {user.email} (id={user.id})")
        return user, token

    def login(self, *, email: str, password: str) -> Tuple[UserAccount, str]:
        user = self.store.verify_credential(email, password)
        if not user:
            logger.info("Login rejected: invalid credentials")
            raise UnauthenticatedError("Invalid email or password")
        token = self.registry.issue(user.id)
        logger.info(f"User logged in: {user.email}")
        return user, token

    def authenticate(self, authorization: Optional[str]) -> UserAccount:
        return self.gate.authenticate(authorization)

    def refresh(self, user: UserAccount) -> str:
        """Issue an additional token; the presented one stays valid until its own expiry."""
        return self.registry.issue(user.id)

    def logout(self, authorization: Optional[str]) -> None:
        token = extract_bearer_token(authorization)
        if token:
            self.registry.revoke(token)

    def ensure_default_admin(
        self,
        email: str = DEFAULT_ADMIN_EMAIL,
        password: str = DEFAULT_ADMIN_PASSWORD,
    ) -> None:
        """确保存在默认管理员账号

        如果该邮箱尚未注册，则创建一个默认管理员。

        Args:
            email: 默认管理员邮箱
            password: 默认管理员密码
        """
        if self.store.find_by_email(email):
            return
        try:
            self.store.insert(email=email, password=password, name="Administrator", role=UserRole.ADMIN.value)
        except DuplicateEmailError:
            return
        logger.info(f"Default admin user created: {email}")
