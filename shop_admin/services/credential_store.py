from __future__ import annotations

import os
from typing import Optional

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from shop_admin.models.db import get_session
from shop_admin.models.user_account import UserAccount, UserRole
from shop_admin.utils.exceptions import DuplicateEmailError
from shop_admin.utils.logging_config import get_logger

BCRYPT_ROUNDS = int(os.getenv("SHOP_ADMIN_BCRYPT_ROUNDS", "12"))

logger = get_logger(__name__)


class CredentialStore:
    """User records backed by the ``useraccount`` table.

    Uniqueness of email is checked by callers with :meth:`find_by_email`
    before :meth:`insert`. The two calls are not atomic; the unique index on
    ``email`` is what finally rejects a concurrent duplicate.
    """

    def __init__(self, rounds: int = BCRYPT_ROUNDS) -> None:
        self._rounds = rounds
        self._dummy_hash: Optional[str] = None

    def find_by_id(self, user_id: str) -> Optional[UserAccount]:
        with get_session() as session:
            return session.get(UserAccount, user_id)

    def find_by_email(self, email: str) -> Optional[UserAccount]:
        with get_session() as session:
            return session.exec(
                select(UserAccount).where(UserAccount.email == email)
            ).first()

    def insert(
        self,
        *,
        email: str,
        password: str,
        name: str,
        role: str = UserRole.USER.value,
        avatar: Optional[str] = None,
    ) -> UserAccount:
        user = UserAccount(
            email=email,
            password_hash=self._hash_password(password),
            name=name,
            role=role,
            avatar=avatar,
        )
        with get_session() as session:
            session.add(user)
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                logger.warning(f"Duplicate email rejected by store: {email}")
                raise DuplicateEmailError(email)
            session.refresh(user)
            return user

    def verify_credential(self, email: str, password: str) -> Optional[UserAccount]:
        """Return the user when ``password`` matches, ``None`` otherwise.

        Unknown email and wrong password are deliberately indistinguishable,
        and both paths run one bcrypt comparison.
        """
        user = self.find_by_email(email)
        if not user:
            self._verify_password(password, self._get_dummy_hash())
            return None
        if not self._verify_password(password, user.password_hash):
            return None
        return user

    def _hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(_secret_bytes(password), salt).decode("utf-8")

    def _verify_password(self, password: str, hashed: str) -> bool:
        try:
            return bcrypt.checkpw(_secret_bytes(password), hashed.encode("utf-8"))
        except ValueError:
            return False

    def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = self._hash_password("not-a-real-password")
        return self._dummy_hash


def _secret_bytes(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes; newer releases reject longer input
    return password.encode("utf-8")[:72]
