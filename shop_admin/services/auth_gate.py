from __future__ import annotations

from typing import Optional

from shop_admin.models.user_account import UserAccount
from shop_admin.services.credential_store import CredentialStore
from shop_admin.services.token_registry import SessionTokenRegistry
from shop_admin.utils.exceptions import UnauthenticatedError

BEARER_PREFIX = "bearer "


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization or not authorization.lower().startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None


class AuthenticationGate:
    """Resolves a bearer header to a user on every protected request.

    The only state change is the lazy eviction done by the registry when it
    sees an expired token.
    """

    def __init__(self, registry: SessionTokenRegistry, store: CredentialStore) -> None:
        self._registry = registry
        self._store = store

    def authenticate(self, authorization: Optional[str]) -> UserAccount:
        token = extract_bearer_token(authorization)
        if token is None:
            raise UnauthenticatedError("No token provided")

        subject_id = self._registry.validate(token)
        if subject_id is None:
            raise UnauthenticatedError("Token expired or invalid")

        # tokens keep only the id; a deleted user invalidates them here
        user = self._store.find_by_id(subject_id)
        if user is None:
            raise UnauthenticatedError("User not found")
        return user
