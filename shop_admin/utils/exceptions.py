"""
Exception taxonomy for the shop admin backend.

Services raise these; the API layer renders them as
``{"error": {"message": ..., "status": ...}}`` with the matching HTTP status.
"""

from typing import Any, Dict


class ShopAdminError(Exception):
    """Base exception for all shop admin errors."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": {"message": self.message, "status": self.status_code}}


class ValidationError(ShopAdminError):
    """Missing or malformed input."""

    status_code = 400


class UnauthenticatedError(ShopAdminError):
    """Missing, expired or unknown token, or a token whose subject is gone."""

    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class NotFoundError(ShopAdminError):
    """Resource not found."""

    status_code = 404

    def __init__(self, resource: str):
        super().__init__(f"{resource} not found")
        self.resource = resource


class ConflictError(ShopAdminError):
    """Request conflicts with existing state."""

    status_code = 409


class DuplicateEmailError(ConflictError):
    def __init__(self, email: str):
        super().__init__("User already exists")
        self.email = email


class InternalFaultError(ShopAdminError):
    """Unexpected fault; the message shown to clients is always generic."""

    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)


__all__ = [
    "ShopAdminError",
    "ValidationError",
    "UnauthenticatedError",
    "NotFoundError",
    "ConflictError",
    "DuplicateEmailError",
    "InternalFaultError",
]
