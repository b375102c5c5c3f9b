from shop_admin.middleware.error_handler import setup_exception_handlers
from shop_admin.middleware.logging_middleware import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware", "setup_exception_handlers"]
