import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shop_admin import __version__
from shop_admin.api.router import router as api_router
from shop_admin.middleware import RequestLoggingMiddleware, setup_exception_handlers
from shop_admin.models.db import init_db
from shop_admin.services.auth_service import AuthService
from shop_admin.services.demo_data import seed_demo_data

# Configure logging using centralized config
from shop_admin.utils.logging_config import LOG_DIR, get_logger, setup_logging

DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("SHOP_ADMIN_CORS_ORIGINS", DEFAULT_CORS_ORIGINS).split(",")
    if origin.strip()
]
SEED_DEMO_DATA = os.getenv("SHOP_ADMIN_SEED_DEMO_DATA", "true").lower() in ("1", "true", "yes")

# Initialize logging system
setup_logging(
    log_level=os.getenv("SHOP_ADMIN_LOG_LEVEL", "INFO"),
    to_file=os.getenv("SHOP_ADMIN_LOG_TO_FILE", "true").lower() in ("1", "true", "yes"),
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize persistent resources when the API boots."""
    init_db()
    # 确保存在默认管理员账号
    app.state.auth_service.ensure_default_admin()
    if SEED_DEMO_DATA:
        seed_demo_data()
    logger.info("Shop admin API started")
    yield
    # sessions live only in memory; shutting down logs everyone out
    app.state.auth_service.registry.clear()
    logger.info("Shop admin API stopped")


def create_app(auth_service: Optional[AuthService] = None) -> FastAPI:
    app = FastAPI(title="Rare Perfume Admin API", version=__version__, lifespan=lifespan)

    # one registry per process, owned by the app rather than a module global
    app.state.auth_service = auth_service if auth_service is not None else AuthService()

    # 添加请求日志中间件（在 CORS 之前）
    app.add_middleware(RequestLoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    )

    setup_exception_handlers(app)

    logger.info(f"Log directory: {LOG_DIR}")

    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    def health():
        return {
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": "Rare Perfume API",
        }

    @app.get("/")
    def root():
        return {
            "status": "ok",
            "message": "Rare Perfume API is running",
            "version": __version__,
            "endpoints": {
                "health": "/health",
                "auth": "/api/auth",
                "orders": "/api/orders",
                "products": "/api/products",
                "payments": "/api/payments",
            },
        }

    return app


app = create_app()
