"""
统一错误处理

所有失败响应统一为 {"error": {"message": ..., "status": ...}}：
- ShopAdminError 子类按其 status_code 返回
- 请求参数校验失败返回 400
- 未知异常只记录到服务端日志，客户端只看到通用信息
"""
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shop_admin.utils.exceptions import InternalFaultError, ShopAdminError
from shop_admin.utils.logging_config import get_logger

logger = get_logger(__name__)

LOCATION_PREFIXES = {"body", "query", "path", "header"}


def create_error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"message": message, "status": status_code}},
    )


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part not in LOCATION_PREFIXES]
    message = first.get("msg", "Invalid value")
    if location:
        return f"{'.'.join(location)}: {message}"
    return message


async def shop_admin_error_handler(request: Request, exc: ShopAdminError) -> JSONResponse:
    if isinstance(exc, InternalFaultError):
        logger.error(f"[ERROR] {request.method} {request.url.path} | {exc.message}")
        return create_error_response("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)
    logger.info(f"[ERROR] {request.method} {request.url.path} | {exc.status_code} {exc.message}")
    return create_error_response(exc.message, exc.status_code)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = _describe_validation_error(exc)
    logger.info(f"[ERROR] {request.method} {request.url.path} | 400 {message}")
    return create_error_response(message, status.HTTP_400_BAD_REQUEST)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        message = f"Route {request.url.path} not found"
    else:
        message = str(exc.detail)
    return create_error_response(message, exc.status_code)


async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        f"Unhandled exception: {request.method} {request.url.path} | {type(exc).__name__}: {exc}"
    )
    return create_error_response("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with FastAPI app."""
    app.add_exception_handler(ShopAdminError, shop_admin_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, internal_error_handler)
