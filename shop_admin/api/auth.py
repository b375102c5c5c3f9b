from typing import Optional

from fastapi import APIRouter, Depends, Header, Request, status

from shop_admin.api.schemas import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from shop_admin.models.user_account import UserAccount
from shop_admin.services.auth_service import AuthService
from shop_admin.utils.exceptions import UnauthenticatedError

router = APIRouter(prefix="/auth")


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None, alias="Authorization"),
    auth_service: AuthService = Depends(get_auth_service),
) -> UserAccount:
    """获取当前登录用户（依赖注入）

    受保护的接口在处理函数执行前经过这里；解析出的用户同时挂到 request.state.user。
    """
    user = auth_service.authenticate(authorization)
    request.state.user = user
    return user


def get_optional_user(
    request: Request,
    authorization: Optional[str] = Header(None, alias="Authorization"),
    auth_service: AuthService = Depends(get_auth_service),
) -> Optional[UserAccount]:
    if authorization is None:
        return None
    try:
        return get_current_user(request, authorization, auth_service)
    except UnauthenticatedError:
        return None


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, auth_service: AuthService = Depends(get_auth_service)):
    user, token = auth_service.login(email=payload.email, password=payload.password)
    return AuthResponse(token=token, user=UserResponse.model_validate(user), message="Login successful")


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, auth_service: AuthService = Depends(get_auth_service)):
    user, token = auth_service.register_user(
        email=payload.email,
        password=payload.password,
        name=payload.name,
    )
    return AuthResponse(token=token, user=UserResponse.model_validate(user), message="Registration successful")


@router.get("/me", response_model=UserResponse)
def profile(current_user: UserAccount = Depends(get_current_user)):
    return UserResponse.model_validate(current_user)


@router.post("/refresh", response_model=TokenResponse)
def refresh(
    current_user: UserAccount = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
):
    token = auth_service.refresh(current_user)
    return TokenResponse(token=token, message="Token refreshed successfully")


@router.post("/logout", response_model=MessageResponse)
def logout(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    current_user: UserAccount = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
):
    auth_service.logout(authorization)
    return MessageResponse(message="Logged out successfully")
