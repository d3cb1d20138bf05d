"""Authentication endpoints."""

from fastapi import APIRouter, status
from starlette.requests import Request

from src.taskflow.api.dependencies import AuthServiceDep, CurrentClaims
from src.taskflow.core.config import get_settings
from src.taskflow.core.rate_limit import limit_failed_attempts, limiter
from src.taskflow.schemas import (
    CurrentUserRead,
    LoginRequest,
    LoginResponse,
    LogoutRequest,
    MessageResponse,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
    RegisterResponse,
)

router = APIRouter(prefix="/auth", tags=["auth"])

_settings = get_settings()

_TOKEN_EXAMPLE = "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "User created and signed in"},
        400: {"description": "Validation error (bad email, weak password)"},
        409: {"description": "Email already registered"},
        429: {"description": "Too many failed attempts"},
    },
)
@limit_failed_attempts(_settings.auth_rate_limit)
async def register(
    request: Request, register_data: RegisterRequest, service: AuthServiceDep
) -> RegisterResponse:
    """Create an account and return a token pair."""
    return await service.register(
        register_data.name, register_data.email, register_data.password
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        200: {
            "description": "Successful authentication",
            "content": {
                "application/json": {
                    "example": {
                        "access_token": _TOKEN_EXAMPLE,
                        "refresh_token": _TOKEN_EXAMPLE,
                        "token_type": "bearer",
                    }
                }
            },
        },
        401: {"description": "Invalid credentials"},
        429: {"description": "Too many failed attempts"},
    },
)
@limit_failed_attempts(_settings.auth_rate_limit)
async def login(
    request: Request, login_data: LoginRequest, service: AuthServiceDep
) -> LoginResponse:
    """Authenticate and return tokens plus the caller's organizations.

    The access token is scoped to the caller's oldest membership, if any.
    """
    return await service.login(login_data.email, login_data.password)


@router.post(
    "/refresh",
    response_model=RefreshResponse,
    responses={
        200: {"description": "Token refreshed; the presented refresh token is now spent"},
        401: {"description": "TOKEN_INVALID (log in again) or TOKEN_EXPIRED"},
    },
)
@limiter.limit(_settings.refresh_rate_limit)
async def refresh(
    request: Request, refresh_data: RefreshRequest, service: AuthServiceDep
) -> RefreshResponse:
    """Exchange a refresh token for a new access token and a new refresh token."""
    return await service.refresh_access_token(refresh_data.refresh_token)


@router.post(
    "/logout",
    response_model=MessageResponse,
    responses={200: {"description": "Refresh token deleted (always succeeds)"}},
)
async def logout(logout_data: LogoutRequest, service: AuthServiceDep) -> MessageResponse:
    """Revoke a refresh token. Safe to call repeatedly."""
    return await service.logout(logout_data.refresh_token)


@router.get(
    "/me",
    response_model=CurrentUserRead,
    responses={
        401: {"description": "Missing, invalid or expired access token"},
        404: {"description": "User no longer exists"},
    },
)
async def me(claims: CurrentClaims, service: AuthServiceDep) -> CurrentUserRead:
    """Get the authenticated user with their organization memberships."""
    return await service.get_current_user(claims.user_id)
