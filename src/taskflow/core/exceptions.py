"""Business error taxonomy and exception handlers with request_id in responses.

Every expected failure is an ``AppError`` carrying an HTTP status and a stable
machine-readable ``code``. Clients branch on ``code``: ``TOKEN_EXPIRED`` means
"refresh and retry", ``TOKEN_INVALID`` means "log in again".
"""

from typing import Any

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.taskflow.core.logging import get_logger

logger = get_logger(__name__)


class AppError(Exception):
    """Base class for expected, caller-recoverable errors."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "ERROR"
    message: str = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"
    message = "Validation failed"


class EmailAlreadyExists(AppError):
    status_code = status.HTTP_409_CONFLICT
    code = "EMAIL_ALREADY_EXISTS"
    message = "User with this email already exists"


class InvalidCredentials(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "INVALID_CREDENTIALS"
    message = "Invalid credentials"


class NotAuthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"
    message = "No authorization token provided"


class TokenInvalid(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "TOKEN_INVALID"
    message = "Invalid token"


class TokenExpired(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "TOKEN_EXPIRED"
    message = "Token expired"


class UserNotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "USER_NOT_FOUND"
    message = "User not found"


class OrganizationIdRequired(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "ORG_ID_REQUIRED"
    message = "Organization ID required"


class OrgAccessDenied(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "ORG_ACCESS_DENIED"
    message = "Access denied to this organization"


class OrgInactive(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "ORG_INACTIVE"
    message = "Organization subscription is not active"


class PermissionDenied(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "PERMISSION_DENIED"
    message = "Insufficient permissions"


class OrganizationLimitReached(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "ORG_LIMIT_REACHED"
    message = "Organization plan limit reached"


class SlugAlreadyExists(AppError):
    status_code = status.HTTP_409_CONFLICT
    code = "SLUG_ALREADY_EXISTS"
    message = "Organization with this slug already exists"


class DomainAlreadyExists(AppError):
    status_code = status.HTTP_409_CONFLICT
    code = "DOMAIN_ALREADY_EXISTS"
    message = "Organization with this domain already exists"


class MemberAlreadyExists(AppError):
    status_code = status.HTTP_409_CONFLICT
    code = "MEMBER_ALREADY_EXISTS"
    message = "User is already a member of this organization"


class MemberNotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "MEMBER_NOT_FOUND"
    message = "Member not found"


class LastOwner(AppError):
    status_code = status.HTTP_409_CONFLICT
    code = "LAST_OWNER"
    message = "An organization must keep at least one owner"


class ProjectNotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "PROJECT_NOT_FOUND"
    message = "Project not found"


class ProjectKeyExists(AppError):
    status_code = status.HTTP_409_CONFLICT
    code = "PROJECT_KEY_EXISTS"
    message = "Project with this key already exists"


_HTTP_STATUS_CODES: dict[int, str] = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    429: "RATE_LIMIT_EXCEEDED",
}


def error_content(detail: Any, code: str, **extra: Any) -> dict[str, Any]:
    """Build the JSON error body shared by every handler."""
    return {
        "detail": detail,
        "code": code,
        "request_id": correlation_id.get(),
        **extra,
    }


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Render slowapi rate-limit errors in the common error format.

    Kept synchronous so slowapi can call it directly as well.
    """
    response = JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=error_content(
            "Too many requests, please try again later",
            "RATE_LIMIT_EXCEEDED",
            limit=str(exc.detail),
        ),
    )
    limiter = getattr(request.app.state, "limiter", None)
    view_rate_limit = getattr(request.state, "view_rate_limit", None)
    if limiter is not None and view_rate_limit is not None:
        response = limiter._inject_headers(response, view_rate_limit)
    return response


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id and code in responses."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("Application error", code=exc.code, path=request.url.path)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_content(exc.message, exc.code),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = [
            {
                "path": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
                "message": err.get("msg", ""),
            }
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_content("Validation failed", ValidationError.code, errors=errors),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=error_content(
                exc.detail, _HTTP_STATUS_CODES.get(exc.status_code, "HTTP_ERROR")
            ),
            headers=getattr(exc, "headers", None),
        )

    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)  # type: ignore[arg-type]

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = correlation_id.get()
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=request_id,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_content("Internal server error", "INTERNAL_ERROR"),
        )
