"""Rate limiting with slowapi and optional Redis storage.

Three kinds of limits share one slowapi ``Limiter`` and its storage:

- Per-route limits declared with ``@limiter.limit(...)``; the decorated
  endpoint must accept a ``request: Request`` argument.
- Failed-attempt limits (``@limit_failed_attempts(...)``) for credential
  endpoints: only calls that end in an ``AppError`` are counted, so a user
  signing in successfully from several devices is never locked out.
- A general per-IP limit applied to every request by
  ``global_rate_limit_middleware``, except monitoring and docs endpoints.

Storage is Redis when ``REDIS_URL`` is configured, otherwise in-memory (per
process). Everything is disabled when ``APP_ENV=testing``.
"""

import functools
from collections.abc import Awaitable, Callable
from typing import Any

from limits import RateLimitItem, parse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from slowapi.wrappers import Limit
from starlette.requests import Request
from starlette.responses import Response

from src.taskflow.core.config import get_settings
from src.taskflow.core.exceptions import AppError, rate_limit_exceeded_handler
from src.taskflow.core.logging import get_logger

logger = get_logger(__name__)

GLOBAL_SCOPE = "global"

# Health checks, metrics scrapes and docs are never limited
GLOBAL_EXEMPT_PATHS = frozenset(
    {"/health", "/health/db", "/health/redis", "/metrics", "/docs", "/redoc", "/openapi.json"}
)


def get_rate_limit_key(request: Request) -> str:
    """Key buckets by client IP only.

    Never include client-controlled headers (such as X-Organization-ID):
    rotating them would mint unlimited fresh buckets.
    """
    return get_remote_address(request) or "unknown"


def create_limiter() -> Limiter:
    """Create the limiter. Disabled when ``APP_ENV=testing``."""
    settings = get_settings()

    if settings.app_env == "testing":
        logger.info("Rate limiter disabled (testing environment)")
        return Limiter(key_func=get_rate_limit_key, enabled=False)

    if settings.redis_url:
        logger.info("Rate limiter using Redis backend")
        return Limiter(key_func=get_rate_limit_key, storage_uri=settings.redis_url)

    logger.info("Rate limiter using in-memory backend (not distributed)")
    return Limiter(key_func=get_rate_limit_key)


# Read at import time; route decorators bind to this instance.
limiter = create_limiter()


def _exceeded(item: RateLimitItem, scope: str) -> RateLimitExceeded:
    """slowapi's exception for ``item``, rendered by ``rate_limit_exceeded_handler``."""
    limit = Limit(
        item,
        get_rate_limit_key,
        scope,
        per_method=False,
        methods=None,
        error_message=None,
        exempt_when=None,
        cost=1,
        override_defaults=True,
    )
    return RateLimitExceeded(limit)


def limit_failed_attempts(
    limit_value: str,
) -> Callable[[Callable[..., Awaitable[Any]]], Callable[..., Awaitable[Any]]]:
    """Limit an endpoint by the number of its failed calls per client IP.

    A call fails when the endpoint raises an ``AppError`` (bad credentials,
    email already registered). Once the window holds ``limit_value`` failures,
    every further call is rejected with 429 until the window resets,
    successful or not. Request validation errors never reach the endpoint and
    are not counted.

    Like ``@limiter.limit``, the endpoint must accept ``request: Request``.
    """
    item = parse(limit_value)

    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
        scope = f"failures:{func.__module__}.{func.__name__}"

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            if not limiter.enabled:
                return await func(*args, **kwargs)

            request: Request = kwargs["request"]
            key = get_rate_limit_key(request)
            if not limiter.limiter.test(item, key, scope):
                logger.warning(
                    "Failed-attempt limit exceeded",
                    client_ip=key,
                    path=request.url.path,
                )
                raise _exceeded(item, scope)

            try:
                return await func(*args, **kwargs)
            except AppError:
                limiter.limiter.hit(item, key, scope)
                raise

        return wrapper

    return decorator


async def global_rate_limit_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """General per-IP limit (``GENERAL_RATE_LIMIT``) applied before any route logic.

    Runs as middleware, so the 429 is rendered here rather than by the
    exception handlers.
    """
    if not limiter.enabled or request.url.path in GLOBAL_EXEMPT_PATHS:
        return await call_next(request)

    item = parse(get_settings().general_rate_limit)
    key = get_rate_limit_key(request)
    if not limiter.limiter.hit(item, key, GLOBAL_SCOPE):
        logger.warning("Global rate limit exceeded", client_ip=key, path=request.url.path)
        return rate_limit_exceeded_handler(request, _exceeded(item, GLOBAL_SCOPE))

    return await call_next(request)
