"""Health check endpoints and Prometheus metrics."""

import secrets
import time

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader
from prometheus_fastapi_instrumentator import Instrumentator
from redis.exceptions import RedisError

from src.taskflow.core.config import get_settings
from src.taskflow.core.redis import get_redis
from src.taskflow.core.shutdown import request_tracker

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> JSONResponse:
    """Liveness. Reports 503 while the server drains for shutdown."""
    if request_tracker.is_shutting_down:
        return JSONResponse(
            content={
                "status": "draining",
                "in_flight_requests": request_tracker.in_flight_count,
            },
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return JSONResponse(content={"status": "healthy", "timestamp": time.time()})


@router.get("/db")
async def health_db(request: Request) -> JSONResponse:
    """Database connectivity."""
    if await request.app.state.database.ping():
        return JSONResponse(content={"status": "healthy", "database": "connected"})
    return JSONResponse(
        content={"status": "unhealthy", "database": "disconnected"},
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
    )


@router.get("/redis")
async def health_redis() -> JSONResponse:
    """Redis connectivity. Redis is optional, so "not configured" is healthy."""
    if not get_settings().redis_url:
        return JSONResponse(content={"status": "healthy", "redis": "not_configured"})

    redis = await get_redis()
    if redis is not None:
        try:
            await redis.ping()  # type: ignore[misc]
            return JSONResponse(content={"status": "healthy", "redis": "connected"})
        except RedisError:
            pass
    return JSONResponse(
        content={"status": "unhealthy", "redis": "disconnected"},
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
    )


def setup_metrics(app: FastAPI) -> None:
    """Expose Prometheus metrics at /metrics, behind X-Metrics-Key when configured."""
    settings = get_settings()
    instrumentator = Instrumentator(excluded_handlers=["/health.*", "/metrics"]).instrument(app)

    if not settings.metrics_api_key:
        instrumentator.expose(app, endpoint="/metrics")
        return

    api_key_header = APIKeyHeader(name="X-Metrics-Key", auto_error=False)

    async def verify_metrics_key(api_key: str | None = Depends(api_key_header)) -> None:
        if (
            api_key is None
            or settings.metrics_api_key is None
            or not secrets.compare_digest(api_key, settings.metrics_api_key)
        ):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or missing metrics API key",
            )

    instrumentator.expose(app, endpoint="/metrics", dependencies=[Depends(verify_metrics_key)])
