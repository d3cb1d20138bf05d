"""Optional Redis connection with graceful fallback.

Redis only backs the revoked refresh-token cache and the rate limiter
storage. When ``REDIS_URL`` is unset or the server is unreachable, callers
get ``None`` and fall back to the database.
"""

from redis.asyncio import ConnectionPool, Redis

from src.taskflow.core.config import get_settings
from src.taskflow.core.logging import get_logger

logger = get_logger(__name__)


class RedisManager:
    """Lazily connects once and remembers failures until closed."""

    def __init__(self) -> None:
        self._pool: ConnectionPool | None = None
        self._client: Redis | None = None
        self._attempted = False

    async def get(self) -> Redis | None:
        if self._client is not None:
            return self._client
        if self._attempted:
            return None

        self._attempted = True
        settings = get_settings()
        if not settings.redis_url:
            logger.info("Redis not configured (REDIS_URL not set)")
            return None

        try:
            self._pool = ConnectionPool.from_url(
                settings.redis_url,
                max_connections=settings.redis_pool_size,
                decode_responses=True,
            )
            self._client = Redis(connection_pool=self._pool)
            await self._client.ping()  # type: ignore[misc]
        except Exception as e:
            logger.warning("Redis connection failed, continuing without it", error=str(e))
            await self.close()
            self._attempted = True
            return None

        logger.info("Redis connected")
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            logger.info("Redis connection closed")
        if self._pool is not None:
            await self._pool.disconnect()
        self.reset()

    def reset(self) -> None:
        """Forget the client without closing it. For testing."""
        self._client = None
        self._pool = None
        self._attempted = False


redis_manager = RedisManager()


async def get_redis() -> Redis | None:
    """Get the shared Redis client, or None when unavailable."""
    return await redis_manager.get()


async def close_redis() -> None:
    """Close the shared Redis client. Call during shutdown."""
    await redis_manager.close()


def reset_redis_state() -> None:
    """Reset Redis state so tests can reinitialize the connection."""
    redis_manager.reset()
