"""Revoked refresh-token cache backed by Redis.

Hashes of logged-out and rotated refresh tokens are remembered until the
token would have expired anyway. A hit rejects a refresh attempt without a
database round trip; a miss or an unavailable Redis defers to the stored
token rows, which remain the source of truth.
"""

from redis.exceptions import RedisError

from src.taskflow.core.logging import get_logger
from src.taskflow.core.redis import get_redis

logger = get_logger(__name__)

PREFIX_REVOKED_REFRESH = "revoked_refresh"


def _key(token_hash: str) -> str:
    return f"{PREFIX_REVOKED_REFRESH}:{token_hash}"


async def revoke_refresh_token(token_hash: str, ttl: int) -> bool:
    """Remember ``token_hash`` as revoked for ``ttl`` seconds.

    Returns:
        True if stored in Redis, False if Redis is unavailable or ttl <= 0
    """
    if ttl <= 0:
        return False
    redis = await get_redis()
    if not redis:
        return False
    try:
        await redis.setex(_key(token_hash), ttl, "1")
    except RedisError as e:
        logger.warning("Failed to cache revoked refresh token", error=str(e))
        return False
    return True


async def is_refresh_token_revoked(token_hash: str) -> bool | None:
    """Check the revoked cache.

    Returns:
        True: token was revoked
        False: Redis confirmed it is not in the cache
        None: Redis unavailable (caller must rely on the database)
    """
    redis = await get_redis()
    if not redis:
        return None
    try:
        result = await redis.get(_key(token_hash))
    except RedisError as e:
        logger.warning("Revoked token cache lookup failed", error=str(e))
        return None
    return result is not None
