"""Database handle - async engine plus session factory.

There is no module-level engine. The application builds one ``Database`` in
its lifespan, stores it on ``app.state`` and disposes it at shutdown; tests
build their own against SQLite.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.taskflow.core.config import Settings
from src.taskflow.core.logging import get_logger

logger = get_logger(__name__)


class Database:
    """Owns an ``AsyncEngine`` and hands out sessions bound to it."""

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self._session_factory = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_url(cls, url: str, **engine_kwargs: Any) -> "Database":
        """Build a handle for ``url``. Extra kwargs go to ``create_async_engine``."""
        return cls(create_async_engine(url, **engine_kwargs))

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build a pooled handle from application settings."""
        engine_kwargs: dict[str, Any] = {"pool_pre_ping": True}
        if not settings.database_url.startswith("sqlite"):
            engine_kwargs["pool_size"] = settings.database_pool_size
            engine_kwargs["max_overflow"] = settings.database_max_overflow
        return cls.from_url(settings.database_url, **engine_kwargs)

    async def connect(self) -> None:
        """Open one connection to fail fast on bad configuration."""
        async with self.engine.connect() as connection:
            await connection.execute(text("SELECT 1"))
        logger.info("Database connected", dialect=self.engine.dialect.name)

    async def ping(self) -> bool:
        """Return True if the database answers ``SELECT 1``."""
        try:
            async with self.engine.connect() as connection:
                await connection.execute(text("SELECT 1"))
        except Exception as e:
            logger.warning("Database ping failed", error=str(e))
            return False
        return True

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession]:
        """Yield a session. Callers own commit; the session is closed on exit."""
        async with self._session_factory() as session:
            yield session

    async def dispose(self) -> None:
        """Close all pooled connections. Call during shutdown."""
        await self.engine.dispose()
        logger.info("Database disposed")
