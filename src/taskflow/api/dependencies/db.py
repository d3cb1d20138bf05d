"""Database session dependencies."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.taskflow.core.db import Database


def get_database(request: Request) -> Database:
    """The handle created in the lifespan (or injected by ``create_app``)."""
    return request.app.state.database  # type: ignore[no-any-return]


async def get_db_session(
    database: Annotated[Database, Depends(get_database)],
) -> AsyncGenerator[AsyncSession]:
    """One session per request, shared by every dependency that asks for it."""
    async with database.session() as session:
        yield session


DBSession = Annotated[AsyncSession, Depends(get_db_session)]
