"""Base repository with common CRUD operations."""

from datetime import datetime
from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from src.taskflow.schemas.pagination import decode_cursor, encode_cursor


ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """Base repository providing common database operations.

    Repositories handle data access only. Transaction control (commit)
    belongs to the service layer.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, id: UUID) -> ModelType | None:
        """Get a record by its primary key."""
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)  # type: ignore[attr-defined]
        )
        return result.scalar_one_or_none()

    def add(self, entity: ModelType) -> None:
        """Add entity to session (no flush/commit)."""
        self.session.add(entity)

    async def delete(self, entity: ModelType) -> None:
        """Mark entity for deletion (no commit)."""
        await self.session.delete(entity)

    async def paginate(
        self,
        query: Any,
        cursor: str | None,
        limit: int,
        cursor_field: Any,
    ) -> tuple[list[Any], str | None, bool]:
        """Execute newest-first cursor pagination on a query.

        Args:
            query: Select statement to paginate. May select a model or a row
                of several entities; ``cursor_field`` is read from the first.
            cursor: Cursor from the previous page, or None for the first page
            limit: Maximum number of items to return
            cursor_field: Datetime column to order and page by

        Returns:
            Tuple of (items, next_cursor, has_more). An unreadable cursor is
            treated as the start of the result set.
        """
        if cursor:
            try:
                query = query.where(cursor_field < datetime.fromisoformat(decode_cursor(cursor)))
            except ValueError:
                pass

        query = query.order_by(cursor_field.desc()).limit(limit + 1)
        result = await self.session.execute(query)
        rows = list(result.all())
        items = [row[0] if len(row) == 1 else tuple(row) for row in rows]

        has_more = len(items) > limit
        if has_more:
            items = items[:limit]

        next_cursor = None
        if has_more and items:
            last = items[-1]
            entity = last[0] if isinstance(last, tuple) else last
            value = getattr(entity, cursor_field.key)
            if isinstance(value, datetime):
                next_cursor = encode_cursor(value.isoformat())

        return items, next_cursor, has_more
