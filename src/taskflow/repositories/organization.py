"""Repository for Organization entity, including plan usage counters."""

from uuid import UUID

from sqlalchemy import update
from sqlmodel import select

from src.taskflow.models import Organization
from src.taskflow.models.base import utc_now
from src.taskflow.repositories.base import BaseRepository


class OrganizationRepository(BaseRepository[Organization]):
    model = Organization

    async def get_by_slug(self, slug: str) -> Organization | None:
        result = await self.session.execute(select(Organization).where(Organization.slug == slug))
        return result.scalar_one_or_none()

    async def exists_by_slug(self, slug: str) -> bool:
        return await self.get_by_slug(slug) is not None

    async def _adjust_counter(
        self, organization_id: UUID, counter: str, limit: str | None, delta: int
    ) -> bool:
        column = getattr(Organization, counter)
        stmt = (
            update(Organization)
            .where(Organization.id == organization_id)  # type: ignore[arg-type]
            .values({counter: column + delta, "updated_at": utc_now()})
        )
        if limit is not None:
            stmt = stmt.where(column < getattr(Organization, limit))
        else:
            stmt = stmt.where(column + delta >= 0)
        result = await self.session.execute(stmt)
        return bool(result.rowcount)  # type: ignore[attr-defined]

    async def reserve_user_slot(self, organization_id: UUID) -> bool:
        """Atomically increment ``current_users`` if below ``max_users``.

        Returns:
            False if the organization is at its member limit
        """
        return await self._adjust_counter(organization_id, "current_users", "max_users", 1)

    async def release_user_slot(self, organization_id: UUID) -> None:
        await self._adjust_counter(organization_id, "current_users", None, -1)

    async def reserve_project_slot(self, organization_id: UUID) -> bool:
        """Atomically increment ``current_projects`` if below ``max_projects``."""
        return await self._adjust_counter(
            organization_id, "current_projects", "max_projects", 1
        )

    async def release_project_slot(self, organization_id: UUID) -> None:
        await self._adjust_counter(organization_id, "current_projects", None, -1)
