"""Repository for Project entity."""

from uuid import UUID

from sqlmodel import select

from src.taskflow.models import Project
from src.taskflow.repositories.base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    """Projects are always looked up within one organization."""

    model = Project

    async def get_in_organization(self, organization_id: UUID, project_id: UUID) -> Project | None:
        result = await self.session.execute(
            select(Project).where(
                Project.id == project_id,
                Project.organization_id == organization_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_by_key(self, organization_id: UUID, key: str) -> Project | None:
        result = await self.session.execute(
            select(Project).where(
                Project.organization_id == organization_id,
                Project.key == key,
            )
        )
        return result.scalar_one_or_none()

    async def list_for_organization(
        self, organization_id: UUID, include_archived: bool = False
    ) -> list[Project]:
        query = select(Project).where(Project.organization_id == organization_id)
        if not include_archived:
            query = query.where(Project.is_archived == False)  # noqa: E712
        result = await self.session.execute(query.order_by(Project.created_at.asc()))  # type: ignore[attr-defined]
        return list(result.scalars().all())
