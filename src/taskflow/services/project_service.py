"""Organization-scoped project management."""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.taskflow.core.exceptions import (
    OrganizationLimitReached,
    ProjectKeyExists,
    ProjectNotFound,
)
from src.taskflow.core.logging import get_logger
from src.taskflow.models import Organization, Project
from src.taskflow.models.base import utc_now
from src.taskflow.repositories import OrganizationRepository, ProjectRepository
from src.taskflow.schemas import ProjectCreate, ProjectUpdate

logger = get_logger(__name__)


class ProjectService:
    def __init__(
        self,
        project_repo: ProjectRepository,
        organization_repo: OrganizationRepository,
        session: AsyncSession,
    ):
        self.project_repo = project_repo
        self.organization_repo = organization_repo
        self.session = session

    async def list_projects(
        self, organization: Organization, include_archived: bool = False
    ) -> list[Project]:
        return await self.project_repo.list_for_organization(organization.id, include_archived)

    async def get_project(self, organization: Organization, project_id: UUID) -> Project:
        """Projects of other organizations are reported as not found."""
        project = await self.project_repo.get_in_organization(organization.id, project_id)
        if project is None:
            raise ProjectNotFound()
        return project

    async def create_project(self, organization: Organization, data: ProjectCreate) -> Project:
        """Create a project within the organization's ``max_projects`` limit.

        Raises:
            ProjectKeyExists: The key is already used in this organization
            OrganizationLimitReached: ``max_projects`` reached
        """
        try:
            if await self.project_repo.get_by_key(organization.id, data.key) is not None:
                raise ProjectKeyExists()
            if not await self.organization_repo.reserve_project_slot(organization.id):
                raise OrganizationLimitReached(
                    f"Organization has reached its limit of {organization.max_projects} projects"
                )

            project = Project(organization_id=organization.id, **data.model_dump())
            self.project_repo.add(project)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ProjectKeyExists() from e
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Project created",
            organization_id=str(organization.id),
            project_id=str(project.id),
        )
        return project

    async def update_project(
        self, organization: Organization, project_id: UUID, data: ProjectUpdate
    ) -> Project:
        try:
            project = await self.get_project(organization, project_id)
            for field, value in data.model_dump(exclude_unset=True).items():
                if value is None and field in ("name", "color", "is_archived"):
                    continue
                setattr(project, field, value)
            project.updated_at = utc_now()
            self.session.add(project)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return project

    async def delete_project(self, organization: Organization, project_id: UUID) -> None:
        try:
            project = await self.get_project(organization, project_id)
            await self.project_repo.delete(project)
            await self.organization_repo.release_project_slot(organization.id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info(
            "Project deleted",
            organization_id=str(organization.id),
            project_id=str(project_id),
        )
