"""Project endpoints - organization-scoped CRUD."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from src.taskflow.api.dependencies import ProjectServiceDep, permission_required
from src.taskflow.core.security import Permission
from src.taskflow.schemas import ProjectCreate, ProjectRead, ProjectUpdate
from src.taskflow.services import TenantContext

router = APIRouter(prefix="/organizations/{organization_id}/projects", tags=["projects"])


@router.get(
    "",
    response_model=list[ProjectRead],
    summary="List projects",
    responses={200: {"description": "Projects of the organization"}},
)
async def list_projects(
    context: Annotated[TenantContext, Depends(permission_required(Permission.PROJECT_READ))],
    service: ProjectServiceDep,
    include_archived: Annotated[bool, Query(description="Include archived projects")] = False,
) -> list[ProjectRead]:
    projects = await service.list_projects(context.organization, include_archived)
    return [ProjectRead.model_validate(p) for p in projects]


@router.get(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Get project",
    responses={404: {"description": "Project not found"}},
)
async def get_project(
    project_id: UUID,
    context: Annotated[TenantContext, Depends(permission_required(Permission.PROJECT_READ))],
    service: ProjectServiceDep,
) -> ProjectRead:
    project = await service.get_project(context.organization, project_id)
    return ProjectRead.model_validate(project)


@router.post(
    "",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
    responses={
        403: {"description": "Insufficient role or project limit reached"},
        409: {"description": "Project key already exists"},
    },
)
async def create_project(
    data: ProjectCreate,
    context: Annotated[TenantContext, Depends(permission_required(Permission.PROJECT_CREATE))],
    service: ProjectServiceDep,
) -> ProjectRead:
    project = await service.create_project(context.organization, data)
    return ProjectRead.model_validate(project)


@router.patch(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Update project",
    responses={404: {"description": "Project not found"}},
)
async def update_project(
    project_id: UUID,
    data: ProjectUpdate,
    context: Annotated[TenantContext, Depends(permission_required(Permission.PROJECT_UPDATE))],
    service: ProjectServiceDep,
) -> ProjectRead:
    project = await service.update_project(context.organization, project_id, data)
    return ProjectRead.model_validate(project)


@router.delete(
    "/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete project",
    responses={404: {"description": "Project not found"}},
)
async def delete_project(
    project_id: UUID,
    context: Annotated[TenantContext, Depends(permission_required(Permission.PROJECT_DELETE))],
    service: ProjectServiceDep,
) -> None:
    await service.delete_project(context.organization, project_id)
