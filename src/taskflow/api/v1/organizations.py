"""Organization and membership endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from src.taskflow.api.dependencies import (
    CurrentClaims,
    OrganizationServiceDep,
    permission_required,
)
from src.taskflow.core.security import Permission
from src.taskflow.schemas import (
    MemberAdd,
    MemberRead,
    MembershipRead,
    MemberUpdate,
    OrganizationCreate,
    OrganizationRead,
    OrganizationUpdate,
    PaginatedResponse,
)
from src.taskflow.schemas.pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from src.taskflow.services import TenantContext

router = APIRouter(prefix="/organizations", tags=["organizations"])

_TENANT_ERRORS = {
    401: {"description": "Not authenticated"},
    403: {"description": "Not a member, organization inactive, or insufficient role"},
}


@router.post(
    "",
    response_model=OrganizationRead,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Slug already exists"}},
)
async def create_organization(
    data: OrganizationCreate,
    claims: CurrentClaims,
    service: OrganizationServiceDep,
) -> OrganizationRead:
    """Create an organization. The caller becomes its OWNER."""
    organization = await service.create_organization(claims.user_id, data)
    return OrganizationRead.model_validate(organization)


@router.get("", response_model=PaginatedResponse[MembershipRead])
async def list_my_organizations(
    claims: CurrentClaims,
    service: OrganizationServiceDep,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[
        int, Query(ge=1, le=MAX_PAGE_SIZE, description="Max items to return")
    ] = DEFAULT_PAGE_SIZE,
) -> PaginatedResponse[MembershipRead]:
    """List organizations the caller belongs to, newest membership first."""
    return await service.list_my_organizations(claims.user_id, cursor, limit)


@router.get("/{organization_id}", response_model=OrganizationRead, responses=_TENANT_ERRORS)
async def get_organization(
    context: Annotated[
        TenantContext, Depends(permission_required(Permission.ORGANIZATION_READ))
    ],
) -> OrganizationRead:
    return OrganizationRead.model_validate(context.organization)


@router.patch("/{organization_id}", response_model=OrganizationRead, responses=_TENANT_ERRORS)
async def update_organization(
    data: OrganizationUpdate,
    context: Annotated[
        TenantContext, Depends(permission_required(Permission.ORGANIZATION_UPDATE))
    ],
    service: OrganizationServiceDep,
) -> OrganizationRead:
    organization = await service.update_organization(context.organization, data)
    return OrganizationRead.model_validate(organization)


@router.delete(
    "/{organization_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=_TENANT_ERRORS,
)
async def delete_organization(
    context: Annotated[
        TenantContext, Depends(permission_required(Permission.ORGANIZATION_DELETE))
    ],
    service: OrganizationServiceDep,
) -> None:
    """Delete the organization with its memberships and projects."""
    await service.delete_organization(context.organization)


@router.get(
    "/{organization_id}/members",
    response_model=list[MemberRead],
    responses=_TENANT_ERRORS,
)
async def list_members(
    context: Annotated[
        TenantContext, Depends(permission_required(Permission.ORGANIZATION_READ))
    ],
    service: OrganizationServiceDep,
) -> list[MemberRead]:
    return await service.list_members(context.organization_id)


@router.post(
    "/{organization_id}/members",
    response_model=MemberRead,
    status_code=status.HTTP_201_CREATED,
    responses={
        **_TENANT_ERRORS,
        404: {"description": "No user with that email"},
        409: {"description": "User is already a member"},
    },
)
async def add_member(
    data: MemberAdd,
    context: Annotated[TenantContext, Depends(permission_required(Permission.MEMBER_INVITE))],
    service: OrganizationServiceDep,
) -> MemberRead:
    """Add an existing user. Only owners may add another owner."""
    return await service.add_member(context.organization, context.role, data)


@router.patch(
    "/{organization_id}/members/{user_id}",
    response_model=MemberRead,
    responses={
        **_TENANT_ERRORS,
        404: {"description": "Member not found"},
        409: {"description": "Would remove the last owner"},
    },
)
async def update_member_role(
    user_id: UUID,
    data: MemberUpdate,
    context: Annotated[TenantContext, Depends(permission_required(Permission.MEMBER_UPDATE))],
    service: OrganizationServiceDep,
) -> MemberRead:
    return await service.update_member_role(
        context.organization, context.role, user_id, data.role
    )


@router.delete(
    "/{organization_id}/members/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        **_TENANT_ERRORS,
        404: {"description": "Member not found"},
        409: {"description": "Would remove the last owner"},
    },
)
async def remove_member(
    user_id: UUID,
    context: Annotated[TenantContext, Depends(permission_required(Permission.MEMBER_REMOVE))],
    service: OrganizationServiceDep,
) -> None:
    await service.remove_member(context.organization, context.role, user_id)
