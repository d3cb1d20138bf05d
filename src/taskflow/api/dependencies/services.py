"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.taskflow.api.dependencies.db import DBSession
from src.taskflow.api.dependencies.repositories import (
    MembershipRepo,
    OrganizationRepo,
    ProjectRepo,
    TokenRepo,
    UserRepo,
)
from src.taskflow.services import (
    AuthService,
    OrganizationService,
    ProjectService,
    TenantResolver,
)


def get_auth_service(
    user_repo: UserRepo,
    token_repo: TokenRepo,
    membership_repo: MembershipRepo,
    session: DBSession,
) -> AuthService:
    return AuthService(user_repo, token_repo, membership_repo, session)


def get_tenant_resolver(
    organization_repo: OrganizationRepo,
    membership_repo: MembershipRepo,
) -> TenantResolver:
    return TenantResolver(organization_repo, membership_repo)


def get_organization_service(
    organization_repo: OrganizationRepo,
    membership_repo: MembershipRepo,
    user_repo: UserRepo,
    session: DBSession,
) -> OrganizationService:
    return OrganizationService(organization_repo, membership_repo, user_repo, session)


def get_project_service(
    project_repo: ProjectRepo,
    organization_repo: OrganizationRepo,
    session: DBSession,
) -> ProjectService:
    return ProjectService(project_repo, organization_repo, session)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
TenantResolverDep = Annotated[TenantResolver, Depends(get_tenant_resolver)]
OrganizationServiceDep = Annotated[OrganizationService, Depends(get_organization_service)]
ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
