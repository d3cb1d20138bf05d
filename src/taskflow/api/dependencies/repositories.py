"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.taskflow.api.dependencies.db import DBSession
from src.taskflow.repositories import (
    MembershipRepository,
    OrganizationRepository,
    ProjectRepository,
    RefreshTokenRepository,
    UserRepository,
)


def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(session)


def get_token_repository(session: DBSession) -> RefreshTokenRepository:
    return RefreshTokenRepository(session)


def get_membership_repository(session: DBSession) -> MembershipRepository:
    return MembershipRepository(session)


def get_organization_repository(session: DBSession) -> OrganizationRepository:
    return OrganizationRepository(session)


def get_project_repository(session: DBSession) -> ProjectRepository:
    return ProjectRepository(session)


UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
TokenRepo = Annotated[RefreshTokenRepository, Depends(get_token_repository)]
MembershipRepo = Annotated[MembershipRepository, Depends(get_membership_repository)]
OrganizationRepo = Annotated[OrganizationRepository, Depends(get_organization_repository)]
ProjectRepo = Annotated[ProjectRepository, Depends(get_project_repository)]
