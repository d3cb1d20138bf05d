"""FastAPI dependency injection definitions."""

# Auth
from src.taskflow.api.dependencies.auth import CurrentClaims, get_token_claims

# Database
from src.taskflow.api.dependencies.db import DBSession, get_database, get_db_session

# Repositories
from src.taskflow.api.dependencies.repositories import (
    MembershipRepo,
    OrganizationRepo,
    ProjectRepo,
    TokenRepo,
    UserRepo,
)

# Services
from src.taskflow.api.dependencies.services import (
    AuthServiceDep,
    OrganizationServiceDep,
    ProjectServiceDep,
    TenantResolverDep,
)

# Tenant
from src.taskflow.api.dependencies.tenant import (
    TenantContextDep,
    get_organization_id,
    get_tenant_context,
    permission_required,
)

__all__ = [
    # Auth
    "CurrentClaims",
    "get_token_claims",
    # Database
    "DBSession",
    "get_database",
    "get_db_session",
    # Repositories
    "MembershipRepo",
    "OrganizationRepo",
    "ProjectRepo",
    "TokenRepo",
    "UserRepo",
    # Services
    "AuthServiceDep",
    "OrganizationServiceDep",
    "ProjectServiceDep",
    "TenantResolverDep",
    # Tenant
    "TenantContextDep",
    "get_organization_id",
    "get_tenant_context",
    "permission_required",
]
