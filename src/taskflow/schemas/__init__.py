"""Request/response schemas."""

from src.taskflow.schemas.auth import (
    LoginRequest,
    LoginResponse,
    LogoutRequest,
    MessageResponse,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
    RegisterResponse,
)
from src.taskflow.schemas.organization import (
    MemberAdd,
    MemberRead,
    MembershipRead,
    MemberUpdate,
    OrganizationCreate,
    OrganizationRead,
    OrganizationSummary,
    OrganizationUpdate,
)
from src.taskflow.schemas.pagination import PaginatedResponse
from src.taskflow.schemas.project import ProjectCreate, ProjectRead, ProjectUpdate
from src.taskflow.schemas.user import CurrentUserRead, UserRead

__all__ = [
    # Auth
    "LoginRequest",
    "LoginResponse",
    "LogoutRequest",
    "MessageResponse",
    "RefreshRequest",
    "RefreshResponse",
    "RegisterRequest",
    "RegisterResponse",
    # Organizations
    "MemberAdd",
    "MemberRead",
    "MemberUpdate",
    "MembershipRead",
    "OrganizationCreate",
    "OrganizationRead",
    "OrganizationSummary",
    "OrganizationUpdate",
    # Projects
    "ProjectCreate",
    "ProjectRead",
    "ProjectUpdate",
    # Users
    "CurrentUserRead",
    "UserRead",
    # Pagination
    "PaginatedResponse",
]
