"""Repository layer - data access abstraction."""

from src.taskflow.repositories.base import BaseRepository
from src.taskflow.repositories.membership import MembershipRepository
from src.taskflow.repositories.organization import OrganizationRepository
from src.taskflow.repositories.project import ProjectRepository
from src.taskflow.repositories.token import RefreshTokenRepository
from src.taskflow.repositories.user import UserRepository, normalize_email

__all__ = [
    "BaseRepository",
    "MembershipRepository",
    "OrganizationRepository",
    "ProjectRepository",
    "RefreshTokenRepository",
    "UserRepository",
    "normalize_email",
]
