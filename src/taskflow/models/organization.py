"""Organization (tenant) model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.taskflow.models.base import utc_now
from src.taskflow.models.enums import SubscriptionStatus, SubscriptionTier

DEFAULT_MAX_USERS = 5
DEFAULT_MAX_PROJECTS = 3
DEFAULT_MAX_STORAGE_MB = 1000


class Organization(SQLModel, table=True):
    """Tenant boundary. Every membership and project belongs to one."""

    __tablename__ = "organizations"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=100, index=True)
    slug: str = Field(max_length=50, unique=True, index=True)
    domain: str | None = Field(default=None, max_length=255, unique=True)

    subscription_tier: str = Field(default=SubscriptionTier.FREE.value, max_length=20)
    subscription_status: str = Field(default=SubscriptionStatus.ACTIVE.value, max_length=20)

    # Plan limits
    max_users: int = Field(default=DEFAULT_MAX_USERS)
    max_projects: int = Field(default=DEFAULT_MAX_PROJECTS)
    max_storage: int = Field(default=DEFAULT_MAX_STORAGE_MB)

    # Usage counters
    current_users: int = Field(default=0)
    current_projects: int = Field(default=0)
    current_storage: int = Field(default=0)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def is_active(self) -> bool:
        return self.subscription_status == SubscriptionStatus.ACTIVE.value
