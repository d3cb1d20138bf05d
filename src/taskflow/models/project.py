"""Project model - organization-scoped entity."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Column, ForeignKey, UniqueConstraint
from sqlalchemy import Uuid as SAUuid
from sqlmodel import Field, SQLModel

from src.taskflow.models.base import utc_now

DEFAULT_PROJECT_COLOR = "#3B82F6"


class Project(SQLModel, table=True):
    """Project entity owned by a single organization."""

    __tablename__ = "projects"
    __table_args__ = (UniqueConstraint("organization_id", "key", name="uq_projects_org_key"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    organization_id: UUID = Field(
        sa_column=Column(
            SAUuid,
            ForeignKey("organizations.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    name: str = Field(max_length=200, index=True)
    key: str = Field(max_length=10)
    description: str | None = Field(default=None, max_length=1000)
    color: str = Field(default=DEFAULT_PROJECT_COLOR, max_length=7)
    is_archived: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
