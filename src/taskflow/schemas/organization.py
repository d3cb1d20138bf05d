"""Organization and membership schemas for API request/response."""

import re
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.taskflow.models.enums import OrgRole, SubscriptionStatus, SubscriptionTier

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


class OrganizationCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    slug: str = Field(
        min_length=3,
        max_length=50,
        json_schema_extra={
            "examples": ["acme", "acme-corp"],
            "description": "Lowercase letters and digits, separated by single hyphens.",
        },
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Organization name cannot be empty or whitespace only")
        return v

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v: str) -> str:
        if not SLUG_PATTERN.match(v):
            raise ValueError(
                "Slug must contain only lowercase letters, numbers, "
                "and single hyphens as separators"
            )
        return v


class OrganizationUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    domain: str | None = Field(default=None, max_length=255)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                raise ValueError("Organization name cannot be empty or whitespace only")
        return v

    @field_validator("domain")
    @classmethod
    def normalize_domain(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip().lower()
            if not v:
                return None
        return v


class OrganizationSummary(BaseModel):
    id: UUID
    name: str
    slug: str
    subscription_tier: SubscriptionTier
    subscription_status: SubscriptionStatus

    model_config = {"from_attributes": True}


class OrganizationRead(OrganizationSummary):
    """Full organization view including plan limits and usage."""

    domain: str | None
    max_users: int
    max_projects: int
    max_storage: int
    current_users: int
    current_projects: int
    current_storage: int
    created_at: datetime
    updated_at: datetime


class MembershipRead(BaseModel):
    """One of the caller's organizations and their role in it."""

    organization: OrganizationSummary
    role: OrgRole
    joined_at: datetime


class MemberAdd(BaseModel):
    """Add an existing user to the organization by email."""

    email: EmailStr
    role: OrgRole = OrgRole.MEMBER


class MemberUpdate(BaseModel):
    role: OrgRole


class MemberRead(BaseModel):
    user_id: UUID
    email: EmailStr
    name: str
    image: str | None = None
    role: OrgRole
    joined_at: datetime
