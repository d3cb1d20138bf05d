"""Project schemas for API request/response."""

import re
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.taskflow.models.project import DEFAULT_PROJECT_COLOR

PROJECT_KEY_PATTERN = re.compile(r"^[A-Z0-9]{2,10}$")
COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")


def _validate_color(v: str | None) -> str | None:
    if v is not None and not COLOR_PATTERN.match(v):
        raise ValueError("Color must be a hex value like #3B82F6")
    return v


class ProjectCreate(BaseModel):
    """Schema for creating a project."""

    name: str = Field(min_length=1, max_length=200)
    key: str = Field(
        min_length=2,
        max_length=10,
        json_schema_extra={"examples": ["WEB", "API2"]},
    )
    description: str | None = Field(default=None, max_length=1000)
    color: str = DEFAULT_PROJECT_COLOR

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Project name cannot be empty or whitespace only")
        return v

    @field_validator("key")
    @classmethod
    def validate_key(cls, v: str) -> str:
        v = v.strip().upper()
        if not PROJECT_KEY_PATTERN.match(v):
            raise ValueError("Project key must be 2-10 uppercase letters or digits")
        return v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                return None
        return v

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        return _validate_color(v) or DEFAULT_PROJECT_COLOR


class ProjectUpdate(BaseModel):
    """Schema for updating a project. The key is immutable."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    color: str | None = None
    is_archived: bool | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                raise ValueError("Project name cannot be empty or whitespace only")
        return v

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str | None) -> str | None:
        return _validate_color(v)


class ProjectRead(BaseModel):
    """Schema for reading a project."""

    id: UUID
    organization_id: UUID
    name: str
    key: str
    description: str | None
    color: str
    is_archived: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
