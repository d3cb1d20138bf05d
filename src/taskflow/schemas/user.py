from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr

from src.taskflow.schemas.organization import MembershipRead


class UserRead(BaseModel):
    """Public view of a user. Never includes the password hash."""

    id: UUID
    email: EmailStr
    name: str
    image: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class CurrentUserRead(UserRead):
    organizations: list[MembershipRead] = []
