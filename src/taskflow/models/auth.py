"""Refresh token storage."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Column, ForeignKey
from sqlalchemy import Uuid as SAUuid
from sqlmodel import Field, SQLModel

from src.taskflow.models.base import utc_now


class RefreshToken(SQLModel, table=True):
    """One row per issued refresh token, keyed by the token's SHA-256 hash.

    A token is valid only while its row exists and ``expires_at`` is in the
    future. Rows are deleted on logout, rotation, and by the cleanup sweep.
    """

    __tablename__ = "refresh_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    token_hash: str = Field(max_length=64, unique=True, index=True)
    user_id: UUID = Field(
        sa_column=Column(
            SAUuid,
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    expires_at: datetime = Field(index=True)
    created_at: datetime = Field(default_factory=utc_now)
