"""Repository for RefreshToken entity."""

from datetime import datetime, timedelta
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import select

from src.taskflow.models import RefreshToken
from src.taskflow.models.base import utc_now
from src.taskflow.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Stored refresh tokens, looked up by the SHA-256 hash of the token."""

    model = RefreshToken

    def create(self, user_id: UUID, token_hash: str, expires_at: datetime) -> RefreshToken:
        """Create a token row (add to session, no commit)."""
        token = RefreshToken(user_id=user_id, token_hash=token_hash, expires_at=expires_at)
        self.session.add(token)
        return token

    async def get_by_hash(self, token_hash: str, for_update: bool = False) -> RefreshToken | None:
        """Get refresh token by its hash, regardless of expiry.

        Args:
            token_hash: The hashed token to look up
            for_update: If True, locks the row so two concurrent refreshes of
                the same token cannot both rotate it
        """
        query = select(RefreshToken).where(RefreshToken.token_hash == token_hash)
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def delete_by_hash(self, token_hash: str) -> int:
        """Delete every row matching ``token_hash``. Returns rows deleted."""
        result = await self.session.execute(
            delete(RefreshToken).where(
                RefreshToken.token_hash == token_hash  # type: ignore[arg-type]
            )
        )
        return result.rowcount or 0  # type: ignore[attr-defined]

    async def prune_for_user(self, user_id: UUID, keep: int) -> int:
        """Delete the oldest tokens of a user so that at most ``keep`` remain.

        Returns:
            Number of tokens deleted
        """
        result = await self.session.execute(
            select(RefreshToken.id)
            .where(RefreshToken.user_id == user_id)
            .order_by(RefreshToken.created_at.desc(), RefreshToken.id.desc())  # type: ignore[attr-defined]
            .offset(keep)
        )
        stale_ids = list(result.scalars().all())
        if not stale_ids:
            return 0
        await self.session.execute(
            delete(RefreshToken).where(RefreshToken.id.in_(stale_ids))  # type: ignore[attr-defined]
        )
        return len(stale_ids)

    async def cleanup_expired(self, retention_days: int) -> int:
        """Delete tokens that expired more than ``retention_days`` ago.

        Idempotent: a second run finds nothing to delete.

        Returns:
            Number of tokens deleted
        """
        cutoff = utc_now() - timedelta(days=retention_days)
        result = await self.session.execute(
            delete(RefreshToken).where(
                RefreshToken.expires_at < cutoff  # type: ignore[arg-type]
            )
        )
        return result.rowcount or 0  # type: ignore[attr-defined]
