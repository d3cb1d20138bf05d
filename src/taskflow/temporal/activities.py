"""Token cleanup activities.

Activities are methods on an instance holding the worker's ``Database``,
so the worker process owns exactly one engine.
"""

from temporalio import activity

from src.taskflow.core.db import Database
from src.taskflow.repositories import RefreshTokenRepository


class TokenCleanupActivities:
    def __init__(self, database: Database) -> None:
        self.database = database

    @activity.defn
    async def cleanup_refresh_tokens(self, retention_days: int) -> int:
        """Delete refresh tokens that expired more than ``retention_days`` ago.

        Idempotent: a retry after a partial failure simply finds fewer rows.

        Returns:
            Number of tokens deleted
        """
        activity.logger.info(f"Cleaning up refresh tokens expired over {retention_days} days ago")

        async with self.database.session() as session:
            repo = RefreshTokenRepository(session)
            try:
                count = await repo.cleanup_expired(retention_days)
                await session.commit()
            except Exception:
                await session.rollback()
                raise

        activity.logger.info(f"Deleted {count} expired refresh tokens")
        return count
