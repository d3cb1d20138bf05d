"""Scheduled refresh-token sweep.

Complements the per-user cap applied at issuance: rows of users who never
come back are removed here once expired.
"""

from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy

with workflow.unsafe.imports_passed_through():
    from src.taskflow.temporal.activities import TokenCleanupActivities

CLEANUP_ACTIVITY_TIMEOUT = timedelta(minutes=5)
CLEANUP_RETRY_POLICY = RetryPolicy(maximum_attempts=3, initial_interval=timedelta(seconds=2))


@workflow.defn
class TokenCleanupWorkflow:
    @workflow.run
    async def run(self, retention_days: int = 0) -> dict[str, int]:
        """Delete expired refresh tokens.

        Args:
            retention_days: Grace period after expiry before a row is deleted

        Returns:
            {"refresh_tokens": <rows deleted>}
        """
        workflow.logger.info(f"Starting token cleanup (retention: {retention_days} days)")

        deleted = await workflow.execute_activity_method(
            TokenCleanupActivities.cleanup_refresh_tokens,
            retention_days,
            start_to_close_timeout=CLEANUP_ACTIVITY_TIMEOUT,
            retry_policy=CLEANUP_RETRY_POLICY,
        )

        workflow.logger.info(f"Token cleanup complete: {deleted} refresh tokens")
        return {"refresh_tokens": deleted}
