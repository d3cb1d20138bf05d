"""Temporal schedule registration for the refresh-token sweep."""

from temporalio.client import (
    Client,
    Schedule,
    ScheduleActionStartWorkflow,
    ScheduleAlreadyRunningError,
    ScheduleSpec,
)

from src.taskflow.core.config import Settings
from src.taskflow.core.logging import get_logger
from src.taskflow.temporal.workflows import TokenCleanupWorkflow

logger = get_logger(__name__)

CLEANUP_SCHEDULE_ID = "refresh-token-cleanup"


def build_cleanup_schedule(settings: Settings) -> Schedule:
    """Schedule running TokenCleanupWorkflow on ``settings.cleanup_schedule`` (cron)."""
    if not settings.cleanup_schedule:
        raise ValueError("CLEANUP_SCHEDULE is not configured")
    return Schedule(
        action=ScheduleActionStartWorkflow(
            TokenCleanupWorkflow.run,
            settings.cleanup_retention_days,
            id=f"{CLEANUP_SCHEDULE_ID}-run",
            task_queue=settings.temporal_task_queue,
        ),
        spec=ScheduleSpec(cron_expressions=[settings.cleanup_schedule]),
    )


async def ensure_cleanup_schedule(client: Client, settings: Settings) -> bool:
    """Create the cleanup schedule if configured and not already present.

    Returns:
        True if a schedule was created
    """
    if not settings.cleanup_schedule:
        logger.info("Token cleanup schedule disabled (CLEANUP_SCHEDULE not set)")
        return False
    try:
        await client.create_schedule(CLEANUP_SCHEDULE_ID, build_cleanup_schedule(settings))
    except ScheduleAlreadyRunningError:
        logger.info("Token cleanup schedule already exists", schedule_id=CLEANUP_SCHEDULE_ID)
        return False
    logger.info(
        "Token cleanup schedule created",
        schedule_id=CLEANUP_SCHEDULE_ID,
        cron=settings.cleanup_schedule,
    )
    return True
