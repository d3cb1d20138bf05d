"""Tests for the refresh-token cleanup schedule registration."""

from unittest.mock import AsyncMock

import pytest
from temporalio.client import Client, ScheduleAlreadyRunningError

from src.taskflow.core.config import Settings, get_settings
from src.taskflow.temporal.client import (
    CLEANUP_SCHEDULE_ID,
    build_cleanup_schedule,
    ensure_cleanup_schedule,
)

pytestmark = [pytest.mark.unit, pytest.mark.asyncio]


@pytest.fixture
def settings() -> Settings:
    return get_settings().model_copy(
        update={"cleanup_schedule": "0 3 * * *", "cleanup_retention_days": 2}
    )


async def test_schedule_runs_cleanup_workflow_on_cron(settings):
    schedule = build_cleanup_schedule(settings)

    assert schedule.spec.cron_expressions == ["0 3 * * *"]
    assert schedule.action.workflow == "TokenCleanupWorkflow"
    assert schedule.action.args == [2]
    assert schedule.action.task_queue == settings.temporal_task_queue


async def test_unconfigured_schedule_cannot_be_built():
    with pytest.raises(ValueError, match="CLEANUP_SCHEDULE"):
        build_cleanup_schedule(get_settings().model_copy(update={"cleanup_schedule": None}))


async def test_ensure_creates_schedule(settings):
    client = AsyncMock(spec=Client)

    assert await ensure_cleanup_schedule(client, settings) is True

    client.create_schedule.assert_awaited_once()
    assert client.create_schedule.call_args.args[0] == CLEANUP_SCHEDULE_ID


async def test_ensure_tolerates_existing_schedule(settings):
    client = AsyncMock(spec=Client)
    client.create_schedule.side_effect = ScheduleAlreadyRunningError()

    assert await ensure_cleanup_schedule(client, settings) is False


async def test_ensure_skips_when_disabled():
    client = AsyncMock(spec=Client)
    settings = get_settings().model_copy(update={"cleanup_schedule": None})

    assert await ensure_cleanup_schedule(client, settings) is False
    client.create_schedule.assert_not_awaited()
