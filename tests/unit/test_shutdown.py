"""Tests for graceful shutdown functionality."""

import asyncio

import pytest

from src.taskflow.core.shutdown import UNTRACKED_PATHS, RequestTracker

pytestmark = [pytest.mark.unit, pytest.mark.asyncio]


class TestRequestTracker:
    """In-flight counting and the shutdown drain."""

    async def test_request_tracking(self):
        tracker = RequestTracker()

        assert tracker.in_flight_count == 0
        assert not tracker.is_shutting_down

        async with tracker.track_request():
            assert tracker.in_flight_count == 1

        assert tracker.in_flight_count == 0

    async def test_failed_request_is_released(self):
        """A request that raises still leaves the in-flight count."""
        tracker = RequestTracker()

        with pytest.raises(RuntimeError):
            async with tracker.track_request():
                raise RuntimeError("boom")

        assert tracker.in_flight_count == 0

    async def test_multiple_concurrent_requests(self):
        tracker = RequestTracker()

        async def fake_request(delay: float):
            async with tracker.track_request():
                await asyncio.sleep(delay)

        tasks = [asyncio.create_task(fake_request(0.1)) for _ in range(3)]

        await asyncio.sleep(0.05)  # all three are inside track_request by now
        assert tracker.in_flight_count == 3

        await asyncio.gather(*tasks)
        assert tracker.in_flight_count == 0

    async def test_shutdown_with_no_requests(self):
        """Nothing in flight: the drain completes immediately."""
        tracker = RequestTracker()

        await tracker.start_shutdown()

        assert tracker.is_shutting_down
        assert await tracker.wait_for_drain(timeout=1.0) is True

    async def test_shutdown_waits_for_in_flight_requests(self):
        tracker = RequestTracker()

        async def long_request():
            async with tracker.track_request():
                await asyncio.sleep(0.2)

        task = asyncio.create_task(long_request())
        await asyncio.sleep(0.05)
        await tracker.start_shutdown()

        # Returns once long_request exits, well inside the timeout
        assert await tracker.wait_for_drain(timeout=2.0) is True
        assert tracker.in_flight_count == 0
        await task

    async def test_shutdown_timeout(self):
        """wait_for_drain gives up and reports False when a request hangs."""
        tracker = RequestTracker()
        release = asyncio.Event()

        async def stuck_request():
            async with tracker.track_request():
                await release.wait()

        task = asyncio.create_task(stuck_request())
        await asyncio.sleep(0.01)
        await tracker.start_shutdown()

        assert await tracker.wait_for_drain(timeout=0.05) is False
        assert tracker.in_flight_count == 1

        # Let the stuck request finish so the task does not leak
        release.set()
        await task

    async def test_reset(self):
        tracker = RequestTracker()
        await tracker.start_shutdown()

        tracker.reset()

        assert not tracker.is_shutting_down
        assert tracker.in_flight_count == 0


async def test_health_and_metrics_are_not_tracked():
    # They must keep answering while the tracker drains
    assert {"/health", "/health/db", "/health/redis", "/metrics"} <= UNTRACKED_PATHS
