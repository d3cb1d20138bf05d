"""In-flight request tracking for graceful shutdown.

On SIGTERM the lifespan marks the tracker as shutting down (``/health``
starts answering 503 so the load balancer stops routing here) and then
waits, up to ``SHUTDOWN_GRACE_PERIOD`` seconds, for requests that were
already running to finish.
"""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from src.taskflow.core.logging import get_logger

logger = get_logger(__name__)

# Health checks and scrapes keep answering while the server drains
UNTRACKED_PATHS = frozenset({"/health", "/health/db", "/health/redis", "/metrics"})


class RequestTracker:
    """Counts in-flight requests and signals when they reach zero at shutdown."""

    def __init__(self) -> None:
        self._in_flight = 0
        self._shutting_down = False
        self._lock = asyncio.Lock()
        self._drained = asyncio.Event()

    @property
    def is_shutting_down(self) -> bool:
        """True once ``start_shutdown`` has been called."""
        return self._shutting_down

    @property
    def in_flight_count(self) -> int:
        """Number of requests currently inside ``track_request``."""
        return self._in_flight

    @asynccontextmanager
    async def track_request(self) -> AsyncGenerator[None]:
        """Count the wrapped request as in flight until it exits, even on error."""
        async with self._lock:
            self._in_flight += 1
            logger.debug("Request started", in_flight=self._in_flight)
        try:
            yield
        finally:
            async with self._lock:
                self._in_flight -= 1
                logger.debug("Request finished", in_flight=self._in_flight)
                if self._in_flight == 0 and self._shutting_down:
                    logger.info("Last in-flight request finished, drain complete")
                    self._drained.set()

    async def start_shutdown(self) -> None:
        """Enter shutdown mode and arm the drain event.

        If nothing is in flight the event is set straight away, otherwise the
        last request to finish sets it.
        """
        logger.info("Request tracker entering shutdown mode")
        self._shutting_down = True
        async with self._lock:
            if self._in_flight == 0:
                logger.info("No in-flight requests, nothing to drain")
                self._drained.set()
            else:
                logger.info("Waiting for in-flight requests", in_flight=self._in_flight)

    async def wait_for_drain(self, timeout: float) -> bool:
        """
        Wait for every in-flight request to finish.

        Args:
            timeout: Maximum time to wait in seconds

        Returns:
            True if the requests drained within ``timeout``, False if some
            were still running when it expired
        """
        try:
            await asyncio.wait_for(self._drained.wait(), timeout=timeout)
        except TimeoutError:
            logger.warning(
                "Shutdown drain timed out",
                timeout=timeout,
                in_flight=self._in_flight,
            )
            return False
        logger.info("All requests drained")
        return True

    def reset(self) -> None:
        """Reset tracker state. For testing only."""
        self._in_flight = 0
        self._shutting_down = False
        self._drained = asyncio.Event()


# Shared by the tracking middleware, the lifespan and /health
request_tracker = RequestTracker()
