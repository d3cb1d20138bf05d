"""
Temporal Worker - separate process from the API.

Run with:
    python -m src.taskflow.temporal.worker
"""

import asyncio

import uvicorn
from fastapi import FastAPI
from temporalio.client import Client
from temporalio.worker import Worker

from src.taskflow.core.config import get_settings
from src.taskflow.core.db import Database
from src.taskflow.core.logging import get_logger, setup_logging
from src.taskflow.temporal.activities import TokenCleanupActivities
from src.taskflow.temporal.client import ensure_cleanup_schedule
from src.taskflow.temporal.workflows import TokenCleanupWorkflow

logger = get_logger(__name__)

WORKER_HEALTH_PORT = 8001


def create_worker(client: Client, task_queue: str, database: Database) -> Worker:
    """Worker polling ``task_queue`` for cleanup workflows and activities."""
    activities = TokenCleanupActivities(database)
    return Worker(
        client,
        task_queue=task_queue,
        workflows=[TokenCleanupWorkflow],
        activities=[activities.cleanup_refresh_tokens],
        max_concurrent_activities=10,
    )


def create_health_app(task_queue: str) -> FastAPI:
    """Lightweight health app for container health checks."""
    health_app = FastAPI(title="Temporal Worker Health")

    @health_app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "healthy", "service": "temporal-worker", "task_queue": task_queue}

    return health_app


async def run_health_server(task_queue: str, port: int = WORKER_HEALTH_PORT) -> None:
    config = uvicorn.Config(
        create_health_app(task_queue),
        host="0.0.0.0",
        port=port,
        log_level="warning",
    )
    logger.info("Starting worker health server", port=port)
    await uvicorn.Server(config).serve()


async def main() -> None:
    settings = get_settings()
    setup_logging(settings.debug)

    database = Database.from_settings(settings)
    await database.connect()

    client = await Client.connect(settings.temporal_host, namespace=settings.temporal_namespace)
    await ensure_cleanup_schedule(client, settings)

    worker = create_worker(client, settings.temporal_task_queue, database)
    logger.info("Starting worker", task_queue=settings.temporal_task_queue)
    try:
        await asyncio.gather(worker.run(), run_health_server(settings.temporal_task_queue))
    finally:
        await database.dispose()


if __name__ == "__main__":
    asyncio.run(main())
