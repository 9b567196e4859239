"""
Temporal Worker - Separate process from API.

Run with:
    uv run python -m src.bugtracker.temporal.worker
"""

import asyncio

import uvicorn
from fastapi import FastAPI
from temporalio.client import (
    Client,
    Schedule,
    ScheduleActionStartWorkflow,
    ScheduleAlreadyRunningError,
    ScheduleSpec,
)
from temporalio.worker import Worker

from src.bugtracker.core.config import get_settings
from src.bugtracker.core.db import dispose_engine
from src.bugtracker.core.logging import get_logger, setup_logging
from src.bugtracker.temporal.activities import expire_overdue_invitations
from src.bugtracker.temporal.workflows import InvitationExpiryWorkflow

logger = get_logger(__name__)

WORKER_HEALTH_PORT = 8001
INVITATION_EXPIRY_SCHEDULE_ID = "invitation-expiry"


def create_worker(client: Client, task_queue: str) -> Worker:
    """Create the worker for every workflow and activity in the project."""
    return Worker(
        client,
        task_queue=task_queue,
        workflows=[InvitationExpiryWorkflow],
        activities=[expire_overdue_invitations],
        max_concurrent_activities=20,
        max_concurrent_workflow_tasks=20,
    )


async def ensure_invitation_expiry_schedule(
    client: Client, cron: str, task_queue: str
) -> None:
    """Register the periodic expiry sweep. An existing schedule is left as is."""
    try:
        await client.create_schedule(
            INVITATION_EXPIRY_SCHEDULE_ID,
            Schedule(
                action=ScheduleActionStartWorkflow(
                    InvitationExpiryWorkflow.run,
                    id=INVITATION_EXPIRY_SCHEDULE_ID,
                    task_queue=task_queue,
                ),
                spec=ScheduleSpec(cron_expressions=[cron]),
            ),
        )
        logger.info("Invitation expiry schedule created", cron=cron)
    except ScheduleAlreadyRunningError:
        logger.info("Invitation expiry schedule already exists")


async def run_health_server(task_queue: str, port: int = WORKER_HEALTH_PORT) -> None:
    """Run a lightweight health server for K8s liveness checks."""
    health_app = FastAPI(title="Temporal Worker Health")

    @health_app.get("/health")
    async def health() -> dict[str, str]:
        return {
            "status": "healthy",
            "service": "temporal-worker",
            "task_queue": task_queue,
        }

    config = uvicorn.Config(health_app, host="0.0.0.0", port=port, log_level="warning")
    server = uvicorn.Server(config)
    logger.info(f"Starting health server on port {port}")
    await server.serve()


async def main() -> None:
    settings = get_settings()
    setup_logging(settings.debug)

    client = await Client.connect(
        settings.temporal_host,
        namespace=settings.temporal_namespace,
    )
    task_queue = settings.temporal_task_queue

    if settings.invite_expiry_schedule:
        await ensure_invitation_expiry_schedule(
            client, settings.invite_expiry_schedule, task_queue
        )

    worker = create_worker(client, task_queue)
    logger.info(f"Starting worker on queue: {task_queue}")
    try:
        await asyncio.gather(worker.run(), run_health_server(task_queue))
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
