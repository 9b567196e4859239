"""Tests for the scheduled invitation expiry workflow."""

import pytest
from temporalio import activity
from temporalio.testing import WorkflowEnvironment
from temporalio.worker import Worker

from src.bugtracker.temporal.workflows import InvitationExpiryWorkflow

pytestmark = pytest.mark.unit

_calls: list[int] = []


@activity.defn(name="expire_overdue_invitations")
async def fake_expire_overdue_invitations() -> int:
    _calls.append(1)
    return 3


class TestInvitationExpiryWorkflow:
    @pytest.mark.asyncio
    async def test_returns_activity_count(self) -> None:
        """The workflow reports how many invitations the activity expired."""
        _calls.clear()
        async with await WorkflowEnvironment.start_time_skipping() as env:  # noqa: SIM117
            async with Worker(
                env.client,
                task_queue="test-queue",
                workflows=[InvitationExpiryWorkflow],
                activities=[fake_expire_overdue_invitations],
            ):
                result = await env.client.execute_workflow(
                    InvitationExpiryWorkflow.run,
                    id="test-invitation-expiry",
                    task_queue="test-queue",
                )

        assert result == 3
        assert len(_calls) == 1
