"""
Invitation Expiry Workflow.

Sweeps pending invitations whose deadline has passed into the expired state.
Designed to run on a schedule (INVITE_EXPIRY_SCHEDULE, cron syntax).
"""

from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy

with workflow.unsafe.imports_passed_through():
    from src.bugtracker.temporal.activities import expire_overdue_invitations


@workflow.defn
class InvitationExpiryWorkflow:
    """Expire overdue invitations. Idempotent, safe to overlap or re-run."""

    @workflow.run
    async def run(self) -> int:
        count = await workflow.execute_activity(
            expire_overdue_invitations,
            start_to_close_timeout=timedelta(minutes=5),
            retry_policy=RetryPolicy(
                maximum_attempts=3,
                initial_interval=timedelta(seconds=2),
            ),
        )
        workflow.logger.info(f"Invitation expiry sweep complete: {count} expired")
        return count
