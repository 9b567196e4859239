"""Temporal Workflows - Re-exports for worker registration."""

from src.bugtracker.temporal.workflows.invitation_expiry import InvitationExpiryWorkflow

__all__ = ["InvitationExpiryWorkflow"]
