"""Temporal Activities - Re-exports for worker registration."""

from src.bugtracker.temporal.activities.invitations import expire_overdue_invitations

__all__ = ["expire_overdue_invitations"]
