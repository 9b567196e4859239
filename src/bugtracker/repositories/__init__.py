"""Repository layer - data access abstraction.

Repositories never commit; services own the transaction.
"""

from src.bugtracker.repositories.activity_log import ActivityLogRepository
from src.bugtracker.repositories.base import BaseRepository
from src.bugtracker.repositories.bug import BugRepository
from src.bugtracker.repositories.comment import CommentRepository
from src.bugtracker.repositories.invitation import InvitationRepository
from src.bugtracker.repositories.project import ProjectRepository
from src.bugtracker.repositories.sequence import SequenceRepository
from src.bugtracker.repositories.test_case import TestCaseRepository
from src.bugtracker.repositories.test_run import TestRunRepository
from src.bugtracker.repositories.user import UserRepository

__all__ = [
    "ActivityLogRepository",
    "BaseRepository",
    "BugRepository",
    "CommentRepository",
    "InvitationRepository",
    "ProjectRepository",
    "SequenceRepository",
    "TestCaseRepository",
    "TestRunRepository",
    "UserRepository",
]
