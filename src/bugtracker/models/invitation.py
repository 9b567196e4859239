"""Project invitation model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Index
from sqlmodel import Field, SQLModel

from src.bugtracker.models.base import utc_now
from src.bugtracker.models.enums import InvitationStatus, ProjectRole


class Invitation(SQLModel, table=True):
    """Pending offer of project membership.

    Only the SHA-256 digest of the secret token is stored.
    """

    __tablename__ = "invitations"
    __table_args__ = (
        Index("ix_invitations_email_status", "invited_email", "status"),
        Index("ix_invitations_project_email", "project_id", "invited_email"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id", index=True)
    project_name: str = Field(max_length=200)
    invited_email: str = Field(max_length=255)
    invited_by: UUID = Field(foreign_key="users.id")
    role: str = Field(default=ProjectRole.TESTER.value, max_length=20)
    token_hash: str = Field(max_length=255, unique=True, index=True)
    status: str = Field(default=InvitationStatus.PENDING.value, max_length=20)
    expires_at: datetime = Field(index=True)
    created_at: datetime = Field(default_factory=utc_now)
    responded_at: datetime | None = Field(default=None)
    accepted_by: UUID | None = Field(default=None, foreign_key="users.id")

    @property
    def status_enum(self) -> InvitationStatus:
        return InvitationStatus(self.status)

    @property
    def role_enum(self) -> ProjectRole:
        return ProjectRole(self.role)

    def is_expired(self, now: datetime | None = None) -> bool:
        """Past-due pending invitations count as expired even before the sweep runs."""
        if self.status == InvitationStatus.EXPIRED.value:
            return True
        return self.expires_at <= (now or utc_now())
