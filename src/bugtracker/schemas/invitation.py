"""Invitation schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr

from src.bugtracker.models import InvitationStatus, ProjectRole


class InvitationCreateRequest(BaseModel):
    """Request to invite an email address to a project."""

    email: EmailStr
    role: ProjectRole = ProjectRole.TESTER


class InvitationCreateResponse(BaseModel):
    """Returned once, at creation. The token is never shown again."""

    id: UUID
    project_id: UUID
    invited_email: str
    role: ProjectRole
    status: InvitationStatus
    expires_at: datetime
    token: str


class InvitationRead(BaseModel):
    """Read model for invitations (owner view)."""

    id: UUID
    project_id: UUID
    project_name: str
    invited_email: str
    invited_by: UUID
    role: ProjectRole
    status: InvitationStatus
    created_at: datetime
    expires_at: datetime
    responded_at: datetime | None
    accepted_by: UUID | None

    model_config = {"from_attributes": True}


class InvitationInfoResponse(BaseModel):
    """Public info about an invitation (for the accept page)."""

    project_id: UUID
    project_name: str
    invited_email: str
    inviter_name: str
    role: ProjectRole
    expires_at: datetime
