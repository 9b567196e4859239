"""Project model with its embedded member roster."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel
from sqlalchemy import Column
from sqlmodel import Field, SQLModel

from src.bugtracker.models.base import JSONType, utc_now
from src.bugtracker.models.enums import ProjectRole, ProjectStatus


class Membership(BaseModel):
    """A (user, role) binding embedded in a project's `members` column.

    Email and full name are denormalized for display.
    """

    user_id: UUID
    email: str
    full_name: str
    role: ProjectRole
    joined_at: datetime
    added_by: UUID

    def to_document(self) -> dict[str, Any]:
        """Serialize for storage in the JSON column."""
        return self.model_dump(mode="json")


class Project(SQLModel, table=True):
    """Project document.

    `members` is semantically a set keyed by user_id; list order is display
    order only. `version` is bumped on every roster write and guards
    compare-and-swap updates.
    """

    __tablename__ = "projects"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    owner_id: UUID = Field(foreign_key="users.id", index=True)
    status: str = Field(default=ProjectStatus.ACTIVE.value, max_length=20)
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSONType, nullable=False))
    members: list[dict[str, Any]] = Field(
        default_factory=list, sa_column=Column(JSONType, nullable=False)
    )
    version: int = Field(default=1)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def member_list(self) -> list[Membership]:
        return [Membership.model_validate(m) for m in self.members]

    def get_member(self, user_id: UUID) -> Membership | None:
        """Return the membership entry for a user, or None."""
        for member in self.member_list:
            if member.user_id == user_id:
                return member
        return None

    def role_of(self, user_id: UUID) -> ProjectRole | None:
        member = self.get_member(user_id)
        return member.role if member else None

    @property
    def status_enum(self) -> ProjectStatus:
        return ProjectStatus(self.status)
