"""Bug model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Column, UniqueConstraint
from sqlmodel import Field, SQLModel

from src.bugtracker.models.base import JSONType, utc_now
from src.bugtracker.models.enums import BugPriority, BugSeverity, BugStatus


class Bug(SQLModel, table=True):
    """Bug report. `bug_number` comes from the project's "bugs" sequence."""

    __tablename__ = "bugs"
    __table_args__ = (
        UniqueConstraint("project_id", "bug_number", name="uq_bugs_project_bug_number"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id", index=True)
    bug_number: int
    title: str = Field(max_length=300)
    description: str = Field(default="", max_length=10000)
    steps_to_reproduce: list[str] = Field(
        default_factory=list, sa_column=Column(JSONType, nullable=False)
    )
    expected_behavior: str | None = Field(default=None)
    actual_behavior: str | None = Field(default=None)
    severity: str = Field(default=BugSeverity.MEDIUM.value, max_length=20)
    priority: str = Field(default=BugPriority.NORMAL.value, max_length=20)
    status: str = Field(default=BugStatus.OPEN.value, max_length=20, index=True)
    environment: str | None = Field(default=None, max_length=200)
    version: str | None = Field(default=None, max_length=100)
    reported_by: UUID = Field(foreign_key="users.id")
    assigned_to: list[str] = Field(default_factory=list, sa_column=Column(JSONType, nullable=False))
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSONType, nullable=False))
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
