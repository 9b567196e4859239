from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, computed_field

from src.bugtracker.models import BugPriority, BugSeverity, BugStatus


class BugCreate(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    description: str = Field(default="", max_length=10000)
    steps_to_reproduce: list[str] = Field(default_factory=list)
    expected_behavior: str | None = None
    actual_behavior: str | None = None
    severity: BugSeverity = BugSeverity.MEDIUM
    priority: BugPriority = BugPriority.NORMAL
    environment: str | None = Field(default=None, max_length=200)
    version: str | None = Field(default=None, max_length=100)
    assigned_to: list[UUID] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


class BugRead(BaseModel):
    id: UUID
    project_id: UUID
    bug_number: int
    title: str
    description: str
    steps_to_reproduce: list[str]
    expected_behavior: str | None
    actual_behavior: str | None
    severity: BugSeverity
    priority: BugPriority
    status: BugStatus
    environment: str | None
    version: str | None
    reported_by: UUID
    assigned_to: list[UUID]
    tags: list[str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @computed_field  # type: ignore[prop-decorator]
    @property
    def key(self) -> str:
        return f"BUG-{self.bug_number}"
