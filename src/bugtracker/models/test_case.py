"""Test case model."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import Column, UniqueConstraint
from sqlmodel import Field, SQLModel

from src.bugtracker.models.base import JSONType, utc_now
from src.bugtracker.models.enums import TestCasePriority, TestCaseStatus


class TestCase(SQLModel, table=True):
    """Test case. `case_number` comes from the project's "testcases" sequence."""

    __tablename__ = "test_cases"
    __table_args__ = (
        UniqueConstraint("project_id", "case_number", name="uq_test_cases_project_case_number"),
    )
    # Keep pytest from collecting this model as a test class
    __test__ = False

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id", index=True)
    case_number: int
    title: str = Field(max_length=300)
    description: str | None = Field(default=None)
    preconditions: str | None = Field(default=None)
    # [{"step_number": 1, "action": "...", "expected_outcome": "..."}]
    steps: list[dict[str, Any]] = Field(
        default_factory=list, sa_column=Column(JSONType, nullable=False)
    )
    expected_result: str = Field(default="")
    priority: str = Field(default=TestCasePriority.MEDIUM.value, max_length=20)
    status: str = Field(default=TestCaseStatus.DRAFT.value, max_length=20)
    created_by: UUID = Field(foreign_key="users.id")
    assigned_to: UUID | None = Field(default=None, foreign_key="users.id")
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSONType, nullable=False))
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
