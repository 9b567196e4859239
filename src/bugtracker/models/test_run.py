"""Test run model."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import Column, Index
from sqlmodel import Field, SQLModel

from src.bugtracker.models.base import JSONType, utc_now
from src.bugtracker.models.enums import TestRunResult


class TestRun(SQLModel, table=True):
    """One execution of a test case. Runs are append-only, one row per execution."""

    __tablename__ = "test_runs"
    __table_args__ = (Index("ix_test_runs_project_executed", "project_id", "executed_at"),)
    __test__ = False

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id")
    test_case_id: UUID = Field(foreign_key="test_cases.id", index=True)
    executed_by: UUID = Field(foreign_key="users.id")
    result: str = Field(default=TestRunResult.PASSED.value, max_length=20)
    environment: str | None = Field(default=None, max_length=200)
    app_version: str | None = Field(default=None, max_length=100)
    notes: str | None = Field(default=None)
    # [{"step_number": 1, "result": "failed", "actual_outcome": "..."}]
    step_results: list[dict[str, Any]] = Field(
        default_factory=list, sa_column=Column(JSONType, nullable=False)
    )
    bug_id: UUID | None = Field(default=None, foreign_key="bugs.id")
    duration: int | None = Field(default=None)  # seconds
    executed_at: datetime = Field(default_factory=utc_now)
