"""Activity log model - append-only project feed."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import Column, Index
from sqlmodel import Field, SQLModel

from src.bugtracker.models.base import JSONType, utc_now


class ActivityLog(SQLModel, table=True):
    """One row per action. Never updated or deleted."""

    __tablename__ = "activity_logs"
    __table_args__ = (Index("ix_activity_logs_project_created", "project_id", "created_at"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id")
    actor_id: UUID
    actor_name: str = Field(max_length=201)
    action: str = Field(max_length=50)
    entity_type: str = Field(max_length=30)
    entity_id: UUID | None = Field(default=None)
    entity_title: str | None = Field(default=None, max_length=300)
    # "metadata" is reserved on declarative classes
    details: dict[str, Any] = Field(
        default_factory=dict, sa_column=Column("metadata", JSONType, nullable=False)
    )
    created_at: datetime = Field(default_factory=utc_now)
