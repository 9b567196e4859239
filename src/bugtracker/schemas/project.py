"""Project and membership schemas for API request/response."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.bugtracker.models import ProjectRole, ProjectStatus


def _clean_tags(tags: list[str]) -> list[str]:
    seen: list[str] = []
    for tag in tags:
        tag = tag.strip().lower()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


class ProjectCreate(BaseModel):
    """Schema for creating a project. The creator becomes its owner."""

    name: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    tags: list[str] = Field(default_factory=list, max_length=20)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Project name cannot be empty or whitespace only")
        return v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                return None
        return v

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        return _clean_tags(v)


class ProjectUpdate(BaseModel):
    """Schema for updating a project. Archival is a status change."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    status: ProjectStatus | None = None
    tags: list[str] | None = Field(default=None, max_length=20)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                raise ValueError("Project name cannot be empty or whitespace only")
        return v

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str] | None) -> list[str] | None:
        return _clean_tags(v) if v is not None else None


class MemberRead(BaseModel):
    user_id: UUID
    email: str
    full_name: str
    role: ProjectRole
    joined_at: datetime
    added_by: UUID


class ProjectRead(BaseModel):
    """Schema for reading a project."""

    id: UUID
    name: str
    description: str | None
    owner_id: UUID
    status: ProjectStatus
    tags: list[str]
    members: list[MemberRead]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class MemberAddRequest(BaseModel):
    """Add a registered user directly, without an invitation."""

    email: EmailStr
    role: ProjectRole = ProjectRole.TESTER


class MemberRoleUpdate(BaseModel):
    role: ProjectRole


class MembershipResultResponse(BaseModel):
    project_id: UUID
    user_id: UUID
    role: ProjectRole
    outcome: Literal["added", "already_member"]
