"""Project and membership endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.bugtracker.api.dependencies import (
    CurrentUser,
    MembershipServiceDep,
    ProjectMember,
    ProjectOwner,
    ProjectServiceDep,
    UserRepo,
)
from src.bugtracker.core.exceptions import NotFoundError
from src.bugtracker.core.validators import normalize_email
from src.bugtracker.models import ProjectStatus
from src.bugtracker.schemas.project import (
    MemberAddRequest,
    MemberRead,
    MembershipResultResponse,
    MemberRoleUpdate,
    ProjectCreate,
    ProjectRead,
    ProjectUpdate,
)

router = APIRouter(prefix="/projects", tags=["projects"])


@router.post(
    "",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
    description="Create a project. The caller becomes its owner.",
)
async def create_project(
    data: ProjectCreate,
    current_user: CurrentUser,
    service: ProjectServiceDep,
) -> ProjectRead:
    project = await service.create_project(
        current_user,
        name=data.name,
        description=data.description,
        tags=data.tags,
    )
    return ProjectRead.model_validate(project)


@router.get(
    "",
    response_model=list[ProjectRead],
    summary="List projects",
    description="List projects the caller belongs to, in any role.",
)
async def list_projects(
    current_user: CurrentUser,
    service: ProjectServiceDep,
    status_filter: Annotated[ProjectStatus | None, Query(alias="status")] = None,
) -> list[ProjectRead]:
    projects = await service.list_projects(current_user.id, status_filter)
    return [ProjectRead.model_validate(p) for p in projects]


@router.get(
    "/{project_id}",
    response_model=ProjectRead,
    responses={403: {"description": "Not a member"}, 404: {"description": "Project not found"}},
)
async def get_project(access: ProjectMember) -> ProjectRead:
    return ProjectRead.model_validate(access.project)


@router.patch(
    "/{project_id}",
    response_model=ProjectRead,
    description="Update project fields. Archiving is a status change. Owner only.",
)
async def update_project(
    project_id: UUID,
    data: ProjectUpdate,
    access: ProjectOwner,
    service: ProjectServiceDep,
) -> ProjectRead:
    project = await service.update_project(
        project_id,
        access.user,
        name=data.name,
        description=data.description,
        status=data.status,
        tags=data.tags,
    )
    return ProjectRead.model_validate(project)


@router.get("/{project_id}/members", response_model=list[MemberRead])
async def list_members(
    project_id: UUID,
    access: ProjectMember,
    service: MembershipServiceDep,
) -> list[MemberRead]:
    members = await service.list_members(project_id)
    return [MemberRead.model_validate(m.model_dump()) for m in members]


@router.post(
    "/{project_id}/members",
    response_model=MembershipResultResponse,
    summary="Add member",
    description=(
        "Add a registered user directly. Adding an existing member is not an "
        "error: the response reports outcome=already_member. Owner only."
    ),
)
async def add_member(
    project_id: UUID,
    data: MemberAddRequest,
    access: ProjectOwner,
    user_repo: UserRepo,
    service: MembershipServiceDep,
) -> MembershipResultResponse:
    user = await user_repo.get_by_email(normalize_email(data.email))
    if user is None:
        raise NotFoundError("No registered user with that email")

    result = await service.add_member(project_id, user.id, data.role, added_by=access.user)
    return MembershipResultResponse(
        project_id=result.project_id,
        user_id=result.user_id,
        role=result.role,
        outcome=result.outcome.value,
    )


@router.patch("/{project_id}/members/{user_id}", response_model=MemberRead)
async def change_member_role(
    project_id: UUID,
    user_id: UUID,
    data: MemberRoleUpdate,
    access: ProjectOwner,
    service: MembershipServiceDep,
) -> MemberRead:
    member = await service.change_member_role(project_id, user_id, data.role, actor=access.user)
    return MemberRead.model_validate(member.model_dump())


@router.delete("/{project_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(
    project_id: UUID,
    user_id: UUID,
    access: ProjectOwner,
    service: MembershipServiceDep,
) -> None:
    await service.remove_member(project_id, user_id, actor=access.user)
