"""Authentication and project authorization dependencies."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from src.bugtracker.api.dependencies.repositories import ProjectRepo, UserRepo
from src.bugtracker.core.exceptions import PermissionDeniedError, ProjectNotFoundError
from src.bugtracker.core.logging import bind_project_context, bind_user_context
from src.bugtracker.core.security import decode_token
from src.bugtracker.models import Project, ProjectRole, User


async def get_current_user(
    user_repo: UserRepo,
    authorization: Annotated[str | None, Header()] = None,
) -> User:
    """Validate the bearer access token and return the active user it names."""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_token(authorization[7:])
    if payload is None or payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        user_id = UUID(str(payload.get("sub")))
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        ) from e

    user = await user_repo.get_by_id(user_id)
    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )

    bind_user_context(user.id, user.email)
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


@dataclass
class ProjectAccess:
    """The project named in the path plus the caller's role in it."""

    project: Project
    user: User
    role: ProjectRole


def require_project_role(
    *roles: ProjectRole,
) -> Callable[..., Awaitable[ProjectAccess]]:
    """Build a dependency that admits project members holding one of `roles`.

    With no roles given, any member is admitted. Non-members get 403.
    """

    async def dependency(
        project_id: UUID,
        current_user: CurrentUser,
        project_repo: ProjectRepo,
    ) -> ProjectAccess:
        project = await project_repo.get_by_id(project_id)
        if project is None:
            raise ProjectNotFoundError()

        role = project.role_of(current_user.id)
        if role is None:
            raise PermissionDeniedError("You are not a member of this project")
        if roles and role not in roles:
            raise PermissionDeniedError(
                f"Requires role: {', '.join(r.value for r in roles)}"
            )
        bind_project_context(project.id, role.value)
        return ProjectAccess(project=project, user=current_user, role=role)

    return dependency


# Any member may read
ProjectMember = Annotated[ProjectAccess, Depends(require_project_role())]
# Owner and tester may create bugs and test cases
ProjectContributor = Annotated[
    ProjectAccess, Depends(require_project_role(ProjectRole.OWNER, ProjectRole.TESTER))
]
# Only the owner manages members and invitations
ProjectOwner = Annotated[ProjectAccess, Depends(require_project_role(ProjectRole.OWNER))]
