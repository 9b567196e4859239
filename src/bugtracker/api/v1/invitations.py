"""Invitation endpoints.

Project-scoped endpoints are owner only. Token endpoints take the plaintext
token from the invite link; accept and decline also require a logged-in user.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status
from starlette.requests import Request

from src.bugtracker.api.dependencies import (
    CurrentUser,
    InvitationServiceDep,
    ProjectOwner,
    ReconciliationServiceDep,
)
from src.bugtracker.core.rate_limit import limiter
from src.bugtracker.models import InvitationStatus
from src.bugtracker.schemas.invitation import (
    InvitationCreateRequest,
    InvitationCreateResponse,
    InvitationInfoResponse,
    InvitationRead,
)
from src.bugtracker.schemas.pagination import PaginatedResponse
from src.bugtracker.schemas.project import MembershipResultResponse

router = APIRouter(tags=["invitations"])


# =============================================================================
# Owner Endpoints
# =============================================================================


@router.post(
    "/projects/{project_id}/invitations",
    response_model=InvitationCreateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Invite to project",
    description=(
        "Create an invitation. The token is returned once and never again. "
        "Owner role cannot be granted by invitation."
    ),
    responses={
        409: {"description": "Already a member, or duplicate pending invitation"},
        422: {"description": "Owner role requested or malformed email"},
    },
)
async def create_invitation(
    project_id: UUID,
    data: InvitationCreateRequest,
    access: ProjectOwner,
    service: InvitationServiceDep,
) -> InvitationCreateResponse:
    invitation, token = await service.create_invitation(
        project_id,
        data.email,
        invited_by=access.user,
        role=data.role,
    )
    return InvitationCreateResponse(
        id=invitation.id,
        project_id=invitation.project_id,
        invited_email=invitation.invited_email,
        role=invitation.role_enum,
        status=invitation.status_enum,
        expires_at=invitation.expires_at,
        token=token,
    )


@router.get(
    "/projects/{project_id}/invitations",
    response_model=PaginatedResponse[InvitationRead],
)
async def list_invitations(
    project_id: UUID,
    access: ProjectOwner,
    service: InvitationServiceDep,
    status_filter: Annotated[InvitationStatus | None, Query(alias="status")] = None,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Max items to return")] = 50,
) -> PaginatedResponse[InvitationRead]:
    items, next_cursor, has_more = await service.list_project_invitations(
        project_id, status_filter, cursor, limit
    )
    return PaginatedResponse(
        items=[InvitationRead.model_validate(i) for i in items],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.delete(
    "/projects/{project_id}/invitations/{invitation_id}",
    response_model=InvitationRead,
    summary="Revoke invitation",
    description="Withdraw a pending invitation. It ends in the expired state.",
)
async def revoke_invitation(
    project_id: UUID,
    invitation_id: UUID,
    access: ProjectOwner,
    service: InvitationServiceDep,
) -> InvitationRead:
    invitation = await service.revoke_invitation(project_id, invitation_id, actor=access.user)
    return InvitationRead.model_validate(invitation)


# =============================================================================
# Token Endpoints
# =============================================================================


@router.get(
    "/invitations/{token}",
    response_model=InvitationInfoResponse,
    summary="Get invitation info by token",
    description="Public information about a pending invitation, for the accept page.",
)
@limiter.limit("20/minute")
async def get_invitation_info(
    request: Request,
    token: str,
    service: InvitationServiceDep,
) -> InvitationInfoResponse:
    info = await service.get_invitation_info(token)
    if info is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Invalid or expired invitation",
        )
    return InvitationInfoResponse(**info)


@router.post(
    "/invitations/{token}/accept",
    response_model=MembershipResultResponse,
    summary="Accept invitation",
    responses={
        404: {"description": "Unknown token"},
        409: {"description": "Invitation already answered"},
        410: {"description": "Invitation expired"},
    },
)
@limiter.limit("20/minute")
async def accept_invitation(
    request: Request,
    token: str,
    current_user: CurrentUser,
    service: ReconciliationServiceDep,
) -> MembershipResultResponse:
    result = await service.accept_by_token(token, current_user)
    return MembershipResultResponse(
        project_id=result.project_id,
        user_id=result.user_id,
        role=result.role,
        outcome=result.outcome.value,
    )


@router.post(
    "/invitations/{token}/decline",
    response_model=InvitationRead,
    summary="Decline invitation",
)
@limiter.limit("20/minute")
async def decline_invitation(
    request: Request,
    token: str,
    current_user: CurrentUser,
    service: InvitationServiceDep,
) -> InvitationRead:
    invitation = await service.decline_invitation(token, current_user)
    return InvitationRead.model_validate(invitation)
