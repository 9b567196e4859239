"""Authentication endpoints."""

from fastapi import APIRouter, HTTPException, status
from starlette.requests import Request

from src.bugtracker.api.dependencies import AuthServiceDep, CurrentUser, RegistrationServiceDep
from src.bugtracker.core.rate_limit import limiter
from src.bugtracker.schemas.auth import AuthResponse, LoginRequest, SignUpRequest
from src.bugtracker.schemas.user import UserRead

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Sign up",
    description=(
        "Create an account and return an access token. "
        "Pending invitations addressed to the email are accepted automatically."
    ),
    responses={
        409: {"description": "Email already registered"},
        422: {"description": "Validation error (weak password, malformed email)"},
    },
)
@limiter.limit("3/minute")
async def signup(
    request: Request, data: SignUpRequest, service: RegistrationServiceDep
) -> AuthResponse:
    return await service.sign_up(
        first_name=data.first_name,
        last_name=data.last_name,
        email=data.email,
        password=data.password,
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={401: {"description": "Invalid credentials"}},
)
@limiter.limit("5/minute")
async def login(request: Request, data: LoginRequest, service: AuthServiceDep) -> AuthResponse:
    """Authenticate and return an access token."""
    result = await service.login(data.email, data.password)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return result


@router.get("/me", response_model=UserRead)
async def me(current_user: CurrentUser) -> UserRead:
    return UserRead.model_validate(current_user)
