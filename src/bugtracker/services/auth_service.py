"""Authentication service - login and token issuance."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.bugtracker.core.logging import get_logger
from src.bugtracker.core.security import (
    DUMMY_PASSWORD_HASH,
    create_access_token,
    verify_password,
)
from src.bugtracker.core.validators import normalize_email
from src.bugtracker.models import User, utc_now
from src.bugtracker.repositories import UserRepository
from src.bugtracker.schemas.auth import AuthResponse
from src.bugtracker.schemas.user import UserRead

logger = get_logger(__name__)


def issue_auth_response(user: UserRead) -> AuthResponse:
    """Build the token response for a user snapshot."""
    token, expires_at = create_access_token(
        user.id,
        claims={"email": user.email, "name": user.full_name},
    )
    return AuthResponse(access_token=token, expires_at=expires_at, user=user)


class AuthService:
    """Authentication service."""

    def __init__(self, user_repo: UserRepository, session: AsyncSession):
        self.user_repo = user_repo
        self.session = session

    async def login(self, email: str, password: str) -> AuthResponse | None:
        """Authenticate user and return a token.

        Returns None if authentication fails, without saying why.
        """
        try:
            user = await self.user_repo.get_by_email(normalize_email(email))

            # Always verify, so response timing doesn't reveal whether the email exists
            password_hash = user.hashed_password if user else DUMMY_PASSWORD_HASH
            password_valid = verify_password(password, password_hash)

            if user is None or not password_valid or not user.is_active:
                return None

            user.last_login_at = utc_now()
            self.user_repo.add(user)
            await self.session.commit()
            await self.session.refresh(user)
        except Exception:
            await self.session.rollback()
            raise

        logger.info("User logged in", user_id=str(user.id))
        return issue_auth_response(UserRead.model_validate(user))

    async def get_user(self, user: User) -> UserRead:
        return UserRead.model_validate(user)
