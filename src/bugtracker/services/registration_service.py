"""Registration service - sign-up followed by invitation reconciliation."""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.bugtracker.core.exceptions import DuplicateEmailError, ValidationError
from src.bugtracker.core.logging import get_logger
from src.bugtracker.core.security import hash_password
from src.bugtracker.core.validators import validate_email
from src.bugtracker.models import User
from src.bugtracker.repositories import UserRepository
from src.bugtracker.schemas.auth import AuthResponse
from src.bugtracker.schemas.user import UserRead
from src.bugtracker.services.auth_service import issue_auth_response
from src.bugtracker.services.reconciliation_service import ReconciliationService

logger = get_logger(__name__)


class RegistrationService:
    """Service for user registration."""

    def __init__(
        self,
        user_repo: UserRepository,
        reconciliation_service: ReconciliationService,
        session: AsyncSession,
    ):
        self.user_repo = user_repo
        self.reconciliation_service = reconciliation_service
        self.session = session

    async def sign_up(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
    ) -> AuthResponse:
        """Register a user, join any projects they were invited to, return a token.

        1. Create the user and COMMIT (point of no return)
        2. Reconcile pending invitations (best effort, never fails sign-up)
        3. Issue an access token

        Raises:
            ValidationError: Malformed email.
            DuplicateEmailError: Email already registered.
        """
        try:
            email = validate_email(email)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        if await self.user_repo.exists_by_email(email):
            raise DuplicateEmailError()

        first_name = first_name.strip()
        last_name = last_name.strip()
        user = User(
            email=email,
            first_name=first_name,
            last_name=last_name,
            full_name=f"{first_name} {last_name}".strip(),
            hashed_password=hash_password(password),
        )
        self.user_repo.add(user)

        try:
            await self.session.commit()
        except IntegrityError as e:
            # Lost a race with a concurrent sign-up for the same email
            await self.session.rollback()
            raise DuplicateEmailError() from e

        await self.session.refresh(user)
        # Snapshot before reconciliation: a rolled-back unit expires the ORM object
        user_read = UserRead.model_validate(user)
        logger.info("User registered", user_id=str(user_read.id))

        report = await self.reconciliation_service.reconcile_for_new_user(user)
        if report.failed:
            logger.warning(
                "Some invitations could not be reconciled",
                user_id=str(user_read.id),
                failed=len(report.failed),
            )

        return issue_auth_response(user_read)
