import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from mp3_download_service.app.interfaces.user_service import IUserService
from mp3_download_service.app.utils.identity_events import IdentityEvents
from mp3_download_service.app.utils.jwt_handler import revoke_access_token
from mp3_download_service.app.utils.passwords import (
    MIN_PASSWORD_LENGTH,
    hash_password,
    verify_password,
)
from mp3_download_service.domain.models.commons.enums import AUTH_EVENT
from mp3_download_service.domain.models.identity import Identity
from mp3_download_service.domain.models.user import UserCreate, UserRead

logger = structlog.get_logger(__name__)


class AuthService:
    """Service for user authentication."""

    def __init__(self, user_service: IUserService, identity_events: IdentityEvents):
        self.user_service = user_service
        self.identity_events = identity_events

    async def authenticate_google_user(
        self, db: AsyncSession, user_info: dict
    ) -> UserRead:
        """Authenticate user by finding them by email. Creating them if don't exist."""
        email = user_info.get("email")
        if not email:
            raise ValueError("User info from provider is missing an email address.")
        email = email.lower()

        user = await self.user_service.get_by_email(db, email=email)
        if user:
            self.identity_events.publish(AUTH_EVENT.SIGNED_IN, user.to_identity())
            return user

        user_to_create = UserCreate(
            first_name=user_info.get("given_name", ""),
            last_name=user_info.get("family_name", ""),
            email=email,
        )
        new_user = await self.user_service.create(db, user_to_create=user_to_create)
        self.identity_events.publish(AUTH_EVENT.SIGNED_UP, new_user.to_identity())
        return new_user

    async def sign_up_with_email(
        self, db: AsyncSession, email: str, password: str
    ) -> UserRead:
        """Create a password account. The email must not be taken."""
        email = email.lower()
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValueError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long."
            )
        if await self.user_service.get_by_email(db, email=email):
            raise ValueError("An account already exists for this email address.")

        user_to_create = UserCreate(email=email, password_hash=hash_password(password))
        new_user = await self.user_service.create(db, user_to_create=user_to_create)
        self.identity_events.publish(AUTH_EVENT.SIGNED_UP, new_user.to_identity())
        return new_user

    async def sign_in_with_email(
        self, db: AsyncSession, email: str, password: str
    ) -> UserRead:
        """Check a password account's credentials."""
        email = email.lower()
        user = await self.user_service.get_by_email(db, email=email)
        password_hash = await self.user_service.get_password_hash(db, email=email)
        # Same message for unknown email and wrong password
        if not user or not verify_password(password, password_hash):
            raise ValueError("Invalid email or password.")

        self.identity_events.publish(AUTH_EVENT.SIGNED_IN, user.to_identity())
        return user

    def sign_out(self, identity: Identity, token: str) -> None:
        """Revoke the bearer token the identity signed in with."""
        revoke_access_token(token)
        logger.debug("Revoked access token", uid=identity.uid)
        self.identity_events.publish(AUTH_EVENT.SIGNED_OUT, identity)
