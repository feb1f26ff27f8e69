from abc import ABC, abstractmethod

from sqlalchemy.ext.asyncio import AsyncSession
from mp3_download_service.domain.models.user import UserCreate, UserRead


class IUserService(ABC):
    """Interface for user service, defining the contract for user operations."""

    @abstractmethod
    async def create(self, db: AsyncSession, user_to_create: UserCreate) -> UserRead:
        """Create a new user."""
        pass

    @abstractmethod
    async def get_by_email(self, db: AsyncSession, email: str) -> UserRead | None:
        """Get a user by their email."""
        pass

    @abstractmethod
    async def get_password_hash(self, db: AsyncSession, email: str) -> str | None:
        """Get the stored password hash of a user, None if they have none."""
        pass
