from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from mp3_download_service.app.interfaces.user_service import IUserService
from mp3_download_service.domain.models.user import UserCreate, UserRead
from mp3_download_service.infrastructure.database.models import DBUser


class UserService(IUserService):
    """Service for user-related database operations."""

    async def create(self, db: AsyncSession, user_to_create: UserCreate) -> UserRead:
        """Create a new user in the database."""
        db_user = DBUser(**user_to_create.model_dump())

        db.add(db_user)
        await db.commit()
        await db.refresh(db_user)

        return UserRead.model_validate(db_user)

    async def get_by_email(self, db: AsyncSession, email: str) -> UserRead | None:
        """Fetch a user by email using an async session."""
        db_user = await self._get_db_user_by_email(db, email)
        if db_user:
            return UserRead.model_validate(db_user)
        return None

    async def get_password_hash(self, db: AsyncSession, email: str) -> str | None:
        """Fetch the password hash, kept out of UserRead on purpose."""
        db_user = await self._get_db_user_by_email(db, email)
        return db_user.password_hash if db_user else None

    async def _get_db_user_by_email(self, db: AsyncSession, email: str) -> DBUser | None:
        result = await db.execute(select(DBUser).where(DBUser.email == email.lower()))
        return result.scalars().first()
