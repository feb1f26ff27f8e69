from abc import ABC, abstractmethod

from sqlalchemy.ext.asyncio import AsyncSession
from mp3_download_service.domain.models.download import DownloadRecord


class IDownloadRepository(ABC):
    """Interface for the download record store. Records are insert-only."""

    @abstractmethod
    async def create(
        self, db: AsyncSession, *, source_url: str, title: str, owner_id: str
    ) -> DownloadRecord:
        """Insert a record stamped with the store's current time."""
        pass

    @abstractmethod
    async def list_by_owner(
        self, db: AsyncSession, owner_id: str
    ) -> list[DownloadRecord]:
        """Return the owner's records, newest first."""
        pass
