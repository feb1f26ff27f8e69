from sqlalchemy.ext.asyncio import AsyncSession
from mp3_download_service.app.interfaces.download_repository import (
    IDownloadRepository,
)
from mp3_download_service.domain.models.download import DownloadRecord
from mp3_download_service.domain.models.identity import Identity


class HistoryService:
    """Service for reading a user's download history."""

    def __init__(self, download_repository: IDownloadRepository):
        self.download_repository = download_repository

    async def get_history(
        self, db: AsyncSession, identity: Identity
    ) -> list[DownloadRecord]:
        """
        Retrieve all downloads of `identity`, ordered by most recent.

        An empty list means no downloads yet. A failing query raises
        PersistenceError rather than passing for an empty history.
        """
        return await self.download_repository.list_by_owner(db, identity.uid)
