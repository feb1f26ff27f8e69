from uuid import UUID

import structlog
from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from mp3_download_service.app.interfaces.download_repository import (
    IDownloadRepository,
)
from mp3_download_service.domain.errors import PersistenceError
from mp3_download_service.domain.models.download import DownloadRecord
from mp3_download_service.infrastructure.database.models import DBDownload

logger = structlog.get_logger(__name__)


class DownloadRepository(IDownloadRepository):
    """SQLAlchemy backed store of download records."""

    async def create(
        self, db: AsyncSession, *, source_url: str, title: str, owner_id: str
    ) -> DownloadRecord:
        """Insert a record. `created_at` is assigned by the database server."""
        try:
            db_download = DBDownload(
                owner_id=UUID(owner_id), source_url=source_url, title=title
            )
            db.add(db_download)
            await db.commit()
            await db.refresh(db_download)
        except (SQLAlchemyError, ValueError) as e:
            await db.rollback()
            logger.error("Error saving download record", owner_id=owner_id, error=str(e))
            raise PersistenceError("Could not save the download to your history.")

        return DownloadRecord.model_validate(db_download)

    async def list_by_owner(
        self, db: AsyncSession, owner_id: str
    ) -> list[DownloadRecord]:
        """Retrieve the owner's records, most recent first, ties by insertion order."""
        try:
            query = (
                select(DBDownload)
                .where(DBDownload.owner_id == UUID(owner_id))
                .order_by(desc(DBDownload.created_at), desc(DBDownload.id))
            )
            result = await db.execute(query)
            db_downloads = result.scalars().all()
        except (SQLAlchemyError, ValueError) as e:
            logger.error("Error retrieving downloads", owner_id=owner_id, error=str(e))
            raise PersistenceError("Could not load your download history.")

        return [DownloadRecord.model_validate(db_obj) for db_obj in db_downloads]
