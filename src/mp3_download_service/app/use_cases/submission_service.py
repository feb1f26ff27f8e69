from typing import Iterable

import httpx
import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from mp3_download_service.app.domain.schemas import SubmissionResult
from mp3_download_service.app.interfaces.conversion_client import IConversionClient
from mp3_download_service.app.interfaces.download_repository import (
    IDownloadRepository,
)
from mp3_download_service.app.utils.file_utils import (
    FileDelivery,
    filename_from_content_disposition,
    title_from_filename,
)
from mp3_download_service.app.utils.video_utils import is_valid_video_url
from mp3_download_service.domain.errors import (
    SubmissionError,
    UnexpectedSubmissionError,
    URLValidationError,
)
from mp3_download_service.domain.models.identity import Identity

logger = structlog.get_logger(__name__)


class SubmissionService:
    """
    Turn a submitted video URL into a delivered audio file and a history record.

    Each call is independent: nothing is shared between concurrent
    submissions and identical URLs are not deduplicated.
    """

    def __init__(
        self,
        conversion_client: IConversionClient,
        download_repository: IDownloadRepository,
        file_delivery: FileDelivery,
        allowed_hosts: Iterable[str],
    ) -> None:
        self.conversion_client = conversion_client
        self.download_repository = download_repository
        self.file_delivery = file_delivery
        self.allowed_hosts = list(allowed_hosts)

    async def submit(
        self, db: AsyncSession, url: str, identity: Identity
    ) -> SubmissionResult:
        """
        Validate, convert, persist, then deliver.

        The payload is written to a temporary file before the record is
        stored and discarded if the store fails: a file never reaches the user
        without its history entry, and a record never exists for a payload
        that could not be written.
        """
        url = url.strip()
        if not is_valid_video_url(url, self.allowed_hosts):
            raise URLValidationError("Please provide a valid YouTube URL.")

        log = logger.bind(uid=identity.uid, url=url)
        try:
            converted = await self.conversion_client.convert(url)

            filename = filename_from_content_disposition(converted.content_disposition)
            title = title_from_filename(filename)

            delivered = self.file_delivery.materialize(converted.content, filename)
            try:
                await self.download_repository.create(
                    db, source_url=url, title=title, owner_id=identity.uid
                )
            except Exception:
                self.file_delivery.discard(delivered.path)
                raise
        except SubmissionError as e:
            log.warning("Submission failed", error=e.message)
            raise
        except httpx.HTTPError as e:
            log.error("Could not reach the conversion endpoint", error=str(e))
            raise UnexpectedSubmissionError(
                "Could not reach the conversion service."
            ) from e
        except Exception as e:
            log.exception("Unexpected submission failure")
            raise UnexpectedSubmissionError(
                "An error occurred while processing the download."
            ) from e

        log.info("Submission delivered", title=title, filename=filename)
        return SubmissionResult(title=title, filename=filename, file=delivered)
