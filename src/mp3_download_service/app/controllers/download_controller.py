from urllib.parse import quote

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession
from mp3_download_service.app.domain.schemas import DownloadRequest
from mp3_download_service.app.use_cases.submission_service import SubmissionService
from mp3_download_service.app.utils.dependencies import (
    get_current_identity,
    get_file_delivery,
    get_submission_service,
)
from mp3_download_service.app.utils.file_utils import FileDelivery
from mp3_download_service.domain.errors import (
    PersistenceError,
    RemoteConversionError,
    UnexpectedSubmissionError,
    URLValidationError,
)
from mp3_download_service.domain.models.identity import Identity
from mp3_download_service.infrastructure.database.session import get_db_session

router = APIRouter()


@router.post(
    "",
    response_class=FileResponse,
    summary="Download a video's audio",
    description="Converts a YouTube video to MP3 and returns it as an attachment.",
)
async def submit_download(
    request: DownloadRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db_session),
    identity: Identity = Depends(get_current_identity),
    submission_service: SubmissionService = Depends(get_submission_service),
    file_delivery: FileDelivery = Depends(get_file_delivery),
):
    """Submit a URL, save it to the caller's history and return the audio file."""
    try:
        result = await submission_service.submit(db, request.url, identity)
    except URLValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except RemoteConversionError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)
    except (PersistenceError, UnexpectedSubmissionError) as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message
        )

    # Remove the temporary file once it has been sent
    background_tasks.add_task(file_delivery.release, result.file.path)

    return FileResponse(
        path=result.file.path,
        media_type=result.file.media_type,
        filename=result.filename,
        headers={"X-Download-Title": quote(result.title)},
    )
