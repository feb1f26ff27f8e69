from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from mp3_download_service.app.use_cases.history_service import HistoryService
from mp3_download_service.app.utils.dependencies import (
    get_current_identity,
    get_db_session,
    get_history_service,
)
from mp3_download_service.domain.errors import PersistenceError
from mp3_download_service.domain.models.download import DownloadRecord
from mp3_download_service.domain.models.identity import Identity

router = APIRouter()


@router.get(
    "",
    response_model=list[DownloadRecord],
    summary="Get User Download History",
    description="Retrieves the download history for the currently authenticated user.",
)
async def get_user_history(
    db: AsyncSession = Depends(get_db_session),
    identity: Identity = Depends(get_current_identity),
    history_service: HistoryService = Depends(get_history_service),
):
    """
    Get the history for the logged-in user.

    The owner is taken from the authentication token, ensuring users
    can only access their own history.
    """
    try:
        return await history_service.get_history(db, identity)
    except PersistenceError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message
        )
