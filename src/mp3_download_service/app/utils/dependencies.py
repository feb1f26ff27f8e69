from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession
from mp3_download_service.app.interfaces.download_repository import (
    IDownloadRepository,
)
from mp3_download_service.app.interfaces.user_service import IUserService
from mp3_download_service.app.use_cases.auth_service import AuthService
from mp3_download_service.app.use_cases.history_service import HistoryService
from mp3_download_service.app.use_cases.submission_service import SubmissionService
from mp3_download_service.app.utils.file_utils import FileDelivery
from mp3_download_service.app.utils.identity_events import identity_events
from mp3_download_service.app.utils.jwt_handler import decode_access_token
from mp3_download_service.app.utils.settings import (
    ALLOWED_VIDEO_HOSTS,
    CONVERSION_API_URL,
)
from mp3_download_service.domain.models.identity import Identity
from mp3_download_service.domain.models.user import UserRead
from mp3_download_service.infrastructure.clients.conversion_client import (
    ConversionClient,
)
from mp3_download_service.infrastructure.database.session import get_db_session
from mp3_download_service.infrastructure.services.download_repository import (
    DownloadRepository,
)
from mp3_download_service.infrastructure.services.user_service import UserService

security_scheme = HTTPBearer(auto_error=False)
file_delivery = FileDelivery()


def get_user_service() -> UserService:
    """Dependency provider for UserService."""
    return UserService()


def get_download_repository() -> DownloadRepository:
    """Dependency provider for DownloadRepository."""
    return DownloadRepository()


def get_file_delivery() -> FileDelivery:
    """Dependency provider for the shared FileDelivery."""
    return file_delivery


def get_bearer_token(
    auth_credentials: HTTPAuthorizationCredentials | None = Depends(security_scheme),
) -> str:
    """Return the raw bearer token of the request, 401 if there is none."""
    if auth_credentials is None or auth_credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return auth_credentials.credentials


async def get_current_user_from_token(
    token: str = Depends(get_bearer_token),
    db: AsyncSession = Depends(get_db_session),
    user_service: IUserService = Depends(get_user_service),
) -> UserRead:
    """Get the current user from a JWT token in the Authorization header."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = decode_access_token(token)
        email: str | None = payload.get("sub")
        if email is None:
            raise credentials_exception
    except JWTError:
        # Invalid signature, expired or revoked token
        raise credentials_exception

    user = await user_service.get_by_email(db, email=email)
    if user is None:
        raise credentials_exception

    return user


async def get_current_identity(
    current_user: UserRead = Depends(get_current_user_from_token),
) -> Identity:
    """Identity of the authenticated caller, passed explicitly to use cases."""
    return current_user.to_identity()


def get_auth_service(
    user_service: IUserService = Depends(get_user_service),
) -> AuthService:
    """Dependency provider for AuthService."""
    return AuthService(user_service=user_service, identity_events=identity_events)


def get_submission_service(
    download_repository: IDownloadRepository = Depends(get_download_repository),
    delivery: FileDelivery = Depends(get_file_delivery),
) -> SubmissionService:
    """Dependency provider for SubmissionService."""
    return SubmissionService(
        conversion_client=ConversionClient(CONVERSION_API_URL),
        download_repository=download_repository,
        file_delivery=delivery,
        allowed_hosts=ALLOWED_VIDEO_HOSTS,
    )


def get_history_service(
    download_repository: IDownloadRepository = Depends(get_download_repository),
) -> HistoryService:
    """Dependency provider for HistoryService."""
    return HistoryService(download_repository=download_repository)
