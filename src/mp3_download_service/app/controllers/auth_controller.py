import httpx
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from mp3_download_service.app.use_cases.auth_service import AuthService
from mp3_download_service.app.utils.dependencies import (
    get_auth_service,
    get_bearer_token,
    get_current_identity,
)
from mp3_download_service.app.utils.google_sso import GOOGLE_USERINFO_URL, oauth
from mp3_download_service.app.utils.jwt_handler import TokenResponse, create_access_token
from mp3_download_service.domain.models.auth import EmailCredentials, GoogleToken
from mp3_download_service.domain.models.identity import Identity
from mp3_download_service.domain.models.user import UserRead
from mp3_download_service.infrastructure.database.session import get_db_session

router = APIRouter()


def _token_for(user: UserRead) -> dict:
    """Issue the application JWT for an authenticated user."""
    access_token = create_access_token(data={"sub": user.email})
    return {"access_token": access_token, "token_type": "bearer"}


@router.get("/login/google")
async def login_google(request: Request):
    """Redirect to Google for authentication."""
    redirect_uri = request.url_for("auth_google")
    return await oauth.google.authorize_redirect(request, redirect_uri)


@router.get("/google/callback", response_model=TokenResponse)
async def auth_google(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Process Google callback, authenticate user, and return a JWT access token."""
    try:
        token = await oauth.google.authorize_access_token(request)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Could not authorize with Google: {e}",
        )

    user_info = token.get("userinfo")
    if not user_info or not user_info.get("email"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Could not retrieve user info from Google.",
        )

    try:
        user = await auth_service.authenticate_google_user(db, user_info)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return _token_for(user)


@router.post("/login/google/token", response_model=TokenResponse)
async def login_google_token(
    google_token: GoogleToken,
    db: AsyncSession = Depends(get_db_session),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Authenticate user using a Google access token obtained by the client."""
    headers = {"Authorization": f"Bearer {google_token.token}"}

    async with httpx.AsyncClient() as client:
        response = await client.get(GOOGLE_USERINFO_URL, headers=headers)

    if response.status_code != 200:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Could not validate Google token. Response: {response.text}",
        )

    user_info = response.json()
    if not user_info or not user_info.get("email"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Could not retrieve user info from Google.",
        )

    try:
        user = await auth_service.authenticate_google_user(db, user_info)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return _token_for(user)


@router.post(
    "/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED
)
async def sign_up(
    credentials: EmailCredentials,
    db: AsyncSession = Depends(get_db_session),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Create an email/password account and sign it in."""
    try:
        user = await auth_service.sign_up_with_email(
            db, credentials.email, credentials.password
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return _token_for(user)


@router.post("/login", response_model=TokenResponse)
async def sign_in(
    credentials: EmailCredentials,
    db: AsyncSession = Depends(get_db_session),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Sign in with email and password."""
    try:
        user = await auth_service.sign_in_with_email(
            db, credentials.email, credentials.password
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    return _token_for(user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(
    request: Request,
    token: str = Depends(get_bearer_token),
    identity: Identity = Depends(get_current_identity),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Revoke the caller's token and drop any OAuth session state."""
    auth_service.sign_out(identity, token)
    request.session.clear()
    return None


@router.get("/me", response_model=Identity)
async def me(identity: Identity = Depends(get_current_identity)):
    """Return the current authenticated identity."""
    return identity
