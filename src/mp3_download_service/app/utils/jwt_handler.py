import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, cast

from jose import JWTError, jwt
from pydantic import BaseModel

from .settings import SECRET_KEY

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 30

# jti -> expiry timestamp of tokens revoked by a sign-out
_revoked_tokens: dict[str, float] = {}


class TokenResponse(BaseModel):
    """Pydantic model for the token response."""

    access_token: str
    token_type: str = "bearer"


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Create a new JWT access token."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode.update({"exp": expire, "jti": uuid.uuid4().hex})
    return cast(str, jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM))


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode a JWT access token.

    Raises JWTError if the token is invalid, expired or revoked.
    """
    payload = cast(
        dict[str, Any], jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    )
    if payload.get("jti") in _revoked_tokens:
        raise JWTError("Token has been revoked")
    return payload


def revoke_access_token(token: str) -> None:
    """Revoke a token until it expires. Unreadable tokens are already unusable."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return

    now = datetime.now(timezone.utc).timestamp()
    for jti, expires_at in list(_revoked_tokens.items()):
        if expires_at < now:
            del _revoked_tokens[jti]

    if payload.get("jti"):
        _revoked_tokens[payload["jti"]] = float(payload.get("exp", now))
