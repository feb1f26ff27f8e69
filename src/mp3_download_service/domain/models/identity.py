from pydantic import BaseModel
from mp3_download_service.domain.models.commons.enums import AUTH_EVENT


class Identity(BaseModel):
    """The authenticated principal a submission is made on behalf of."""

    uid: str
    email: str | None = None


class IdentityChange(BaseModel):
    """Emitted to identity subscribers whenever a user signs up, in or out."""

    event: AUTH_EVENT
    identity: Identity | None
