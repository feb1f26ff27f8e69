from pydantic import BaseModel, ConfigDict
from mp3_download_service.domain.models.commons.base_models import (
    TimedObjectModel,
    UUIdentifiedObjectModel,
)
from mp3_download_service.domain.models.identity import Identity


class UserBase(BaseModel):
    """Fields shared by every user representation."""

    email: str
    first_name: str = ""
    last_name: str = ""


class UserCreate(UserBase):
    """Data needed to create a user. Google accounts carry no password hash."""

    password_hash: str | None = None


class UserRead(UserBase, UUIdentifiedObjectModel, TimedObjectModel):
    """A stored user, as exposed outside of the database layer."""

    model_config = ConfigDict(from_attributes=True)

    def to_identity(self) -> Identity:
        """Project the account onto the identity used as record owner."""
        return Identity(uid=str(self.id), email=self.email)
