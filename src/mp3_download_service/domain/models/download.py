from typing import Any

from pydantic import ConfigDict, field_validator
from mp3_download_service.domain.models.commons.base_models import CreatedObjectModel


class DownloadRecord(CreatedObjectModel):
    """One completed submission. Never updated or deleted once stored."""

    id: int
    source_url: str
    title: str
    owner_id: str

    # Ok to create the model from object attributes
    model_config = ConfigDict(from_attributes=True)

    @field_validator("owner_id", mode="before")
    @classmethod
    def _owner_id_as_str(cls, value: Any) -> str:
        # Stored as a UUID column, exposed as the identity's opaque uid
        return str(value)
