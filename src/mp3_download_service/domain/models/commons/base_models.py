from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class UUIdentifiedObjectModel(BaseModel):
    """Base model for objects with a UUID identifier."""

    id: UUID


class CreatedObjectModel(BaseModel):
    """Base model for immutable objects that only carry a creation timestamp."""

    created_at: datetime | None


class TimedObjectModel(CreatedObjectModel):
    """Base model for objects with creation and update timestamps."""

    updated_at: datetime | None
