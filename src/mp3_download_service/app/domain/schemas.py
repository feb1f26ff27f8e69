from pydantic import BaseModel, Field


class DownloadRequest(BaseModel):
    """Pydantic model for a download request."""

    url: str = Field(examples=["https://www.youtube.com/watch?v=dQw4w9WgXcQ"])


class ConvertedAudio(BaseModel):
    """Successful answer of the conversion endpoint."""

    content: bytes
    content_disposition: str | None = None


class DeliveredFile(BaseModel):
    """A payload materialized on disk, waiting to be sent and released."""

    path: str
    filename: str
    media_type: str = "application/octet-stream"


class SubmissionResult(BaseModel):
    """Hold the result of a submission, including the file to deliver."""

    title: str
    filename: str
    file: DeliveredFile
