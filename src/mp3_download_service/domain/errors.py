"""Errors raised while submitting a video for conversion."""


class SubmissionError(Exception):
    """Base class for every failure surfaced by a submission."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class URLValidationError(SubmissionError):
    """The URL is malformed or not on an allowed video platform."""


class RemoteConversionError(SubmissionError):
    """The conversion endpoint answered with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class PersistenceError(SubmissionError):
    """Reading from or writing to the download store failed."""


class UnexpectedSubmissionError(SubmissionError):
    """Any other failure, such as a transport error."""
