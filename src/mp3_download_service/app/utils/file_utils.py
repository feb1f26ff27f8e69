import asyncio
import mimetypes
import os
import re
import string
import tempfile
from urllib.parse import unquote

import structlog
from mp3_download_service.app.domain.schemas import DeliveredFile
from mp3_download_service.app.utils.settings import DOWNLOAD_RELEASE_DELAY

logger = structlog.get_logger(__name__)

DEFAULT_FILENAME = "audio.mp3"

_EXTENDED_FILENAME = re.compile(r"filename\*\s*=\s*(?:[\w-]+'[\w-]*')?([^;]+)", re.I)
_QUOTED_FILENAME = re.compile(r"filename\s*=\s*\"([^\"]+)\"", re.I)
_BARE_FILENAME = re.compile(r"filename\s*=\s*([^;\"]+)", re.I)


def sanitize_filename(filename: str) -> str:
    """
    Take a string and returns a valid filename.

    This function:
    - Replaces spaces with underscores.
    - Removes characters that are invalid in most filesystems.
    - Limits the length to a reasonable number of characters.
    """
    filename = re.sub(r"\s+", "_", filename)

    # Anything NOT in this whitelist is removed
    valid_chars = "-_.() %s%s" % (string.ascii_letters, string.digits)
    filename = "".join(c for c in filename if c in valid_chars)

    max_length = 200
    if len(filename) > max_length:
        try:
            split_index = filename.rindex("_", 0, max_length)
        except ValueError:
            split_index = max_length
        filename = filename[:split_index]

    return filename or "audio"


def filename_from_content_disposition(header: str | None) -> str:
    """
    Extract the suggested filename from a Content-Disposition header.

    Understands `filename="name"`, unquoted `filename=name` and the RFC 5987
    `filename*=UTF-8''name` form. Falls back to DEFAULT_FILENAME.
    """
    if not header:
        return DEFAULT_FILENAME

    extended = _EXTENDED_FILENAME.search(header)
    if extended:
        name = unquote(extended.group(1).strip().strip('"'))
        if name:
            return name

    for pattern in (_QUOTED_FILENAME, _BARE_FILENAME):
        match = pattern.search(header)
        if match and match.group(1).strip():
            return match.group(1).strip()
    return DEFAULT_FILENAME


def title_from_filename(filename: str) -> str:
    """Strip the final extension: `Song Title.mp3` becomes `Song Title`."""
    return re.sub(r"\.[^/.]+$", "", filename)


def guess_media_type(filename: str) -> str:
    """Guess the media type from the extension, generic binary otherwise."""
    media_type, _ = mimetypes.guess_type(filename)
    return media_type or "application/octet-stream"


class FileDelivery:
    """Materializes payloads as temporary files and releases them after sending."""

    def __init__(
        self, directory: str | None = None, release_delay: float = DOWNLOAD_RELEASE_DELAY
    ) -> None:
        self.directory = directory
        self.release_delay = release_delay

    def materialize(self, content: bytes, filename: str) -> DeliveredFile:
        """Write `content` to a temporary file named after `filename`'s extension."""
        suffix = os.path.splitext(sanitize_filename(filename))[1]
        with tempfile.NamedTemporaryFile(
            suffix=suffix, dir=self.directory, delete=False
        ) as temp_file:
            path = temp_file.name
            try:
                temp_file.write(content)
            except OSError:
                os.remove(path)
                raise

        return DeliveredFile(
            path=path, filename=filename, media_type=guess_media_type(filename)
        )

    def discard(self, path: str) -> None:
        """Remove a materialized file that will not be delivered."""
        if os.path.exists(path):
            os.remove(path)

    async def release(self, path: str) -> None:
        """Remove a delivered file once the save has had time to start."""
        await asyncio.sleep(self.release_delay)
        if os.path.exists(path):
            self.discard(path)
            logger.debug("Released delivered file", path=path)
