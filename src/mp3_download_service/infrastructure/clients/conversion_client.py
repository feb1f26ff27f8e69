import httpx
import structlog
from mp3_download_service.app.domain.schemas import ConvertedAudio
from mp3_download_service.app.interfaces.conversion_client import IConversionClient
from mp3_download_service.app.utils.settings import CONVERSION_TIMEOUT
from mp3_download_service.domain.errors import RemoteConversionError

logger = structlog.get_logger(__name__)

GENERIC_FAILURE_MESSAGE = "Error while downloading the file."


class ConversionClient(IConversionClient):
    """HTTP client of the remote MP3 conversion API."""

    def __init__(
        self,
        api_url: str,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = CONVERSION_TIMEOUT,
    ) -> None:
        self.api_url = api_url
        self.transport = transport
        # None waits for as long as the conversion takes
        self.timeout = httpx.Timeout(timeout)

    async def convert(self, video_url: str) -> ConvertedAudio:
        """Send a single conversion request. No retry is attempted."""
        async with httpx.AsyncClient(
            transport=self.transport, timeout=self.timeout
        ) as client:
            response = await client.post(self.api_url, json={"video_url": video_url})

        if not response.is_success:
            detail = self._error_detail(response)
            logger.warning(
                "Conversion endpoint refused the video",
                status_code=response.status_code,
                detail=detail,
            )
            raise RemoteConversionError(
                detail or GENERIC_FAILURE_MESSAGE, status_code=response.status_code
            )

        return ConvertedAudio(
            content=response.content,
            content_disposition=response.headers.get("content-disposition"),
        )

    @staticmethod
    def _error_detail(response: httpx.Response) -> str | None:
        """Read the `detail` field of a JSON error body, if there is one."""
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict) and isinstance(body.get("detail"), str):
            return body["detail"] or None
        return None
