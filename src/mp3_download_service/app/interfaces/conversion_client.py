from abc import ABC, abstractmethod

from mp3_download_service.app.domain.schemas import ConvertedAudio


class IConversionClient(ABC):
    """Interface for the remote service turning a video URL into audio."""

    @abstractmethod
    async def convert(self, video_url: str) -> ConvertedAudio:
        """
        Request the audio for `video_url`.

        Raises RemoteConversionError on a non-success answer.
        """
        pass
