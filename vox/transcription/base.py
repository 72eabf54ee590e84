"""Abstract base class for remote transcription backends."""

from abc import ABC, abstractmethod
import logging

logger = logging.getLogger(__name__)


class AbstractTranscriptionBackend(ABC):
    """Stateless speech-to-text service, called once per audio segment."""

    service_name = "unknown"

    @abstractmethod
    def has_credentials(self) -> bool:
        """Return True if the backend is configured with an API credential."""
        pass

    @abstractmethod
    async def transcribe_file(self, audio_path: str) -> str:
        """Transcribe one audio file and return its text.

        Args:
            audio_path: Path to an audio file the service accepts

        Returns:
            Transcribed text

        Raises:
            RemoteAPIError: The remote call failed for any reason
            LocalIOError: The audio file could not be read
        """
        pass
