"""Speech-to-text provider interface used by the transcription stage."""

from abc import ABC, abstractmethod

from soapscribe.core.models import AudioUpload, TranscriptionResult


class BaseSTT(ABC):
    """Turns one finalized recording into a transcript."""

    @abstractmethod
    async def transcribe(self, audio: AudioUpload, **kwargs) -> TranscriptionResult:
        """Transcribe a finalized audio object to text.

        Args:
            audio: The uploaded audio bytes with filename and MIME type.
            **kwargs: Provider-specific options (language, prompt, etc.).

        Returns:
            TranscriptionResult carrying the transcript text.
        """
