"""Transcription stage: audio upload to ``TranscriptionResult``."""

from .base import BaseSTT

__all__ = ["BaseSTT", "create_stt"]


def create_stt(provider: str = "openai", **kwargs) -> BaseSTT:
    """Build the speech-to-text provider named ``provider``.

    Only ``"openai"`` exists; ``kwargs`` go to ``OpenAITranscriber``.

    Raises:
        ValueError: For any other provider name.
    """
    if provider == "openai":
        from .openai import OpenAITranscriber

        return OpenAITranscriber(**kwargs)
    raise ValueError(f"Unknown STT provider: {provider}")
