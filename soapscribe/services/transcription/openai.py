"""OpenAI audio transcription over plain HTTPS.

Sends the upload as ``multipart/form-data`` with ``httpx`` rather than the
SDK so the filename and MIME type reach the service exactly as recorded.
No client-side timeout or retry is applied to this call.
"""

import logging

import httpx

from soapscribe.core.config import Settings, get_settings
from soapscribe.core.exceptions import MalformedResponseError, TranscriptionError
from soapscribe.core.models import (
    DEFAULT_AUDIO_CONTENT_TYPE,
    DEFAULT_AUDIO_FILENAME,
    AudioUpload,
    TranscriptionResult,
)
from soapscribe.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)


class OpenAITranscriber(BaseSTT):
    """Speech-to-text provider backed by the OpenAI transcription endpoint.

    Args:
        api_key: Bearer credential (falls back to settings).
        settings: Optional Settings instance (defaults to get_settings()).
        transport: Optional httpx transport, used to stub the service in tests.
    """

    def __init__(
        self,
        api_key: str | None = None,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._api_key = api_key or self._settings.openai_api_key
        self._url = self._settings.transcription_url
        self._model = self._settings.transcription_model
        self._response_format = self._settings.transcription_response_format
        self._language = self._settings.transcription_language
        self._transport = transport

    def _build_form(self, audio: AudioUpload, language: str) -> tuple[dict, dict]:
        """Return the ``(files, data)`` pair for the multipart body."""
        files = {
            "file": (
                audio.filename or DEFAULT_AUDIO_FILENAME,
                audio.data,
                audio.content_type or DEFAULT_AUDIO_CONTENT_TYPE,
            )
        }
        data = {
            "model": self._model,
            "response_format": self._response_format,
            "language": language,
        }
        return files, data

    async def transcribe(self, audio: AudioUpload, **kwargs) -> TranscriptionResult:
        """Upload the audio and return the transcript text.

        Raises:
            TranscriptionError: On connection failure or a non-2xx status;
                the detail embeds the downstream status and body.
            MalformedResponseError: When a 2xx body has no ``text`` field.
        """
        language = kwargs.get("language") or self._language
        files, data = self._build_form(audio, language)
        headers = {"Authorization": f"Bearer {self._api_key}"}

        logger.info(
            "Sending %s (%.2f MB, %s) to transcription model %s",
            audio.filename,
            audio.size_mb,
            audio.content_type,
            self._model,
        )
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=None) as client:
                resp = await client.post(self._url, headers=headers, files=files, data=data)
        except httpx.HTTPError as exc:
            logger.warning("Transcription connection error: %s", exc)
            raise TranscriptionError(
                detail=f"Connection error: {exc}",
                connection_failed=True,
            ) from exc

        if not resp.is_success:
            logger.warning("Transcription service returned %s", resp.status_code)
            raise TranscriptionError(
                detail=f"OpenAI API error: {resp.status_code} - {resp.text}",
                upstream_status=resp.status_code,
            )

        try:
            payload = resp.json()
            text = payload["text"]
        except (ValueError, KeyError, TypeError) as exc:
            raise MalformedResponseError(
                f"Transcription service returned an unexpected response: {resp.text[:200]}"
            ) from exc
        if not isinstance(text, str):
            raise MalformedResponseError("Transcription service returned a non-text transcript")

        logger.info("Transcription complete: %d characters", len(text))
        return TranscriptionResult(text=text, model=self._model, language=language)
