"""Two-stage audio → transcript → SOAP note pipeline.

The stages are strictly sequential: the note stage consumes the
``TranscriptionResult`` produced by the transcription stage, so it never
runs when transcription fails. Each request builds its own pipeline and
shares no mutable state with other requests.

Usage::

    pipeline = create_pipeline(settings)
    response = await pipeline.run(audio)
"""

import logging
import time

from soapscribe.core.config import Settings
from soapscribe.core.models import AudioUpload, SoapNoteResponse, TranscriptionResult
from soapscribe.services.llm import create_llm
from soapscribe.services.notes.soap import SoapNoteGenerator
from soapscribe.services.transcription import create_stt
from soapscribe.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)


class SoapPipeline:
    """Runs transcription then note generation for one audio upload.

    Args:
        transcriber: Stage 1 provider implementing ``BaseSTT``.
        note_generator: Stage 2 generator wrapping an LLM provider.
    """

    def __init__(self, transcriber: BaseSTT, note_generator: SoapNoteGenerator) -> None:
        self._transcriber = transcriber
        self._note_generator = note_generator

    async def transcribe(self, audio: AudioUpload) -> TranscriptionResult:
        """Stage 1: audio to transcript."""
        return await self._transcriber.transcribe(audio)

    async def run(self, audio: AudioUpload) -> SoapNoteResponse:
        """Run both stages and combine their outputs.

        Errors from either stage propagate unchanged; a transcript obtained
        before a note-stage failure is dropped with the exception.
        """
        started = time.perf_counter()
        transcription = await self.transcribe(audio)
        note = await self._note_generator.generate(transcription)
        logger.info(
            "Pipeline finished in %.2fs (transcript %d chars, note %d chars)",
            time.perf_counter() - started,
            len(transcription.text),
            len(note.text),
        )
        return SoapNoteResponse(transcript=transcription.text, soap_note=note.text)


def create_pipeline(settings: Settings, api_key: str | None = None) -> SoapPipeline:
    """Build a pipeline from settings.

    Args:
        settings: Application settings.
        api_key: Validated OpenAI credential; defaults to ``settings.openai_api_key``.
    """
    api_key = api_key or settings.openai_api_key
    transcriber = create_stt("openai", api_key=api_key, settings=settings)

    llm_kwargs: dict = {
        "temperature": settings.llm_temperature,
        "timeout": settings.llm_timeout,
        "max_retries": settings.llm_max_retries,
    }
    if settings.llm_provider == "openai":
        llm_kwargs.update(api_key=api_key, model=settings.openai_chat_model)
    elif settings.llm_provider == "claude":
        llm_kwargs.update(api_key=settings.claude_api_key, model=settings.claude_model)
    elif settings.llm_provider == "ollama":
        llm_kwargs.update(base_url=settings.ollama_base_url, model=settings.ollama_model)
    llm = create_llm(settings.llm_provider, **llm_kwargs)

    return SoapPipeline(
        transcriber=transcriber,
        note_generator=SoapNoteGenerator(llm, temperature=settings.llm_temperature),
    )
