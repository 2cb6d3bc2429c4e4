"""
SOAP note generation stage.

Wraps a transcript in a fixed instruction template and asks the configured
LLM provider for a note with Subjective, Objective, Assessment and Plan
sections. The note text is returned as-is; its structure is requested,
never parsed or validated here.
"""

import logging

from soapscribe.core.models import ClinicalNote, TranscriptionResult
from soapscribe.services.llm.base import BaseLLM

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a clinician assistant. "
    "Produce a SOAP note with S, O, A, P sections, "
    "based only on the provided transcript."
)

USER_PROMPT_TEMPLATE = "Please create a SOAP note from the following transcript:\n\n{transcript}"

DEFAULT_TEMPERATURE = 0.3


def build_user_prompt(transcript: str) -> str:
    """Embed the transcript in the fixed user instruction."""
    return USER_PROMPT_TEMPLATE.format(transcript=transcript)


class SoapNoteGenerator:
    """Turns a transcription result into a clinical note via an LLM.

    Args:
        llm: An LLM provider implementing ``BaseLLM``.
        temperature: Sampling temperature; kept low for consistent phrasing.
    """

    def __init__(self, llm: BaseLLM, temperature: float = DEFAULT_TEMPERATURE) -> None:
        self._llm = llm
        self._temperature = temperature

    async def generate(self, transcription: TranscriptionResult) -> ClinicalNote:
        """Generate a SOAP note for ``transcription``.

        An empty transcript is sent unchanged; no retry or fallback applies.
        """
        if not transcription.text.strip():
            logger.info("Transcript is empty; requesting note anyway")

        text = await self._llm.generate(
            build_user_prompt(transcription.text),
            system=SYSTEM_PROMPT,
            temperature=self._temperature,
        )
        logger.info("SOAP note generated: %d characters", len(text))
        model = getattr(self._llm, "model", "")
        return ClinicalNote(text=text, model=model if isinstance(model, str) else "")
