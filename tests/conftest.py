"""Shared pytest fixtures for the SOAP Scribe test suite.

Provides settings, stub LLM/STT providers and audio payloads used across
unit and integration tests.
"""

from unittest.mock import AsyncMock

import pytest

from soapscribe.core.config import Settings
from soapscribe.core.models import AudioUpload, TranscriptionResult

SAMPLE_TRANSCRIPT = "patient reports no pain"

SAMPLE_SOAP_NOTE = (
    "S: Patient reports no pain.\n"
    "O: No objective findings documented in the transcript.\n"
    "A: No acute complaint.\n"
    "P: Routine follow-up as needed."
)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture
def settings():
    """Settings with a well-formed credential and no .env lookup."""
    return Settings(_env_file=None, openai_api_key="sk-test-key")


# ---------------------------------------------------------------------------
# LLM Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_llm():
    """Create a mock LLM provider returning a fixed SOAP note.

    Returns:
        AsyncMock: A mock implementing the BaseLLM interface.
    """
    from soapscribe.services.llm.base import BaseLLM

    llm = AsyncMock(spec=BaseLLM)
    llm.model = "stub-model"
    llm.generate.return_value = SAMPLE_SOAP_NOTE
    return llm


# ---------------------------------------------------------------------------
# STT Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_stt():
    """Create a mock STT provider returning a fixed transcript.

    Returns:
        AsyncMock: A mock implementing the BaseSTT interface.
    """
    from soapscribe.services.transcription.base import BaseSTT

    stt = AsyncMock(spec=BaseSTT)
    stt.transcribe.return_value = TranscriptionResult(
        text=SAMPLE_TRANSCRIPT,
        model="gpt-4o-transcribe",
        language="en",
    )
    return stt


# ---------------------------------------------------------------------------
# Audio Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def silent_webm_bytes():
    """A stand-in for a 2-second silent WebM clip.

    Starts with the EBML magic number followed by zero padding; the stubs
    never decode it.

    Returns:
        bytes: Raw clip bytes well under the upload ceiling.
    """
    return b"\x1a\x45\xdf\xa3" + b"\x00" * 16000


@pytest.fixture
def sample_audio(silent_webm_bytes):
    """The silent clip wrapped as a finalized upload."""
    return AudioUpload(data=silent_webm_bytes)


@pytest.fixture
def sample_transcript():
    return SAMPLE_TRANSCRIPT


@pytest.fixture
def sample_soap_note():
    return SAMPLE_SOAP_NOTE
