"""
Pydantic v2 request / response models used across the API and UI layers.
"""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_AUDIO_FILENAME = "recording.webm"
DEFAULT_AUDIO_CONTENT_TYPE = "audio/webm"

# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """GET /health response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: datetime


# ---------------------------------------------------------------------------
# Audio
# ---------------------------------------------------------------------------


class AudioUpload(BaseModel):
    """A finalized audio object ready to be sent to transcription."""

    data: bytes
    filename: str = DEFAULT_AUDIO_FILENAME
    content_type: str = DEFAULT_AUDIO_CONTENT_TYPE

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def size_mb(self) -> float:
        return self.size / 1024 / 1024


# ---------------------------------------------------------------------------
# Pipeline stages
# ---------------------------------------------------------------------------


class TranscriptionResult(BaseModel):
    """Output of the transcription stage; input of the note stage."""

    text: str
    model: str = ""
    language: str = ""


class ClinicalNote(BaseModel):
    """Free-text SOAP note as returned by the completion service."""

    text: str
    model: str = ""


class SoapNoteResponse(BaseModel):
    """POST /api/soap-from-audio success body."""

    model_config = ConfigDict(populate_by_name=True)

    transcript: str
    soap_note: str = Field(alias="soapNote")


class ErrorResponse(BaseModel):
    """Error envelope returned for every failed request."""

    error: str


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------


class SessionStatus(StrEnum):
    """Possible states for the recorder session."""

    idle = "idle"
    recording = "recording"
    processing = "processing"


class ErrorCategory(StrEnum):
    """Fixed classification of downstream failures."""

    connection = "connection"
    unauthorized = "unauthorized"
    file_too_large = "file_too_large"
    unsupported_format = "unsupported_format"
    unknown = "unknown"
