"""
SOAP Scribe exception hierarchy.

All server-side exceptions inherit from SoapScribeError, enabling
centralized conversion to the ``{"error": ...}`` envelope in the API
middleware layer. Recorder-side errors live here too so the UI and the
backend share one vocabulary.
"""

from datetime import UTC, datetime


class SoapScribeError(Exception):
    """Base exception for all SOAP Scribe errors."""

    def __init__(
        self,
        detail: str = "An unexpected error occurred",
        code: str = "SOAPSCRIBE_ERROR",
        status_code: int = 500,
    ) -> None:
        self.detail = detail
        self.code = code
        self.status_code = status_code
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(detail)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigurationError(SoapScribeError):
    """Raised when the service credential is missing or malformed."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail=detail, code="CONFIGURATION_ERROR", status_code=500)


# ---------------------------------------------------------------------------
# Client input
# ---------------------------------------------------------------------------


class ClientInputError(SoapScribeError):
    """Raised when the uploaded request cannot be processed as given."""

    def __init__(self, detail: str, code: str = "CLIENT_INPUT_ERROR") -> None:
        super().__init__(detail=detail, code=code, status_code=400)


class MissingAudioError(ClientInputError):
    """Raised when the request carries no ``audio`` field."""

    def __init__(self) -> None:
        super().__init__(detail="No audio file provided", code="MISSING_AUDIO")


class AudioTooLargeError(ClientInputError):
    """Raised when the audio payload exceeds the transcription ceiling."""

    def __init__(self, size_bytes: int, limit_bytes: int) -> None:
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes
        limit_mb = limit_bytes / 1024 / 1024
        size_mb = size_bytes / 1024 / 1024
        super().__init__(
            detail=(
                f"Audio file is too large. Maximum size is {limit_mb:g} MB "
                f"(current: {size_mb:.2f} MB). Please record a shorter audio clip."
            ),
            code="AUDIO_TOO_LARGE",
        )


# ---------------------------------------------------------------------------
# Downstream services
# ---------------------------------------------------------------------------


class DownstreamError(SoapScribeError):
    """Raised when an external service call fails.

    Carries the downstream HTTP status (``None`` when no response was
    received) so the error handler can classify it without relying on
    free-text matching alone. ``service`` names the external service in
    user-facing messages.
    """

    default_service = "OpenAI"

    def __init__(
        self,
        detail: str,
        code: str = "DOWNSTREAM_ERROR",
        upstream_status: int | None = None,
        connection_failed: bool = False,
        status_code: int = 500,
        service: str | None = None,
    ) -> None:
        self.upstream_status = upstream_status
        self.connection_failed = connection_failed
        self.service = service or self.default_service
        super().__init__(detail=detail, code=code, status_code=status_code)


class TranscriptionError(DownstreamError):
    """Raised when the speech-to-text service call fails."""

    def __init__(
        self,
        detail: str = "Transcription failed",
        upstream_status: int | None = None,
        connection_failed: bool = False,
    ) -> None:
        super().__init__(
            detail=detail,
            code="TRANSCRIPTION_ERROR",
            upstream_status=upstream_status,
            connection_failed=connection_failed,
        )


class NoteGenerationError(DownstreamError):
    """Raised when the completion service call fails."""

    def __init__(
        self,
        detail: str = "Note generation failed",
        upstream_status: int | None = None,
        connection_failed: bool = False,
        service: str | None = None,
    ) -> None:
        super().__init__(
            detail=detail,
            code="NOTE_GENERATION_ERROR",
            upstream_status=upstream_status,
            connection_failed=connection_failed,
            service=service,
        )


class MalformedResponseError(DownstreamError):
    """Raised when a downstream service answers 2xx with an unusable body."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail=detail, code="MALFORMED_RESPONSE", status_code=400)


# ---------------------------------------------------------------------------
# Recorder (UI side)
# ---------------------------------------------------------------------------


class RecordingAlreadyActiveError(SoapScribeError):
    """Raised when trying to start a recording while one is already active."""

    def __init__(self, status: str = "recording") -> None:
        super().__init__(
            detail=f"A recording session is already active (status: {status})",
            code="RECORDING_ALREADY_ACTIVE",
            status_code=409,
        )


class RecordingNotActiveError(SoapScribeError):
    """Raised when stopping or feeding a session that is not recording."""

    def __init__(self, status: str = "idle") -> None:
        super().__init__(
            detail=f"No recording in progress (status: {status})",
            code="RECORDING_NOT_ACTIVE",
            status_code=409,
        )


class MicrophoneAccessError(PermissionError):
    """Raised when the microphone is denied or unavailable."""
