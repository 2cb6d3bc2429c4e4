"""
Recorder session: one explicit object for the whole recording cycle.

States: idle -> recording -> processing -> idle

Only one cycle can be active at a time. The audio source (microphone) is
held from ``start()`` until ``stop()`` and is released on every exit path.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, field

from soapscribe.core.exceptions import (
    MicrophoneAccessError,
    RecordingAlreadyActiveError,
    RecordingNotActiveError,
)
from soapscribe.core.models import (
    DEFAULT_AUDIO_CONTENT_TYPE,
    AudioUpload,
    SessionStatus,
)

logger = logging.getLogger(__name__)

_EXTENSIONS = {
    "audio/webm": ".webm",
    "audio/wav": ".wav",
    "audio/x-wav": ".wav",
    "audio/ogg": ".ogg",
    "audio/mpeg": ".mp3",
    "audio/mp4": ".m4a",
}


def filename_for(mime_type: str) -> str:
    """Return the upload filename matching ``mime_type``."""
    base_type = mime_type.split(";", 1)[0].strip().lower()
    return "recording" + _EXTENSIONS.get(base_type, ".webm")


class AudioSource(ABC):
    """A capture device that yields encoded audio chunks."""

    mime_type: str = DEFAULT_AUDIO_CONTENT_TYPE

    @abstractmethod
    def open(self) -> None:
        """Acquire the device.

        Raises:
            MicrophoneAccessError: When access is denied or unavailable.
        """

    @abstractmethod
    def chunks(self) -> Iterator[bytes]:
        """Yield audio chunks as they become available."""

    @abstractmethod
    def close(self) -> None:
        """Release the device."""


class BrowserClipSource(AudioSource):
    """Audio captured by the browser through ``st.audio_input``.

    The browser owns the microphone while the widget records; this source
    replays the finished clip as chunks and closes the buffer afterwards.
    """

    def __init__(self, clip, chunk_size: int = 64 * 1024) -> None:
        self._clip = clip
        self._chunk_size = chunk_size
        self.mime_type = getattr(clip, "type", None) or "audio/wav"

    def open(self) -> None:
        if self._clip is None or not getattr(self._clip, "size", 0):
            raise MicrophoneAccessError(
                "Failed to start recording. Please allow microphone access."
            )
        self._clip.seek(0)

    def chunks(self) -> Iterator[bytes]:
        while chunk := self._clip.read(self._chunk_size):
            yield chunk

    def close(self) -> None:
        self._clip.close()


@dataclass
class AudioCapture:
    """Audio chunks accumulated during one recording."""

    mime_type: str = DEFAULT_AUDIO_CONTENT_TYPE
    chunks: list[bytes] = field(default_factory=list)

    def append(self, chunk: bytes) -> None:
        """Append a chunk; empty chunks are dropped."""
        if chunk:
            self.chunks.append(chunk)

    @property
    def size(self) -> int:
        return sum(len(c) for c in self.chunks)

    def finalize(self) -> AudioUpload:
        """Join all chunks into one audio object tagged with the MIME type."""
        return AudioUpload(
            data=b"".join(self.chunks),
            filename=filename_for(self.mime_type),
            content_type=self.mime_type,
        )


class RecorderSession:
    """Holds the recorder state and the last displayed result.

    ``transcript`` and ``soap_note`` change only after a successful
    submission; failures leave them untouched.
    """

    def __init__(self) -> None:
        self.status = SessionStatus.idle
        self.transcript = ""
        self.soap_note = ""
        self._source: AudioSource | None = None
        self._capture: AudioCapture | None = None

    @property
    def is_busy(self) -> bool:
        """True while a recording or submission is in flight."""
        return self.status is not SessionStatus.idle

    @property
    def captured_bytes(self) -> int:
        return self._capture.size if self._capture else 0

    def start(self, source: AudioSource) -> None:
        """Acquire ``source`` and begin accumulating audio.

        Raises:
            RecordingAlreadyActiveError: When a cycle is already active.
            MicrophoneAccessError: When the source cannot be opened.
        """
        if self.is_busy:
            raise RecordingAlreadyActiveError(status=self.status)

        source.open()
        self._source = source
        self._capture = AudioCapture(mime_type=source.mime_type)
        self.status = SessionStatus.recording
        logger.info("Recording started (%s)", source.mime_type)

    def on_data(self, chunk: bytes) -> None:
        """Accumulate one chunk from the source."""
        if self.status is not SessionStatus.recording or self._capture is None:
            raise RecordingNotActiveError(status=self.status)
        self._capture.append(chunk)

    def stop(self) -> AudioUpload:
        """Finalize the capture and release the source.

        Returns:
            The assembled audio, ready for ``submit()``.
        """
        if self.status is not SessionStatus.recording or self._capture is None:
            raise RecordingNotActiveError(status=self.status)

        try:
            audio = self._capture.finalize()
        except Exception:
            self.status = SessionStatus.idle
            raise
        finally:
            self._release()

        self.status = SessionStatus.processing
        logger.info("Recording stopped: %d bytes captured", audio.size)
        return audio

    def abort(self) -> None:
        """Drop the current capture and return to idle."""
        self._release()
        self.status = SessionStatus.idle

    def submit(self, client, audio: AudioUpload) -> dict:
        """Send ``audio`` to the backend and store the returned texts.

        Args:
            client: An ``APIClient`` (or anything with ``create_soap_note``).
            audio: The audio returned by ``stop()``.

        Raises:
            APIError: When the backend reports a failure.
        """
        if self.status is not SessionStatus.processing:
            raise RecordingNotActiveError(status=self.status)

        try:
            result = client.create_soap_note(audio)
            self.transcript = result.get("transcript", "")
            self.soap_note = result.get("soapNote", "")
            return result
        finally:
            self.status = SessionStatus.idle

    def record(self, source: AudioSource, client) -> dict:
        """Run one full cycle: start, drain ``source``, stop, submit."""
        self.start(source)
        try:
            for chunk in source.chunks():
                self.on_data(chunk)
        except Exception:
            self.abort()
            raise
        audio = self.stop()
        return self.submit(client, audio)

    def _release(self) -> None:
        source, self._source = self._source, None
        self._capture = None
        if source is None:
            return
        try:
            source.close()
        except Exception:
            logger.exception("Failed to release audio source")
