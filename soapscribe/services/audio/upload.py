"""Validation of uploaded audio before any downstream call is made."""

import logging

from fastapi import UploadFile

from soapscribe.core.exceptions import AudioTooLargeError, MissingAudioError
from soapscribe.core.models import (
    DEFAULT_AUDIO_CONTENT_TYPE,
    DEFAULT_AUDIO_FILENAME,
    AudioUpload,
)

logger = logging.getLogger(__name__)


def check_audio_size(audio: AudioUpload, max_bytes: int) -> AudioUpload:
    """Raise ``AudioTooLargeError`` when ``audio`` exceeds ``max_bytes``."""
    if audio.size > max_bytes:
        logger.warning("Rejecting %.2f MB upload (limit %d bytes)", audio.size_mb, max_bytes)
        raise AudioTooLargeError(size_bytes=audio.size, limit_bytes=max_bytes)
    return audio


async def read_upload(file: UploadFile | None, max_bytes: int) -> AudioUpload:
    """Read the multipart ``audio`` field into an ``AudioUpload``.

    Missing filename and MIME type fall back to the recorder's defaults.

    Raises:
        MissingAudioError: When the field is absent.
        AudioTooLargeError: When the payload exceeds ``max_bytes``.
    """
    if file is None:
        raise MissingAudioError()

    data = await file.read()
    audio = AudioUpload(
        data=data,
        filename=file.filename or DEFAULT_AUDIO_FILENAME,
        content_type=file.content_type or DEFAULT_AUDIO_CONTENT_TYPE,
    )
    logger.info(
        "Processing audio file: %s, size: %.2f MB, type: %s",
        audio.filename,
        audio.size_mb,
        audio.content_type,
    )
    return check_audio_size(audio, max_bytes)
