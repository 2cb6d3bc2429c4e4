"""
SOAP note REST endpoint.

``POST /api/soap-from-audio`` accepts one multipart ``audio`` field,
transcribes it and turns the transcript into a SOAP note. Validation
happens before any external call; all business logic lives in
``SoapPipeline``.
"""

import logging

from fastapi import APIRouter, Depends, File, UploadFile

from soapscribe.api.deps import get_pipeline, require_api_key
from soapscribe.core.config import Settings, get_settings
from soapscribe.core.models import ErrorResponse, SoapNoteResponse
from soapscribe.services.audio.upload import read_upload
from soapscribe.services.pipeline import SoapPipeline

logger = logging.getLogger(__name__)

router = APIRouter(tags=["soap"])


@router.post(
    "/soap-from-audio",
    response_model=SoapNoteResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def soap_from_audio(
    _api_key: str = Depends(require_api_key),
    audio: UploadFile | None = File(None),
    settings: Settings = Depends(get_settings),
    pipeline: SoapPipeline = Depends(get_pipeline),
) -> SoapNoteResponse:
    """Transcribe the uploaded audio and generate a SOAP note from it."""
    upload = await read_upload(audio, max_bytes=settings.max_audio_bytes)
    return await pipeline.run(upload)
