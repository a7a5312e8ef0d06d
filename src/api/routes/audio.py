"""
Voice dictation endpoint.

``POST /process-audio`` accepts a recorded clip plus the post kind and
returns the post fields extracted from it. Failure kinds are translated
to HTTP statuses by the global error handlers.
"""

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile

from src.core.exceptions import BadRequestError
from src.core.models import ErrorResponse, ExtractionResult, PostKind
from src.services.voice_pipeline import VoicePostPipeline, create_pipeline

logger = logging.getLogger(__name__)

router = APIRouter(tags=["audio"])


def get_voice_pipeline() -> VoicePostPipeline:
    """Build the pipeline for this request (raises on missing configuration)."""
    return create_pipeline()


@router.post(
    "/process-audio",
    response_model=ExtractionResult,
    response_model_exclude_none=True,
    responses={
        400: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def process_audio(
    audio: UploadFile | None = File(None),
    kind: str = Form("Offer", alias="type"),
    pipeline: VoicePostPipeline = Depends(get_voice_pipeline),
):
    """Transcribe a dictated post and extract its fields."""
    kind = kind or PostKind.offer.value
    if kind not in (PostKind.offer.value, PostKind.request.value):
        raise BadRequestError('Invalid post type. Must be "Offer" or "Request"')
    if audio is None:
        raise BadRequestError("No audio file provided")

    audio_bytes = await audio.read()
    if not audio_bytes:
        raise BadRequestError("No audio file provided")

    logger.info("Processing %d bytes of audio for a %s", len(audio_bytes), kind)
    return await pipeline.process(audio_bytes, PostKind(kind))
