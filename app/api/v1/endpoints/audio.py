"""Audio transcription and TTS endpoints."""
import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import Response

from app.api.deps import get_current_user, get_llm_service
from app.db.models.user import User
from app.schemas import TranscriptionResponse, TTSRequest
from app.services.llm_service import LLMService
from app.services.premium import PremiumFeature, require_feature
from app.services.transcription_service import TranscriptionService
from app.utils.exceptions import (
    AIGatewayError,
    PremiumRequiredError,
    ValidationError,
    handle_ai_gateway_error,
    handle_premium_required,
    handle_validation_error,
)

router = APIRouter(prefix="/audio", tags=["audio"])


@router.post("/transcribe", response_model=TranscriptionResponse)
async def transcribe_audio(
    audio: Annotated[UploadFile, File()],
    llm_service: Annotated[LLMService, Depends(get_llm_service)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> TranscriptionResponse:
    """Transcribe a recording without saving it."""

    content = await audio.read()
    try:
        transcript = await asyncio.to_thread(
            TranscriptionService(llm_service).transcribe,
            content,
            audio.content_type,
            filename=audio.filename,
        )
    except ValidationError as exc:
        raise handle_validation_error(exc) from exc
    except AIGatewayError as exc:
        raise handle_ai_gateway_error(exc) from exc
    return TranscriptionResponse(transcript=transcript)


@router.post("/speak")
def text_to_speech(
    request: TTSRequest,
    llm_service: Annotated[LLMService, Depends(get_llm_service)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> Response:
    """Read text aloud (premium)."""

    try:
        require_feature(current_user, PremiumFeature.TTS)
        if request.voice:
            require_feature(current_user, PremiumFeature.VOICE_CUSTOM)
        audio_bytes = llm_service.text_to_speech(request.text, voice=request.voice)
    except PremiumRequiredError as exc:
        raise handle_premium_required(exc) from exc
    except AIGatewayError as exc:
        raise handle_ai_gateway_error(exc) from exc
    return Response(
        content=audio_bytes,
        media_type="audio/mpeg",
        headers={"Content-Disposition": "inline; filename=speech.mp3"},
    )
