"""Audio transcription through the AI gateway's multimodal chat endpoint."""
from __future__ import annotations

import base64

from loguru import logger

from app.config import settings
from app.core.prompts.diary_prompts import TRANSCRIPTION_SYSTEM_PROMPT, TRANSCRIPTION_USER_PROMPT
from app.services.llm_service import LLMService
from app.utils.exceptions import ValidationError

DEFAULT_AUDIO_MIME = "audio/webm"


def normalize_mime_type(content_type: str | None) -> str:
    """Strip codec parameters from recorder MIME types."""

    mime_type = (content_type or DEFAULT_AUDIO_MIME).strip().lower()
    if mime_type.startswith("audio/webm"):
        return "audio/webm"
    return mime_type.split(";", 1)[0].strip() or DEFAULT_AUDIO_MIME


def audio_format_for(mime_type: str) -> str:
    """Return the ``input_audio`` format the gateway accepts."""

    if "wav" in mime_type:
        return "wav"
    if "mp3" in mime_type or "mpeg" in mime_type:
        return "mp3"
    return "wav"


class TranscriptionService:
    """Turn recorded audio into a literal transcript."""

    def __init__(self, llm_service: LLMService, *, model: str | None = None) -> None:
        self.llm_service = llm_service
        self.model = model or settings.TRANSCRIPTION_MODEL

    def build_messages(self, audio: bytes, mime_type: str) -> list[dict]:
        encoded = base64.b64encode(audio).decode("ascii")
        return [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": TRANSCRIPTION_USER_PROMPT},
                    {
                        "type": "input_audio",
                        "input_audio": {"data": encoded, "format": audio_format_for(mime_type)},
                    },
                ],
            }
        ]

    def transcribe(self, audio: bytes, content_type: str | None = None, *, filename: str | None = None) -> str:
        """Return the transcript for ``audio``.

        Raises:
            ValidationError: when no audio was uploaded or it is not audio.
            AIGatewayError: when the gateway call fails.
        """
        if not audio:
            raise ValidationError("No audio file provided")
        if content_type and not content_type.lower().startswith("audio/"):
            raise ValidationError("Invalid file type. Must be audio.", {"content_type": content_type})

        mime_type = normalize_mime_type(content_type)
        logger.info(
            "Received audio file",
            filename=filename,
            size=len(audio),
            mime_type=mime_type,
        )

        result = self.llm_service.generate_chat_completion(
            self.build_messages(audio, mime_type),
            model=self.model,
            system_prompt=TRANSCRIPTION_SYSTEM_PROMPT,
        )
        transcript = result.content.strip()
        logger.debug("Transcription result", preview=transcript[:100])
        return transcript


__all__ = ["TranscriptionService", "audio_format_for", "normalize_mime_type"]
