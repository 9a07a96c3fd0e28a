"""Schemas for the diary assistant and audio endpoints."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.achievement import AchievementRead


class QuestionRequest(BaseModel):
    question: str = Field(..., min_length=1, max_length=2000)


class AnswerResponse(BaseModel):
    success: bool = True
    answer: str
    newly_unlocked: list[AchievementRead] = Field(default_factory=list)


class TranscriptionResponse(BaseModel):
    success: bool = True
    transcript: str


class TTSRequest(BaseModel):
    """Request body for text-to-speech."""

    text: str = Field(..., min_length=1, max_length=4096)
    voice: Optional[str] = Field(None, max_length=50, description="Voice name, e.g. nova")
