"""Schemas for voice entries, extracted events and day summaries."""
from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.achievement import AchievementRead


class EntryCreate(BaseModel):
    """An already transcribed note."""

    transcript: str = Field(..., min_length=1, max_length=20000)
    duration: float = Field(0, ge=0, description="Recording length in seconds")


class VoiceEntryRead(BaseModel):
    id: uuid.UUID
    audio_url: Optional[str] = None
    transcript: Optional[str] = None
    summary: Optional[str] = None
    duration: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class DiaryEventRead(BaseModel):
    id: uuid.UUID
    entry_id: Optional[uuid.UUID] = None
    title: str
    description: Optional[str] = None
    event_date: datetime
    reminded: bool
    reminder_minutes: int

    model_config = ConfigDict(from_attributes=True)


class EntrySaveResponse(BaseModel):
    """Saved entry plus everything its analysis produced."""

    entry: VoiceEntryRead
    events_count: int
    events: list[DiaryEventRead] = Field(default_factory=list)
    analysis_failed: bool = False
    newly_unlocked: list[AchievementRead] = Field(default_factory=list)


class DaySummaryRead(BaseModel):
    day: date
    entry_count: int
    total_duration: int
    summary: str


class ReminderUpdate(BaseModel):
    reminder_minutes: int = Field(..., gt=0, le=60 * 24 * 30)
