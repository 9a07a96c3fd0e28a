"""Voice entry lifecycle: record, transcribe, persist, analyze."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.config import settings
from app.core.achievements import AchievementRule
from app.db.models.entry import DiaryEvent, VoiceEntry
from app.db.models.user import User
from app.services.achievement_service import AchievementService
from app.services.entry_analysis import EntryAnalysisService, ExtractedEvent
from app.services.llm_service import LLMService
from app.services.notification_service import NotificationService
from app.services.stats_service import StatsService
from app.services.transcription_service import TranscriptionService
from app.utils.exceptions import AIGatewayError, EntryNotFoundError, ValidationError


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive timestamps read back from SQLite."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def day_bounds(day: date) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


@dataclass
class EntryResult:
    """Outcome of saving one voice entry."""

    entry: VoiceEntry
    events: List[DiaryEvent] = field(default_factory=list)
    analysis_failed: bool = False
    newly_unlocked: List[AchievementRule] = field(default_factory=list)

    @property
    def events_count(self) -> int:
        return len(self.events)


@dataclass
class DaySummary:
    """Aggregate of one calendar day of entries."""

    day: date
    entry_count: int
    total_duration: int
    summary: str


def summarize_entries(entries: List[VoiceEntry]) -> str:
    """Join entry summaries, or describe how many notes were recorded."""

    if not entries:
        return "No hay entradas para este día. ¡Cuéntame cómo te fue!"
    summaries = [entry.summary for entry in entries if entry.summary]
    if summaries:
        return ". ".join(summaries)
    plural = "s" if len(entries) > 1 else ""
    return f"{len(entries)} nota{plural} grabada{plural} hoy."


class DiaryService:
    """Coordinate voice entries, extracted events and their side effects."""

    def __init__(
        self,
        db: Session,
        llm_service: Optional[LLMService] = None,
        *,
        achievement_service: Optional[AchievementService] = None,
        notification_service: Optional[NotificationService] = None,
    ) -> None:
        self.db = db
        self.llm_service = llm_service
        self.stats_service = StatsService(db)
        self.achievement_service = achievement_service or AchievementService(db)
        self.notification_service = notification_service or NotificationService(db)

    def _require_llm(self) -> LLMService:
        if self.llm_service is None:
            raise AIGatewayError("AI gateway is not configured")
        return self.llm_service

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------
    def record_audio(
        self,
        user: User,
        audio: bytes,
        content_type: Optional[str],
        duration: float,
        *,
        filename: Optional[str] = None,
    ) -> EntryResult:
        """Transcribe ``audio`` and save it as an entry."""

        transcript = TranscriptionService(self._require_llm()).transcribe(
            audio, content_type, filename=filename
        )
        if not transcript:
            raise ValidationError("No speech detected in the recording")
        return self.add_entry(user, transcript, duration)

    def add_entry(
        self,
        user: User,
        transcript: str,
        duration: float,
        *,
        audio_url: Optional[str] = None,
    ) -> EntryResult:
        """Persist an entry, update stats, extract events, check achievements."""

        transcript = (transcript or "").strip()
        if not transcript:
            raise ValidationError("Transcript must not be empty")

        now = datetime.now(timezone.utc)
        entry = VoiceEntry(
            user_id=user.id,
            transcript=transcript,
            duration=max(int(round(duration or 0)), 0),
            audio_url=audio_url,
            created_at=now,
            updated_at=now,
        )
        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)
        logger.info("Voice entry saved", user_id=str(user.id), entry_id=str(entry.id))

        self.stats_service.record_entry(user.id, on=now.date())

        result = EntryResult(entry=entry)
        try:
            extracted = EntryAnalysisService(self._require_llm()).extract_events(
                transcript, today=now.date()
            )
        except AIGatewayError as exc:
            logger.error("Analysis error", entry_id=str(entry.id), error=exc.message)
            result.analysis_failed = True
            extracted = []

        if extracted:
            result.events = self._save_events(user.id, entry.id, extracted)
            self.stats_service.record_events(user.id, len(result.events))
            self.notification_service.notify_events_detected(user.id, len(result.events))

        result.newly_unlocked = self.achievement_service.check_and_unlock(user.id).newly_unlocked
        return result

    def _save_events(
        self, user_id: uuid.UUID, entry_id: uuid.UUID, extracted: List[ExtractedEvent]
    ) -> List[DiaryEvent]:
        events = [
            DiaryEvent(
                user_id=user_id,
                entry_id=entry_id,
                title=item.title,
                description=item.description,
                event_date=item.event_date,
                reminded=False,
                reminder_minutes=settings.DEFAULT_REMINDER_MINUTES,
            )
            for item in extracted
        ]
        self.db.add_all(events)
        self.db.commit()
        logger.info("Events extracted", entry_id=str(entry_id), count=len(events))
        return events

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def list_entries(self, user_id: uuid.UUID, *, limit: int = 50, offset: int = 0) -> List[VoiceEntry]:
        return list(
            self.db.scalars(
                select(VoiceEntry)
                .where(VoiceEntry.user_id == user_id)
                .order_by(VoiceEntry.created_at.desc())
                .offset(offset)
                .limit(limit)
            ).all()
        )

    def entries_for_date(self, user_id: uuid.UUID, day: date) -> List[VoiceEntry]:
        """Entries created on ``day`` (UTC calendar day), newest first."""

        start, end = day_bounds(day)
        return list(
            self.db.scalars(
                select(VoiceEntry)
                .where(
                    VoiceEntry.user_id == user_id,
                    VoiceEntry.created_at >= start,
                    VoiceEntry.created_at < end,
                )
                .order_by(VoiceEntry.created_at.desc())
            ).all()
        )

    def day_summary(self, user_id: uuid.UUID, day: date) -> DaySummary:
        entries = self.entries_for_date(user_id, day)
        return DaySummary(
            day=day,
            entry_count=len(entries),
            total_duration=sum(entry.duration or 0 for entry in entries),
            summary=summarize_entries(entries),
        )

    def upcoming_events(
        self, user_id: uuid.UUID, *, limit: Optional[int] = None, now: Optional[datetime] = None
    ) -> List[DiaryEvent]:
        now = now or datetime.now(timezone.utc)
        return list(
            self.db.scalars(
                select(DiaryEvent)
                .where(DiaryEvent.user_id == user_id, DiaryEvent.event_date >= now)
                .order_by(DiaryEvent.event_date.asc())
                .limit(limit or settings.UPCOMING_EVENTS_LIMIT)
            ).all()
        )

    def update_reminder(self, user_id: uuid.UUID, event_id: uuid.UUID, minutes: int) -> DiaryEvent:
        """Change how long before ``event_id`` the reminder fires."""

        if minutes <= 0:
            raise ValidationError("Reminder minutes must be positive", {"minutes": minutes})
        event = self.db.scalar(
            select(DiaryEvent).where(DiaryEvent.id == event_id, DiaryEvent.user_id == user_id)
        )
        if event is None:
            raise EntryNotFoundError(f"Event {event_id} not found")
        event.reminder_minutes = minutes
        event.reminded = False
        self.db.commit()
        return event


__all__ = ["DaySummary", "DiaryService", "EntryResult", "as_utc", "summarize_entries"]
