"""Answer free-form questions about the user's diary."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import List, Sequence

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.config import settings
from app.core.achievements import AchievementRule
from app.core.prompts.diary_prompts import (
    ASSISTANT_FALLBACK_ANSWER,
    NO_ENTRIES_CONTEXT,
    NO_EVENTS_CONTEXT,
    build_assistant_prompt,
)
from app.db.models.entry import DiaryEvent, VoiceEntry
from app.services.achievement_service import AchievementService
from app.services.llm_service import LLMService
from app.services.stats_service import StatsService, utc_today

_WEEKDAYS = ("lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo")
_MONTHS = (
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
)


def format_long_date(value: date) -> str:
    """``lunes, 19 de octubre de 2026``"""

    return f"{_WEEKDAYS[value.weekday()]}, {value.day} de {_MONTHS[value.month - 1]} de {value.year}"


def format_short_date(value: date) -> str:
    return f"{value.day}/{value.month}/{value.year}"


def _as_date(value: datetime | None) -> date:
    if value is None:
        return datetime.now(timezone.utc).date()
    return value.date()


def build_entries_context(entries: Sequence[VoiceEntry]) -> str:
    if not entries:
        return NO_ENTRIES_CONTEXT
    return "\n\n".join(
        f"[{format_long_date(_as_date(entry.created_at))}]: {entry.transcript or ''}"
        for entry in entries
    )


def build_events_context(events: Sequence[DiaryEvent]) -> str:
    if not events:
        return NO_EVENTS_CONTEXT
    return "\n".join(
        f"- {event.title} ({format_short_date(_as_date(event.event_date))}): {event.description or ''}"
        for event in events
    )


@dataclass
class AssistantAnswer:
    answer: str
    newly_unlocked: List[AchievementRule] = field(default_factory=list)


class DiaryAssistantService:
    """Build diary context and relay the question to the gateway."""

    def __init__(
        self,
        db: Session,
        llm_service: LLMService,
        *,
        achievement_service: AchievementService | None = None,
        model: str | None = None,
    ) -> None:
        self.db = db
        self.llm_service = llm_service
        self.stats_service = StatsService(db)
        self.achievement_service = achievement_service or AchievementService(db)
        self.model = model or settings.ASSISTANT_MODEL

    def build_system_prompt(self, user_id: uuid.UUID, *, today: date | None = None) -> str:
        entries = self.db.scalars(
            select(VoiceEntry)
            .where(VoiceEntry.user_id == user_id)
            .order_by(VoiceEntry.created_at.desc())
        ).all()
        events = self.db.scalars(
            select(DiaryEvent)
            .where(DiaryEvent.user_id == user_id)
            .order_by(DiaryEvent.event_date.desc())
        ).all()
        return build_assistant_prompt(
            format_long_date(today or utc_today()),
            build_entries_context(entries),
            build_events_context(events),
        )

    def ask(self, user_id: uuid.UUID, question: str) -> AssistantAnswer:
        """Answer ``question`` and count it towards the user's stats."""

        logger.info("User question", user_id=str(user_id), length=len(question))
        system_prompt = self.build_system_prompt(user_id)

        self.stats_service.record_question(user_id)

        result = self.llm_service.generate_chat_completion(
            [{"role": "user", "content": question}],
            model=self.model,
            system_prompt=system_prompt,
        )
        answer = result.content.strip() or ASSISTANT_FALLBACK_ANSWER

        unlocked = self.achievement_service.check_and_unlock(user_id).newly_unlocked
        return AssistantAnswer(answer=answer, newly_unlocked=unlocked)


__all__ = [
    "AssistantAnswer",
    "DiaryAssistantService",
    "build_entries_context",
    "build_events_context",
    "format_long_date",
]
