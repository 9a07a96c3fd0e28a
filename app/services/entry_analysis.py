"""Extract dated events from diary transcripts."""
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Any, List, Optional

from loguru import logger

from app.config import settings
from app.core.prompts.diary_prompts import build_event_extraction_prompt
from app.services.llm_service import LLMService
from app.services.stats_service import utc_today

_FENCE_RE = re.compile(r"```(?:json)?\n?")


@dataclass
class ExtractedEvent:
    """An event the model found in a transcript."""

    title: str
    event_date: datetime
    description: Optional[str] = None


def strip_code_fences(content: str) -> str:
    """Remove markdown code fences around a JSON reply."""

    return _FENCE_RE.sub("", content).strip()


def _parse_event_date(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        try:
            parsed = datetime.combine(date.fromisoformat(raw[:10]), time.min)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_events(content: str) -> List[ExtractedEvent]:
    """Parse the model reply; malformed replies yield no events."""

    try:
        payload = json.loads(strip_code_fences(content))
    except (json.JSONDecodeError, TypeError):
        logger.warning("Failed to parse AI response", preview=(content or "")[:200])
        return []

    raw_events = payload.get("events") if isinstance(payload, dict) else None
    if not isinstance(raw_events, list):
        return []

    events: List[ExtractedEvent] = []
    for item in raw_events:
        if not isinstance(item, dict):
            continue
        title = str(item.get("title") or "").strip()
        event_date = _parse_event_date(item.get("date"))
        if not title or event_date is None:
            logger.debug("Skipping incomplete event", item=item)
            continue
        description = str(item.get("description") or "").strip() or None
        events.append(
            ExtractedEvent(
                title=title[:255],
                event_date=event_date,
                description=description,
            )
        )
    return events


class EntryAnalysisService:
    """Ask the gateway for the events mentioned in a transcript."""

    def __init__(self, llm_service: LLMService, *, model: str | None = None) -> None:
        self.llm_service = llm_service
        self.model = model or settings.ANALYSIS_MODEL

    def extract_events(self, transcript: str, *, today: date | None = None) -> List[ExtractedEvent]:
        if not transcript or not transcript.strip():
            return []

        today = today or utc_today()
        result = self.llm_service.generate_chat_completion(
            [{"role": "user", "content": transcript}],
            model=self.model,
            system_prompt=build_event_extraction_prompt(today.isoformat()),
        )
        logger.debug("AI analysis response", content=result.content[:500])
        return parse_events(result.content)


__all__ = ["EntryAnalysisService", "ExtractedEvent", "parse_events", "strip_code_fences"]
