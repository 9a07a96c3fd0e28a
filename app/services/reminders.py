"""Find and deliver due event reminders."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.models.entry import DiaryEvent
from app.db.models.user import User
from app.services.diary_service import as_utc
from app.services.notification_service import NotificationService

# Longest lead time the scan looks ahead for.
MAX_REMINDER_WINDOW = timedelta(days=30)


def is_reminder_due(event: DiaryEvent, now: datetime) -> bool:
    """Due once ``event_date - reminder_minutes`` has passed and the event has not."""

    event_at = as_utc(event.event_date)
    remind_at = event_at - timedelta(minutes=event.reminder_minutes or 0)
    return remind_at <= now < event_at


class ReminderService:
    def __init__(self, db: Session, *, notification_service: Optional[NotificationService] = None) -> None:
        self.db = db
        self.notification_service = notification_service or NotificationService(db)

    def due_events(self, now: Optional[datetime] = None) -> List[DiaryEvent]:
        now = now or datetime.now(timezone.utc)
        candidates = self.db.scalars(
            select(DiaryEvent)
            .join(User, User.id == DiaryEvent.user_id)
            .where(
                DiaryEvent.reminded.is_(False),
                DiaryEvent.event_date > now,
                DiaryEvent.event_date <= now + MAX_REMINDER_WINDOW,
                User.is_active.is_(True),
                User.notifications_enabled.is_(True),
            )
            .order_by(DiaryEvent.event_date.asc())
        ).all()
        return [event for event in candidates if is_reminder_due(event, now)]

    def send_due_reminders(self, now: Optional[datetime] = None) -> int:
        """Notify and mark every due event; return how many were processed."""

        events = self.due_events(now)
        for event in events:
            self.notification_service.notify_event_reminder(
                event.user_id, event.title, event.reminder_minutes
            )
            event.reminded = True
        self.db.commit()
        if events:
            logger.info("Event reminders sent", count=len(events))
        return len(events)


__all__ = ["MAX_REMINDER_WINDOW", "ReminderService", "is_reminder_due"]
