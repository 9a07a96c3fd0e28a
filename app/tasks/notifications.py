"""Celery tasks for event reminders."""
from __future__ import annotations

from loguru import logger

from app.celery_app import celery_app
from app.db.session import SessionLocal
from app.services.reminders import ReminderService


@celery_app.task(name="app.tasks.notifications.send_event_reminders")
def send_event_reminders() -> dict[str, int]:
    """Push reminders for events whose lead time has started."""

    db = SessionLocal()
    try:
        sent = ReminderService(db).send_due_reminders()
        logger.info("Event reminders processed", reminders_sent=sent)
        return {"reminders_sent": sent}
    finally:
        db.close()
