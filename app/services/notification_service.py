"""Service for handling Web Push notifications."""
from __future__ import annotations

import json
import uuid

from loguru import logger
from pywebpush import WebPushException, webpush
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.config import settings
from app.db.models.push_subscription import PushSubscription

DEFAULT_ICON = "/favicon.ico"


def reminder_label(minutes: int) -> str:
    """Human label for a reminder lead time."""

    if minutes >= 1440:
        return f"{minutes // 1440} día(s)"
    if minutes >= 60:
        return f"{minutes // 60} hora(s)"
    return f"{minutes} minutos"


class NotificationService:
    def __init__(self, db: Session):
        self.db = db

    def subscribe(self, user_id: uuid.UUID, subscription_info: dict, user_agent: str | None = None) -> PushSubscription:
        """Register or refresh a push subscription."""
        endpoint = subscription_info.get("endpoint")
        if not endpoint:
            raise ValueError("Endpoint required")

        keys = subscription_info.get("keys") or {}

        stmt = select(PushSubscription).where(
            PushSubscription.user_id == user_id,
            PushSubscription.endpoint == endpoint
        )
        subscription = self.db.scalars(stmt).first()
        if subscription:
            subscription.keys = keys
            subscription.user_agent = user_agent
        else:
            subscription = PushSubscription(
                user_id=user_id,
                endpoint=endpoint,
                keys=keys,
                user_agent=user_agent
            )
            self.db.add(subscription)

        self.db.commit()
        return subscription

    def send_notification(self, user_id: uuid.UUID, body: str, title: str, *, tag: str | None = None) -> int:
        """Send a push notification to all user devices; return deliveries."""
        if not settings.VAPID_PRIVATE_KEY:
            logger.debug("VAPID keys not configured, skipping notification", title=title)
            return 0

        subs = self.db.scalars(
            select(PushSubscription).where(PushSubscription.user_id == user_id)
        ).all()

        message = {"title": title, "body": body, "icon": DEFAULT_ICON}
        if tag:
            message["tag"] = tag
        payload = json.dumps(message)

        delivered = 0
        for sub in subs:
            try:
                webpush(
                    subscription_info={
                        "endpoint": sub.endpoint,
                        "keys": sub.keys
                    },
                    data=payload,
                    vapid_private_key=settings.VAPID_PRIVATE_KEY,
                    vapid_claims={"sub": settings.VAPID_SUBJECT}
                )
                delivered += 1
            except WebPushException as ex:
                # 404/410 means subscription expired/unsubscribed
                if ex.response is not None and ex.response.status_code in (404, 410):
                    logger.info("Removing expired push subscription", subscription_id=str(sub.id))
                    self.db.delete(sub)
                else:
                    logger.warning("WebPush failed", subscription_id=str(sub.id), error=str(ex))

        self.db.commit()
        return delivered

    def notify_achievement(self, user_id: uuid.UUID, icon: str, name: str) -> int:
        """Announce a freshly unlocked achievement."""
        return self.send_notification(
            user_id,
            f"{icon} {name}",
            "🎉 ¡Logro desbloqueado!",
            tag=f"achievement-{name}",
        )

    def notify_events_detected(self, user_id: uuid.UUID, count: int) -> int:
        """Tell the user how many events were found in their latest note."""
        return self.send_notification(
            user_id,
            f"Se encontraron {count} evento(s) en tu nota",
            "📅 Eventos detectados",
        )

    def notify_event_reminder(self, user_id: uuid.UUID, title: str, reminder_minutes: int) -> int:
        """Remind the user of an upcoming event."""
        return self.send_notification(
            user_id,
            f"Tu evento es en {reminder_label(reminder_minutes)}",
            f"📅 Recordatorio: {title}",
            tag=f"event-{title}",
        )


__all__ = ["NotificationService", "reminder_label"]
