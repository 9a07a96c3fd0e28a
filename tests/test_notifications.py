"""Tests for push subscriptions and notification delivery."""
from __future__ import annotations

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from pywebpush import WebPushException

from app.db.models.push_subscription import PushSubscription
from app.services import notification_service
from app.services.notification_service import NotificationService

SUBSCRIPTION = {
    "endpoint": "https://push.example.com/device-1",
    "keys": {"p256dh": "pub", "auth": "secret"},
}


def test_vapid_public_key(client: TestClient, monkeypatch) -> None:
    monkeypatch.setattr(notification_service.settings, "VAPID_PUBLIC_KEY", "public-key")

    response = client.get("/api/v1/notifications/vapid-public-key")

    assert response.json() == {"publicKey": "public-key"}


def test_subscribe_is_idempotent_per_endpoint(client: TestClient, db_session, user, auth_headers) -> None:
    first = client.post("/api/v1/notifications/subscribe", json=SUBSCRIPTION, headers=auth_headers)
    second = client.post(
        "/api/v1/notifications/subscribe",
        json={**SUBSCRIPTION, "keys": {"p256dh": "pub2", "auth": "secret2"}},
        headers=auth_headers,
    )

    assert first.status_code == 201
    assert second.status_code == 201
    rows = db_session.query(PushSubscription).filter_by(user_id=user.id).all()
    assert len(rows) == 1
    assert rows[0].keys["p256dh"] == "pub2"


def test_subscribe_requires_endpoint(client: TestClient, auth_headers) -> None:
    response = client.post(
        "/api/v1/notifications/subscribe", json={"keys": SUBSCRIPTION["keys"]}, headers=auth_headers
    )

    assert response.status_code == 422


def test_service_rejects_missing_endpoint(db_session, user) -> None:
    with pytest.raises(ValueError):
        NotificationService(db_session).subscribe(user.id, {"keys": {}})


def test_send_without_vapid_key_is_noop(db_session, user, monkeypatch) -> None:
    monkeypatch.setattr(notification_service.settings, "VAPID_PRIVATE_KEY", None)

    assert NotificationService(db_session).notify_achievement(user.id, "🔥", "Buen ritmo") == 0


def test_expired_subscriptions_are_removed(db_session, user, monkeypatch) -> None:
    service = NotificationService(db_session)
    service.subscribe(user.id, SUBSCRIPTION)
    service.subscribe(user.id, {**SUBSCRIPTION, "endpoint": "https://push.example.com/device-2"})
    monkeypatch.setattr(notification_service.settings, "VAPID_PRIVATE_KEY", "private-key")
    payloads: list[str] = []

    def fake_webpush(subscription_info, data, **kwargs):
        payloads.append(data)
        if subscription_info["endpoint"].endswith("device-1"):
            raise WebPushException("gone", response=SimpleNamespace(status_code=410))

    monkeypatch.setattr(notification_service, "webpush", fake_webpush)

    delivered = service.notify_event_reminder(user.id, "Dentista", 60)

    assert delivered == 1
    assert "Tu evento es en 1 hora(s)" in payloads[0]
    remaining = db_session.query(PushSubscription).filter_by(user_id=user.id).all()
    assert [row.endpoint for row in remaining] == ["https://push.example.com/device-2"]
