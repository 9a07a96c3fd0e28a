"""Tests for user profile and premium endpoints."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from app.services.premium import PremiumFeature, has_feature, premium_state
from app.services.users import UserService


def test_get_current_user_profile(client: TestClient, user, auth_headers) -> None:
    response = client.get("/api/v1/users/me", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["email"] == user.email
    assert data["notifications_enabled"] is True


def test_update_current_user_profile(client: TestClient, auth_headers) -> None:
    response = client.patch(
        "/api/v1/users/me",
        json={"display_name": "Nuevo nombre", "notifications_enabled": False},
        headers=auth_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["display_name"] == "Nuevo nombre"
    assert data["notifications_enabled"] is False


def test_empty_update_is_rejected(client: TestClient, auth_headers) -> None:
    response = client.patch("/api/v1/users/me", json={}, headers=auth_headers)

    assert response.status_code == 422


def test_unknown_fields_are_rejected(client: TestClient, auth_headers) -> None:
    response = client.patch("/api/v1/users/me", json={"subscription_tier": "premium"}, headers=auth_headers)

    assert response.status_code == 422


def test_profile_requires_auth(client: TestClient) -> None:
    assert client.get("/api/v1/users/me").status_code == 401


def test_free_user_premium_status(client: TestClient, auth_headers) -> None:
    response = client.get("/api/v1/users/me/premium", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {"is_premium": False, "plan": "free", "expires_at": None, "features": []}


def test_premium_user_gets_every_feature(client: TestClient, db_session, user, auth_headers) -> None:
    UserService(db_session).set_subscription(
        user.id, "premium", datetime.now(timezone.utc) + timedelta(days=30)
    )

    data = client.get("/api/v1/users/me/premium", headers=auth_headers).json()

    assert data["is_premium"] is True
    assert data["plan"] == "premium"
    assert set(data["features"]) == {feature.value for feature in PremiumFeature}


def test_expired_premium_falls_back_to_free(user_factory) -> None:
    lapsed = user_factory(
        subscription_tier="premium",
        subscription_expires_at=datetime.now(timezone.utc) - timedelta(days=1),
    )

    assert premium_state(lapsed).plan == "free"
    assert not has_feature(lapsed, PremiumFeature.TTS)


def test_premium_without_expiry_is_active(user_factory) -> None:
    lifetime = user_factory(subscription_tier="premium", subscription_expires_at=None)

    assert premium_state(lifetime).is_premium is True
