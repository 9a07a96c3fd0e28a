"""Tests for the text-to-speech endpoint."""
from __future__ import annotations

from fastapi.testclient import TestClient

from app.services.users import UserService
from app.utils.exceptions import AIRateLimitError


def test_speak_requires_premium(client: TestClient, auth_headers, llm_provider) -> None:
    response = client.post("/api/v1/audio/speak", json={"text": "Hola"}, headers=auth_headers)

    assert response.status_code == 402
    assert llm_provider.speech_calls == []


def test_speak_returns_mp3_for_premium(client: TestClient, db_session, user, auth_headers, llm_provider) -> None:
    UserService(db_session).set_subscription(user.id, "premium")

    response = client.post(
        "/api/v1/audio/speak", json={"text": "Buenos días", "voice": "alloy"}, headers=auth_headers
    )

    assert response.status_code == 200
    assert response.headers["content-type"] == "audio/mpeg"
    assert response.content == b"ID3-fake-mp3"
    assert llm_provider.speech_calls == [{"text": "Buenos días", "voice": "alloy"}]


def test_speak_maps_rate_limit(client: TestClient, db_session, user, auth_headers, llm_provider) -> None:
    UserService(db_session).set_subscription(user.id, "premium")
    llm_provider.queue(AIRateLimitError("Rate limits exceeded"))

    response = client.post("/api/v1/audio/speak", json={"text": "Hola"}, headers=auth_headers)

    assert response.status_code == 429
