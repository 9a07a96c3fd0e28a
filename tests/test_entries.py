"""Tests for voice entry endpoints and the diary service."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient

from app.core.security import create_access_token
from app.db.models.entry import DiaryEvent, VoiceEntry
from app.services.diary_service import DiaryService, summarize_entries
from app.services.llm_service import GatewayProvider, LLMService
from app.services.stats_service import StatsService
from app.utils.exceptions import AIGatewayError


def future_iso(days: int = 2) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).replace(microsecond=0).isoformat()


def test_create_entry_extracts_events_and_unlocks(
    client: TestClient, db_session, catalog, user, auth_headers, llm_provider
) -> None:
    llm_provider.queue(
        f'```json\n{{"events": [{{"title": "Dentista", "date": "{future_iso()}", "description": "Limpieza"}}]}}\n```'
    )

    response = client.post(
        "/api/v1/entries",
        json={"transcript": "El jueves tengo dentista.", "duration": 12.4},
        headers=auth_headers,
    )

    assert response.status_code == 201
    data = response.json()
    assert data["entry"]["transcript"] == "El jueves tengo dentista."
    assert data["entry"]["duration"] == 12
    assert data["events_count"] == 1
    assert data["events"][0]["title"] == "Dentista"
    assert data["events"][0]["reminder_minutes"] == 60
    assert data["analysis_failed"] is False
    assert [a["achievement_key"] for a in data["newly_unlocked"]] == ["first_entry", "first_event"]

    stats = StatsService(db_session).snapshot(user.id)
    assert stats.total_entries == 1
    assert stats.total_events == 1
    assert stats.current_streak == 1


def test_entry_saved_when_analysis_fails(
    client: TestClient, db_session, catalog, user, auth_headers, llm_provider
) -> None:
    llm_provider.queue(AIGatewayError("gateway down"))

    response = client.post("/api/v1/entries", json={"transcript": "Día tranquilo."}, headers=auth_headers)

    assert response.status_code == 201
    data = response.json()
    assert data["analysis_failed"] is True
    assert data["events_count"] == 0
    assert db_session.query(VoiceEntry).filter_by(user_id=user.id).count() == 1
    assert [a["achievement_key"] for a in data["newly_unlocked"]] == ["first_entry"]


def test_entry_without_events_leaves_event_count(client: TestClient, db_session, user, auth_headers) -> None:
    client.post("/api/v1/entries", json={"transcript": "Nada especial hoy."}, headers=auth_headers)

    assert StatsService(db_session).snapshot(user.id).total_events == 0
    assert db_session.query(DiaryEvent).count() == 0


def test_blank_transcript_is_rejected(client: TestClient, auth_headers) -> None:
    response = client.post("/api/v1/entries", json={"transcript": ""}, headers=auth_headers)

    assert response.status_code == 422


def test_whitespace_transcript_is_rejected(client: TestClient, auth_headers) -> None:
    response = client.post("/api/v1/entries", json={"transcript": "   "}, headers=auth_headers)

    assert response.status_code == 422
    assert response.json()["detail"]["message"] == "Transcript must not be empty"


def test_record_transcribes_then_saves(client: TestClient, auth_headers, llm_provider) -> None:
    llm_provider.queue("Hoy aprendí a cocinar paella.", '{"events": []}')

    response = client.post(
        "/api/v1/entries/record",
        files={"audio": ("nota.webm", b"webm-bytes", "audio/webm")},
        data={"duration": "8"},
        headers=auth_headers,
    )

    assert response.status_code == 201
    assert response.json()["entry"]["transcript"] == "Hoy aprendí a cocinar paella."
    assert response.json()["entry"]["duration"] == 8


def test_record_with_silent_audio_is_rejected(client: TestClient, auth_headers, llm_provider) -> None:
    llm_provider.queue("   ")

    response = client.post(
        "/api/v1/entries/record",
        files={"audio": ("nota.webm", b"webm-bytes", "audio/webm")},
        headers=auth_headers,
    )

    assert response.status_code == 422


def test_list_entries_newest_first(client: TestClient, db_session, user, auth_headers) -> None:
    now = datetime.now(timezone.utc)
    db_session.add_all(
        [
            VoiceEntry(user_id=user.id, transcript="antigua", duration=1, created_at=now - timedelta(days=2)),
            VoiceEntry(user_id=user.id, transcript="reciente", duration=1, created_at=now),
        ]
    )
    db_session.commit()

    response = client.get("/api/v1/entries", headers=auth_headers)

    assert [entry["transcript"] for entry in response.json()] == ["reciente", "antigua"]


def test_entries_are_private(client: TestClient, db_session, user_factory, login_as) -> None:
    owner, other = user_factory(), user_factory()
    db_session.add(VoiceEntry(user_id=owner.id, transcript="secreto", duration=3))
    db_session.commit()

    response = client.get("/api/v1/entries", headers=login_as(other))

    assert response.json() == []


def test_day_endpoints(client: TestClient, db_session, user, auth_headers) -> None:
    day = datetime(2026, 10, 15, tzinfo=timezone.utc)
    db_session.add_all(
        [
            VoiceEntry(user_id=user.id, transcript="mañana", summary="Paseo", duration=30, created_at=day + timedelta(hours=8)),
            VoiceEntry(user_id=user.id, transcript="noche", summary="Cena", duration=45, created_at=day + timedelta(hours=21)),
            VoiceEntry(user_id=user.id, transcript="otro día", duration=10, created_at=day + timedelta(days=1, hours=1)),
        ]
    )
    db_session.commit()

    entries = client.get("/api/v1/entries/day/2026-10-15", headers=auth_headers).json()
    summary = client.get("/api/v1/entries/day/2026-10-15/summary", headers=auth_headers).json()

    assert [entry["transcript"] for entry in entries] == ["noche", "mañana"]
    assert summary == {"day": "2026-10-15", "entry_count": 2, "total_duration": 75, "summary": "Cena. Paseo"}


def test_empty_day_summary(client: TestClient, auth_headers) -> None:
    summary = client.get("/api/v1/entries/day/2020-01-01/summary", headers=auth_headers).json()

    assert summary["entry_count"] == 0
    assert summary["summary"].startswith("No hay entradas")


def test_summarize_entries_counts_notes_without_summaries() -> None:
    entries = [VoiceEntry(transcript="a"), VoiceEntry(transcript="b")]

    assert summarize_entries(entries) == "2 notas grabadas hoy."
    assert summarize_entries(entries[:1]) == "1 nota grabada hoy."


def test_add_entry_without_gateway_marks_analysis_failed(db_session, user) -> None:
    result = DiaryService(db_session, None).add_entry(user, "Sin conexión", 5)

    assert result.analysis_failed is True
    assert result.entry.id is not None


def test_events_detected_notification(db_session, user, llm_service, llm_provider) -> None:
    detected: list[int] = []

    class Notifier:
        def notify_events_detected(self, user_id, count):
            detected.append(count)

    llm_provider.queue(
        f'{{"events": [{{"title": "A", "date": "{future_iso(1)}"}}, {{"title": "B", "date": "{future_iso(3)}"}}]}}'
    )

    result = DiaryService(db_session, llm_service, notification_service=Notifier()).add_entry(
        user, "Dos planes", 4
    )

    assert result.events_count == 2
    assert detected == [2]


@pytest.mark.asyncio
async def test_record_upload_over_async_client(async_client, user, llm_provider) -> None:
    headers = {"Authorization": f"Bearer {create_access_token(str(user.id))}"}
    llm_provider.queue("Nota desde el móvil.")

    response = await async_client.post(
        "/api/v1/entries/record",
        files={"audio": ("nota.mp3", b"mp3-bytes", "audio/mpeg")},
        headers=headers,
    )

    assert response.status_code == 201
    assert response.json()["entry"]["transcript"] == "Nota desde el móvil."


def test_malformed_gateway_reply_keeps_entry(monkeypatch, db_session, catalog, user) -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>upstream proxy page</html>"))
    original_client = httpx.Client

    def client_factory(*args, **kwargs):
        kwargs["transport"] = transport
        return original_client(*args, **kwargs)

    monkeypatch.setattr("app.services.llm_service.httpx.Client", client_factory)
    gateway = GatewayProvider(api_key="key", model="test-model", base_url="https://gateway.test/v1")

    result = DiaryService(db_session, LLMService([gateway])).add_entry(user, "Mañana tengo médico", 5)

    assert result.analysis_failed is True
    assert result.events_count == 0
    assert db_session.query(VoiceEntry).filter_by(user_id=user.id).count() == 1
    assert [rule.key for rule in result.newly_unlocked] == ["first_entry"]


def track_event_loop(llm_provider) -> list[bool]:
    """Record, per gateway call, whether it ran inside the event loop."""

    on_loop: list[bool] = []
    generate = llm_provider.generate

    def tracking_generate(messages, **kwargs):
        try:
            asyncio.get_running_loop()
            on_loop.append(True)
        except RuntimeError:
            on_loop.append(False)
        return generate(messages, **kwargs)

    llm_provider.generate = tracking_generate
    return on_loop


@pytest.mark.asyncio
async def test_record_upload_runs_gateway_off_the_event_loop(async_client, user, llm_provider) -> None:
    headers = {"Authorization": f"Bearer {create_access_token(str(user.id))}"}
    on_loop = track_event_loop(llm_provider)
    llm_provider.queue("Nota en segundo plano.")

    response = await async_client.post(
        "/api/v1/entries/record",
        files={"audio": ("nota.wav", b"wav-bytes", "audio/wav")},
        headers=headers,
    )

    assert response.status_code == 201
    assert on_loop == [False, False]


@pytest.mark.asyncio
async def test_transcribe_runs_gateway_off_the_event_loop(async_client, user, llm_provider) -> None:
    headers = {"Authorization": f"Bearer {create_access_token(str(user.id))}"}
    on_loop = track_event_loop(llm_provider)
    llm_provider.queue("Solo transcribir.")

    response = await async_client.post(
        "/api/v1/audio/transcribe",
        files={"audio": ("nota.wav", b"wav-bytes", "audio/wav")},
        headers=headers,
    )

    assert response.status_code == 200
    assert on_loop == [False]
