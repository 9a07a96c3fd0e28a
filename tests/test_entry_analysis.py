"""Tests for event extraction from transcripts."""
from __future__ import annotations

from datetime import date, datetime, timezone

from app.services.entry_analysis import EntryAnalysisService, parse_events, strip_code_fences


def test_strip_code_fences():
    fenced = '```json\n{"events": []}\n```'

    assert strip_code_fences(fenced) == '{"events": []}'


def test_parse_events_reads_fenced_reply():
    content = """```json
{"events": [{"title": "Dentista", "date": "2026-10-21T10:00:00", "description": "Revisión anual"}]}
```"""

    events = parse_events(content)

    assert len(events) == 1
    assert events[0].title == "Dentista"
    assert events[0].event_date == datetime(2026, 10, 21, 10, 0, tzinfo=timezone.utc)
    assert events[0].description == "Revisión anual"


def test_parse_events_accepts_plain_dates():
    events = parse_events('{"events": [{"title": "Cumpleaños de Ana", "date": "2026-11-02"}]}')

    assert events[0].event_date == datetime(2026, 11, 2, tzinfo=timezone.utc)
    assert events[0].description is None


def test_parse_events_converts_offsets_to_utc():
    events = parse_events('{"events": [{"title": "Cena", "date": "2026-10-20T21:00:00+02:00"}]}')

    assert events[0].event_date == datetime(2026, 10, 20, 19, 0, tzinfo=timezone.utc)


def test_parse_events_skips_incomplete_items():
    content = (
        '{"events": [{"title": "", "date": "2026-10-20"}, {"title": "Sin fecha"},'
        ' {"title": "Fecha rara", "date": "mañana"}, "texto", {"title": "Gimnasio", "date": "2026-10-22"}]}'
    )

    assert [event.title for event in parse_events(content)] == ["Gimnasio"]


def test_malformed_reply_yields_no_events():
    assert parse_events("Lo siento, no encontré eventos.") == []
    assert parse_events('{"events": "none"}') == []
    assert parse_events("[]") == []


def test_extract_events_sends_transcript_and_today(llm_service, llm_provider):
    llm_provider.queue('{"events": [{"title": "Reunión", "date": "2026-10-20T09:00:00"}]}')

    events = EntryAnalysisService(llm_service).extract_events(
        "Mañana tengo una reunión a las nueve", today=date(2026, 10, 19)
    )

    assert [event.title for event in events] == ["Reunión"]
    call = llm_provider.calls[0]
    assert call["messages"][0]["role"] == "system"
    assert "2026-10-19" in call["messages"][0]["content"]
    assert call["messages"][1] == {"role": "user", "content": "Mañana tengo una reunión a las nueve"}


def test_blank_transcript_skips_gateway(llm_service, llm_provider):
    assert EntryAnalysisService(llm_service).extract_events("   ") == []
    assert llm_provider.calls == []


def test_extract_events_defaults_to_utc_today(monkeypatch, llm_service, llm_provider):
    monkeypatch.setattr("app.services.entry_analysis.utc_today", lambda: date(2026, 12, 31))

    EntryAnalysisService(llm_service).extract_events("Nochevieja en casa")

    assert "2026-12-31" in llm_provider.calls[0]["messages"][0]["content"]
