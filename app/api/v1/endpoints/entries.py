"""Voice entry endpoints."""
from __future__ import annotations

import asyncio
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from app.api import deps
from app.db.models.user import User
from app.schemas import (
    AchievementRead,
    DaySummaryRead,
    DiaryEventRead,
    EntryCreate,
    EntrySaveResponse,
    VoiceEntryRead,
)
from app.services.diary_service import DiaryService, EntryResult
from app.utils.exceptions import (
    AIGatewayError,
    ValidationError,
    handle_ai_gateway_error,
    handle_validation_error,
)

router = APIRouter(prefix="/entries", tags=["entries"])


def _to_response(result: EntryResult) -> EntrySaveResponse:
    return EntrySaveResponse(
        entry=VoiceEntryRead.model_validate(result.entry),
        events_count=result.events_count,
        events=[DiaryEventRead.model_validate(event) for event in result.events],
        analysis_failed=result.analysis_failed,
        newly_unlocked=[AchievementRead.from_rule(rule) for rule in result.newly_unlocked],
    )


@router.post("", response_model=EntrySaveResponse, status_code=status.HTTP_201_CREATED)
def create_entry(
    payload: EntryCreate,
    current_user: Annotated[User, Depends(deps.get_current_user)],
    service: Annotated[DiaryService, Depends(deps.get_diary_service)],
) -> EntrySaveResponse:
    """Save a transcribed note and extract its events."""

    try:
        result = service.add_entry(current_user, payload.transcript, payload.duration)
    except ValidationError as exc:
        raise handle_validation_error(exc) from exc
    return _to_response(result)


@router.post("/record", response_model=EntrySaveResponse, status_code=status.HTTP_201_CREATED)
async def record_entry(
    audio: Annotated[UploadFile, File()],
    current_user: Annotated[User, Depends(deps.get_current_user)],
    service: Annotated[DiaryService, Depends(deps.get_diary_service)],
    duration: Annotated[float, Form(ge=0)] = 0,
) -> EntrySaveResponse:
    """Transcribe an uploaded recording and save it as an entry."""

    content = await audio.read()
    try:
        result = await asyncio.to_thread(
            service.record_audio,
            current_user,
            content,
            audio.content_type,
            duration,
            filename=audio.filename,
        )
    except ValidationError as exc:
        raise handle_validation_error(exc) from exc
    except AIGatewayError as exc:
        raise handle_ai_gateway_error(exc) from exc
    return _to_response(result)


@router.get("", response_model=list[VoiceEntryRead])
def list_entries(
    current_user: Annotated[User, Depends(deps.get_current_user)],
    service: Annotated[DiaryService, Depends(deps.get_diary_service)],
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    """Return the user's entries, newest first."""

    return service.list_entries(current_user.id, limit=limit, offset=offset)


@router.get("/day/{day}", response_model=list[VoiceEntryRead])
def list_entries_for_day(
    day: date,
    current_user: Annotated[User, Depends(deps.get_current_user)],
    service: Annotated[DiaryService, Depends(deps.get_diary_service)],
):
    """Return the entries recorded on ``day``."""

    return service.entries_for_date(current_user.id, day)


@router.get("/day/{day}/summary", response_model=DaySummaryRead)
def summarize_day(
    day: date,
    current_user: Annotated[User, Depends(deps.get_current_user)],
    service: Annotated[DiaryService, Depends(deps.get_diary_service)],
) -> DaySummaryRead:
    summary = service.day_summary(current_user.id, day)
    return DaySummaryRead(
        day=summary.day,
        entry_count=summary.entry_count,
        total_duration=summary.total_duration,
        summary=summary.summary,
    )
