"""Extracted event endpoints."""
from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.api import deps
from app.db.models.user import User
from app.schemas import DiaryEventRead, ReminderUpdate
from app.services.diary_service import DiaryService
from app.utils.exceptions import (
    EntryNotFoundError,
    ValidationError,
    handle_not_found_error,
    handle_validation_error,
)

router = APIRouter(prefix="/events", tags=["events"])


@router.get("/upcoming", response_model=list[DiaryEventRead])
def upcoming_events(
    current_user: Annotated[User, Depends(deps.get_current_user)],
    service: Annotated[DiaryService, Depends(deps.get_diary_service)],
    limit: int = Query(5, ge=1, le=50),
):
    """Return the next events, soonest first."""

    return service.upcoming_events(current_user.id, limit=limit)


@router.patch("/{event_id}/reminder", response_model=DiaryEventRead)
def update_event_reminder(
    event_id: uuid.UUID,
    payload: ReminderUpdate,
    current_user: Annotated[User, Depends(deps.get_current_user)],
    service: Annotated[DiaryService, Depends(deps.get_diary_service)],
):
    """Change how long before the event the reminder is sent."""

    try:
        return service.update_reminder(current_user.id, event_id, payload.reminder_minutes)
    except EntryNotFoundError as exc:
        raise handle_not_found_error(exc) from exc
    except ValidationError as exc:
        raise handle_validation_error(exc) from exc
