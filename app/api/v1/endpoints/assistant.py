"""Diary assistant endpoint."""
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api import deps
from app.db.models.user import User
from app.schemas import AchievementRead, AnswerResponse, QuestionRequest
from app.services.diary_assistant import DiaryAssistantService
from app.utils.exceptions import AIGatewayError, handle_ai_gateway_error

router = APIRouter(prefix="/assistant", tags=["assistant"])


@router.post("/ask", response_model=AnswerResponse)
def ask_diary(
    payload: QuestionRequest,
    current_user: Annotated[User, Depends(deps.get_current_user)],
    service: Annotated[DiaryAssistantService, Depends(deps.get_assistant_service)],
) -> AnswerResponse:
    """Answer a question using the user's entries and events."""

    try:
        result = service.ask(current_user.id, payload.question)
    except AIGatewayError as exc:
        raise handle_ai_gateway_error(exc) from exc
    return AnswerResponse(
        answer=result.answer,
        newly_unlocked=[AchievementRead.from_rule(rule) for rule in result.newly_unlocked],
    )
