"""Shared API dependencies."""
from __future__ import annotations

import uuid
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.config import settings
from app.core.security import ACCESS, InvalidTokenError, decode_token
from app.db.models.user import User
from app.db.session import get_db
from app.schemas import TokenPayload
from app.services.achievement_service import AchievementService
from app.services.diary_assistant import DiaryAssistantService
from app.services.diary_service import DiaryService
from app.services.llm_service import LLMService

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login")

_llm_service_singleton: LLMService | None = None


def get_current_user(
    token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)
) -> User:
    """Resolve the authenticated user from the Authorization header."""

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not token:
        raise credentials_exception

    try:
        token_data = TokenPayload.model_validate(decode_token(token, expected_type=ACCESS))
    except (InvalidTokenError, ValidationError, ValueError, KeyError) as exc:
        raise credentials_exception from exc

    user = db.get(User, uuid.UUID(str(token_data.sub)))
    if not user or not user.is_active:
        raise credentials_exception
    return user


def get_optional_llm_service() -> Optional[LLMService]:
    """Return the cached gateway client, or ``None`` when no key is configured."""

    global _llm_service_singleton
    if _llm_service_singleton is None:
        try:
            _llm_service_singleton = LLMService()
        except ValueError:
            return None
    return _llm_service_singleton


def get_llm_service(
    llm_service: Optional[LLMService] = Depends(get_optional_llm_service),
) -> LLMService:
    """Return the gateway client or fail with 503."""

    if llm_service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="AI gateway is not configured",
        )
    return llm_service


def get_achievement_service(db: Session = Depends(get_db)) -> AchievementService:
    return AchievementService(db)


def get_diary_service(
    db: Session = Depends(get_db),
    llm_service: Optional[LLMService] = Depends(get_optional_llm_service),
) -> DiaryService:
    """Diary service; entries still save when the gateway is unavailable."""

    return DiaryService(db, llm_service)


def get_assistant_service(
    db: Session = Depends(get_db),
    llm_service: LLMService = Depends(get_llm_service),
) -> DiaryAssistantService:
    return DiaryAssistantService(db, llm_service)
