"""Pydantic schemas package."""

from app.schemas.achievement import (
    AchievementOverviewResponse,
    AchievementRead,
    AchievementStatusRead,
    AchievementUnlockResponse,
    UserStatsRead,
)
from app.schemas.assistant import AnswerResponse, QuestionRequest, TranscriptionResponse, TTSRequest
from app.schemas.auth import Token, TokenPayload
from app.schemas.notification import PushKeys, PushSubscriptionCreate, VapidPublicKeyRead
from app.schemas.entry import (
    DaySummaryRead,
    DiaryEventRead,
    EntryCreate,
    EntrySaveResponse,
    ReminderUpdate,
    VoiceEntryRead,
)
from app.schemas.user import PremiumStatusRead, UserBase, UserCreate, UserLogin, UserRead, UserUpdate

__all__ = [
    "AchievementOverviewResponse",
    "AchievementRead",
    "AchievementStatusRead",
    "AchievementUnlockResponse",
    "AnswerResponse",
    "DaySummaryRead",
    "DiaryEventRead",
    "EntryCreate",
    "EntrySaveResponse",
    "PremiumStatusRead",
    "PushKeys",
    "PushSubscriptionCreate",
    "QuestionRequest",
    "ReminderUpdate",
    "TTSRequest",
    "Token",
    "TokenPayload",
    "TranscriptionResponse",
    "UserBase",
    "UserCreate",
    "UserLogin",
    "UserRead",
    "UserStatsRead",
    "UserUpdate",
    "VapidPublicKeyRead",
    "VoiceEntryRead",
]
