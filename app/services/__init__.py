"""Service layer package."""

from app.services.achievement_service import AchievementService
from app.services.auth import AuthService
from app.services.diary_service import DiaryService
from app.services.llm_service import LLMService
from app.services.stats_service import StatsService
from app.services.users import UserService

__all__ = [
    "AchievementService",
    "AuthService",
    "DiaryService",
    "LLMService",
    "StatsService",
    "UserService",
]
