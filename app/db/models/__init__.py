"""Database models package."""
from app.db.models.user import User
from app.db.models.entry import DiaryEvent, VoiceEntry
from app.db.models.achievement import Achievement, UserAchievement, UserStats
from app.db.models.push_subscription import PushSubscription

__all__ = [
    "User",
    "VoiceEntry",
    "DiaryEvent",
    "Achievement",
    "UserAchievement",
    "UserStats",
    "PushSubscription",
]
