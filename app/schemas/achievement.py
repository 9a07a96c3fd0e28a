"""Pydantic schemas for achievement endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.core.achievements import AchievementRule, AchievementStatus, StatsSnapshot


class AchievementRead(BaseModel):
    """Achievement definition schema."""

    id: int
    achievement_key: str
    name: str
    description: str
    icon: str
    achievement_type: str
    target_count: int

    @classmethod
    def from_rule(cls, rule: AchievementRule) -> "AchievementRead":
        return cls(
            id=rule.id,
            achievement_key=rule.key,
            name=rule.name,
            description=rule.description,
            icon=rule.icon,
            achievement_type=rule.achievement_type,
            target_count=rule.target_count,
        )


class AchievementStatusRead(AchievementRead):
    """Achievement with the user's unlock state and progress."""

    unlocked: bool
    progress: float = Field(..., ge=0.0, le=1.0)
    current_value: int
    unlocked_at: Optional[datetime] = None

    @classmethod
    def from_status(cls, status: AchievementStatus) -> "AchievementStatusRead":
        base = AchievementRead.from_rule(status.achievement).model_dump()
        return cls(
            **base,
            unlocked=status.unlocked,
            progress=status.progress,
            current_value=status.current_value,
            unlocked_at=status.unlocked_at,
        )


class UserStatsRead(BaseModel):
    total_entries: int = 0
    total_events: int = 0
    total_questions: int = 0
    current_streak: int = 0
    longest_streak: int = 0

    @classmethod
    def from_snapshot(cls, snapshot: StatsSnapshot) -> "UserStatsRead":
        return cls(
            total_entries=snapshot.total_entries,
            total_events=snapshot.total_events,
            total_questions=snapshot.total_questions,
            current_streak=snapshot.current_streak,
            longest_streak=snapshot.longest_streak,
        )


class AchievementOverviewResponse(BaseModel):
    achievements: list[AchievementStatusRead]
    stats: UserStatsRead
    unlocked_count: int
    total_count: int
    next_achievement: Optional[AchievementStatusRead] = None


class AchievementUnlockResponse(BaseModel):
    """Response after checking for achievement unlocks."""

    newly_unlocked: list[AchievementRead] = Field(default_factory=list)
    total_unlocked: int


__all__ = [
    "AchievementOverviewResponse",
    "AchievementRead",
    "AchievementStatusRead",
    "AchievementUnlockResponse",
    "UserStatsRead",
]
