"""Achievement API endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api import deps
from app.db.models.user import User
from app.schemas.achievement import (
    AchievementOverviewResponse,
    AchievementRead,
    AchievementStatusRead,
    AchievementUnlockResponse,
    UserStatsRead,
)
from app.services.achievement_service import AchievementService

router = APIRouter(prefix="/achievements", tags=["achievements"])


@router.get("", response_model=list[AchievementRead])
def list_achievements(
    *,
    service: AchievementService = Depends(deps.get_achievement_service),
    _: User = Depends(deps.get_current_user),
) -> list[AchievementRead]:
    """Return the catalog, smallest milestones first."""

    return [AchievementRead.from_rule(rule) for rule in service.fetch_catalog()]


@router.get("/my", response_model=AchievementOverviewResponse)
def get_my_achievements(
    *,
    service: AchievementService = Depends(deps.get_achievement_service),
    current_user: User = Depends(deps.get_current_user),
) -> AchievementOverviewResponse:
    """Return every achievement with the user's progress."""

    overview = service.overview(current_user.id)
    return AchievementOverviewResponse(
        achievements=[AchievementStatusRead.from_status(item) for item in overview.statuses],
        stats=UserStatsRead.from_snapshot(overview.stats),
        unlocked_count=overview.unlocked_count,
        total_count=overview.total_count,
        next_achievement=(
            AchievementStatusRead.from_status(overview.next_achievement)
            if overview.next_achievement
            else None
        ),
    )


@router.get("/stats", response_model=UserStatsRead)
def get_my_stats(
    *,
    service: AchievementService = Depends(deps.get_achievement_service),
    current_user: User = Depends(deps.get_current_user),
) -> UserStatsRead:
    """Return the counters achievements are measured against."""

    stats = service.fetch_stats(current_user.id)
    return UserStatsRead.from_snapshot(stats) if stats else UserStatsRead()


@router.post("/check", response_model=AchievementUnlockResponse)
def check_achievements(
    *,
    service: AchievementService = Depends(deps.get_achievement_service),
    current_user: User = Depends(deps.get_current_user),
) -> AchievementUnlockResponse:
    """Run an evaluation pass now."""

    result = service.check_and_unlock(current_user.id)
    return AchievementUnlockResponse(
        newly_unlocked=[AchievementRead.from_rule(rule) for rule in result.newly_unlocked],
        total_unlocked=len(service.fetch_unlocked_set(current_user.id)),
    )
