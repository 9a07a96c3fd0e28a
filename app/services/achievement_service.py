"""Achievement service: gather inputs, evaluate, persist unlocks, notify."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.achievements import (
    EMPTY_STATS,
    AchievementDefinition,
    AchievementRule,
    AchievementStatus,
    EvaluationContext,
    StatsSnapshot,
    diff_unlocked,
    evaluate_context,
    statuses,
)
from app.db.models.achievement import Achievement, UserAchievement
from app.services.notification_service import NotificationService
from app.services.stats_service import StatsService, to_snapshot

NotifyCallback = Callable[[str, str], None]


class UnlockResult(str, Enum):
    """Outcome of a single unlock insert."""

    SUCCESS = "success"
    ALREADY_EXISTS = "already_exists"
    FAILURE = "failure"


@dataclass
class AchievementCheckResult:
    """What one evaluation pass changed."""

    newly_unlocked: List[AchievementRule] = field(default_factory=list)
    failed: List[AchievementRule] = field(default_factory=list)
    skipped: bool = False


@dataclass
class AchievementOverview:
    """Catalog state for one user, ready for display."""

    statuses: List[AchievementStatus]
    stats: StatsSnapshot
    unlocked_count: int
    total_count: int
    next_achievement: Optional[AchievementStatus]


def to_rule(achievement: Achievement) -> AchievementRule:
    """Detach a catalog row into an engine rule."""

    return AchievementRule(
        id=achievement.id,
        achievement_type=achievement.achievement_type,
        target_count=achievement.target_count,
        name=achievement.name,
        icon=achievement.icon,
        description=achievement.description or "",
        key=achievement.achievement_key,
    )


class AchievementService:
    """Manage achievement unlocks and progress for diary users."""

    def __init__(self, db: Session, *, notify: Optional[NotifyCallback] = None) -> None:
        self.db = db
        self._notify = notify

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------
    def fetch_catalog(self) -> List[AchievementRule]:
        """Return the catalog ordered by ascending target."""

        rows = self.db.scalars(
            select(Achievement).order_by(Achievement.target_count.asc(), Achievement.id.asc())
        ).all()
        return [to_rule(row) for row in rows]

    def fetch_unlocks(self, user_id: uuid.UUID) -> Dict[int, Optional[datetime]]:
        """Return unlocked achievement ids mapped to their unlock time."""

        rows = self.db.execute(
            select(UserAchievement.achievement_id, UserAchievement.unlocked_at).where(
                UserAchievement.user_id == user_id
            )
        ).all()
        return {achievement_id: unlocked_at for achievement_id, unlocked_at in rows}

    def fetch_unlocked_set(self, user_id: uuid.UUID) -> frozenset:
        return frozenset(self.fetch_unlocks(user_id))

    def fetch_stats(self, user_id: uuid.UUID) -> Optional[StatsSnapshot]:
        """Return the stats snapshot, or ``None`` when no row exists yet."""

        row = StatsService(self.db).get_stats(user_id)
        if row is None:
            return None
        return to_snapshot(row)

    def build_context(self, user_id: uuid.UUID) -> EvaluationContext:
        """Fetch all three inputs before anything is evaluated."""

        catalog = self.fetch_catalog()
        unlocks = self.fetch_unlocks(user_id)
        stats = self.fetch_stats(user_id)
        return EvaluationContext(
            stats=stats,
            catalog=catalog,
            unlocked=frozenset(unlocks),
            unlocked_at={k: v for k, v in unlocks.items() if v is not None},
        )

    # ------------------------------------------------------------------
    # Unlocking
    # ------------------------------------------------------------------
    def persist_unlock(self, user_id: uuid.UUID, achievement_id: int) -> UnlockResult:
        """Insert an unlock record; duplicates are reported, not raised."""

        self.db.add(
            UserAchievement(
                user_id=user_id,
                achievement_id=achievement_id,
                unlocked_at=datetime.now(timezone.utc),
            )
        )
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.debug(
                "Achievement already unlocked",
                user_id=str(user_id),
                achievement_id=achievement_id,
            )
            return UnlockResult.ALREADY_EXISTS
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(
                "Failed to persist achievement unlock",
                user_id=str(user_id),
                achievement_id=achievement_id,
            )
            return UnlockResult.FAILURE
        return UnlockResult.SUCCESS

    def check_and_unlock(self, user_id: uuid.UUID) -> AchievementCheckResult:
        """Run one evaluate → persist → diff → notify pass.

        Fetch failures skip the pass; failed inserts are left for the next
        pass since their condition still holds.
        """
        try:
            context = self.build_context(user_id)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Achievement inputs unavailable, skipping", user_id=str(user_id))
            return AchievementCheckResult(skipped=True)

        eligible = evaluate_context(context)
        result = AchievementCheckResult()
        if not eligible:
            return result

        recorded: set = set()
        for achievement in eligible:
            outcome = self.persist_unlock(user_id, achievement.id)
            if outcome is UnlockResult.SUCCESS:
                recorded.add(achievement.id)
            elif outcome is UnlockResult.FAILURE:
                result.failed.append(achievement)

        try:
            current = self.fetch_unlocked_set(user_id)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Could not re-read unlocks", user_id=str(user_id))
            current = context.unlocked | recorded

        result.newly_unlocked = [
            achievement
            for achievement in diff_unlocked(context.catalog, context.unlocked, current)
            if achievement.id in recorded
        ]
        self._announce(user_id, result.newly_unlocked)

        if result.newly_unlocked or result.failed:
            logger.info(
                "Achievement check completed",
                user_id=str(user_id),
                unlocked=[a.key for a in result.newly_unlocked],
                failed=[a.key for a in result.failed],
            )
        return result

    def _announce(self, user_id: uuid.UUID, achievements: Iterable[AchievementRule]) -> None:
        callback = self._notify or self._push_callback(user_id)
        for achievement in achievements:
            try:
                callback(achievement.icon, achievement.name)
            except Exception:  # pragma: no cover
                logger.exception(
                    "Achievement notification failed",
                    user_id=str(user_id),
                    achievement=achievement.key,
                )

    def _push_callback(self, user_id: uuid.UUID) -> NotifyCallback:
        notifier = NotificationService(self.db)

        def push(icon: str, name: str) -> None:
            notifier.notify_achievement(user_id, icon, name)

        return push

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def overview(self, user_id: uuid.UUID) -> AchievementOverview:
        """Return every achievement with status and progress."""

        context = self.build_context(user_id)
        items = statuses(context)
        unlocked_count = sum(1 for item in items if item.unlocked)
        next_achievement = next((item for item in items if not item.unlocked), None)
        return AchievementOverview(
            statuses=items,
            stats=context.stats or EMPTY_STATS,
            unlocked_count=unlocked_count,
            total_count=len(items),
            next_achievement=next_achievement,
        )

    # ------------------------------------------------------------------
    # Catalog administration
    # ------------------------------------------------------------------
    def seed_catalog(self, definitions: Iterable[AchievementDefinition]) -> int:
        """Upsert catalog rows by key; return how many were created."""

        created = 0
        for defn in definitions:
            existing = self.db.scalar(
                select(Achievement).where(Achievement.achievement_key == defn.key)
            )
            if existing:
                existing.name = defn.name
                existing.description = defn.description
                existing.icon = defn.icon
                existing.achievement_type = defn.achievement_type.value
                existing.target_count = defn.target_count
            else:
                self.db.add(
                    Achievement(
                        achievement_key=defn.key,
                        name=defn.name,
                        description=defn.description,
                        icon=defn.icon,
                        achievement_type=defn.achievement_type.value,
                        target_count=defn.target_count,
                    )
                )
                created += 1
        self.db.commit()
        return created


__all__ = [
    "AchievementCheckResult",
    "AchievementOverview",
    "AchievementService",
    "UnlockResult",
    "to_rule",
]
