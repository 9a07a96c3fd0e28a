"""Pure achievement evaluation over an aggregate stats snapshot.

Nothing in this module touches the database. Callers gather the catalog,
the unlocked set and the stats snapshot, and persist whatever
:func:`evaluate` reports as eligible.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, Hashable, Iterable, List, Mapping, Optional, Sequence


class AchievementType(str, Enum):
    """Stat families an achievement can track."""

    ENTRIES = "entries"
    STREAK = "streak"
    EVENTS = "events"
    QUESTIONS = "questions"


@dataclass(frozen=True)
class StatsSnapshot:
    """Read-only view of a user's aggregate counters."""

    total_entries: int = 0
    total_events: int = 0
    total_questions: int = 0
    current_streak: int = 0
    longest_streak: int = 0


EMPTY_STATS = StatsSnapshot()


@dataclass(frozen=True)
class AchievementRule:
    """Catalog entry as seen by the engine."""

    id: Hashable
    achievement_type: str
    target_count: int
    name: str = ""
    icon: str = ""
    description: str = ""
    key: str = ""


@dataclass(frozen=True)
class AchievementStatus:
    """Display state of one catalog entry for one user."""

    achievement: AchievementRule
    unlocked: bool
    progress: float
    current_value: int
    unlocked_at: Optional[datetime] = None


@dataclass
class EvaluationContext:
    """The three inputs of an evaluation pass."""

    stats: Optional[StatsSnapshot]
    catalog: Sequence[AchievementRule]
    unlocked: frozenset = field(default_factory=frozenset)
    unlocked_at: Mapping[Hashable, datetime] = field(default_factory=dict)


StatAccessor = Callable[[StatsSnapshot], int]

STAT_ACCESSORS: Dict[str, StatAccessor] = {
    AchievementType.ENTRIES.value: lambda stats: stats.total_entries,
    AchievementType.STREAK.value: lambda stats: stats.current_streak,
    AchievementType.EVENTS.value: lambda stats: stats.total_events,
    AchievementType.QUESTIONS.value: lambda stats: stats.total_questions,
}


def _type_tag(achievement_type: object) -> str:
    if isinstance(achievement_type, AchievementType):
        return achievement_type.value
    return str(achievement_type)


def stat_value(achievement: AchievementRule, stats: Optional[StatsSnapshot]) -> Optional[int]:
    """Return the counter an achievement tracks, or ``None`` for unknown types."""

    accessor = STAT_ACCESSORS.get(_type_tag(achievement.achievement_type))
    if accessor is None:
        return None
    value = accessor(stats or EMPTY_STATS)
    return max(int(value or 0), 0)


def progress_of(achievement: AchievementRule, stats: Optional[StatsSnapshot]) -> float:
    """Return the progress fraction in ``[0, 1]``."""

    value = stat_value(achievement, stats)
    if value is None:
        return 0.0
    if achievement.target_count <= 0:
        return 1.0
    return min(value / achievement.target_count, 1.0)


def is_eligible(achievement: AchievementRule, stats: Optional[StatsSnapshot]) -> bool:
    """Return whether the tracked counter has reached the target."""

    value = stat_value(achievement, stats)
    if value is None:
        return False
    return value >= achievement.target_count


def is_unlocked(achievement_id: Hashable, unlocked: Iterable[Hashable]) -> bool:
    """Set membership; never recomputes from stats."""

    return achievement_id in unlocked


def evaluate(
    stats: Optional[StatsSnapshot],
    catalog: Sequence[AchievementRule],
    unlocked: Iterable[Hashable],
) -> List[AchievementRule]:
    """Return locked achievements whose target is met, in catalog order."""

    unlocked_ids = frozenset(unlocked)
    return [
        achievement
        for achievement in catalog
        if achievement.id not in unlocked_ids and is_eligible(achievement, stats)
    ]


def evaluate_context(context: EvaluationContext) -> List[AchievementRule]:
    """Evaluate the inputs held by ``context``."""

    return evaluate(context.stats, context.catalog, context.unlocked)


def statuses(context: EvaluationContext) -> List[AchievementStatus]:
    """Return one status per catalog entry.

    Unlocked achievements always report full progress: streaks can shrink
    after the fact but unlocks are never revoked.
    """

    result: List[AchievementStatus] = []
    for achievement in context.catalog:
        unlocked = achievement.id in context.unlocked
        result.append(
            AchievementStatus(
                achievement=achievement,
                unlocked=unlocked,
                progress=1.0 if unlocked else progress_of(achievement, context.stats),
                current_value=stat_value(achievement, context.stats) or 0,
                unlocked_at=context.unlocked_at.get(achievement.id) if unlocked else None,
            )
        )
    return result


def diff_unlocked(
    catalog: Sequence[AchievementRule],
    previous: Iterable[Hashable],
    current: Iterable[Hashable],
) -> List[AchievementRule]:
    """Return catalog entries present in ``current`` but not ``previous``."""

    before = frozenset(previous)
    after = frozenset(current)
    return [a for a in catalog if a.id in after and a.id not in before]


__all__ = [
    "AchievementRule",
    "AchievementStatus",
    "AchievementType",
    "EMPTY_STATS",
    "EvaluationContext",
    "STAT_ACCESSORS",
    "StatsSnapshot",
    "diff_unlocked",
    "evaluate",
    "evaluate_context",
    "is_eligible",
    "is_unlocked",
    "progress_of",
    "stat_value",
    "statuses",
]
