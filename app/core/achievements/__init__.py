"""Achievement rules engine and default catalog."""

from .catalog import DEFAULT_CATALOG, AchievementDefinition
from .rules import (
    EMPTY_STATS,
    STAT_ACCESSORS,
    AchievementRule,
    AchievementStatus,
    AchievementType,
    EvaluationContext,
    StatsSnapshot,
    diff_unlocked,
    evaluate,
    evaluate_context,
    is_eligible,
    is_unlocked,
    progress_of,
    stat_value,
    statuses,
)

__all__ = [
    "AchievementDefinition",
    "AchievementRule",
    "AchievementStatus",
    "AchievementType",
    "DEFAULT_CATALOG",
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
