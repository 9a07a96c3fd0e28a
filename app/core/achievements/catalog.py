"""Default achievement catalog seeded into new deployments."""
from __future__ import annotations

from dataclasses import dataclass

from .rules import AchievementType


@dataclass(frozen=True)
class AchievementDefinition:
    """Seed template for a catalog entry."""

    key: str
    name: str
    description: str
    icon: str
    achievement_type: AchievementType
    target_count: int


DEFAULT_CATALOG: tuple[AchievementDefinition, ...] = (
    AchievementDefinition(
        key="first_entry",
        name="Primera nota",
        description="Graba tu primera nota de voz",
        icon="🎙️",
        achievement_type=AchievementType.ENTRIES,
        target_count=1,
    ),
    AchievementDefinition(
        key="first_event",
        name="Organizado",
        description="Menciona tu primer evento en una nota",
        icon="📅",
        achievement_type=AchievementType.EVENTS,
        target_count=1,
    ),
    AchievementDefinition(
        key="first_question",
        name="Curioso",
        description="Haz tu primera pregunta al asistente",
        icon="💬",
        achievement_type=AchievementType.QUESTIONS,
        target_count=1,
    ),
    AchievementDefinition(
        key="streak_3",
        name="Buen ritmo",
        description="Graba notas 3 días seguidos",
        icon="🔥",
        achievement_type=AchievementType.STREAK,
        target_count=3,
    ),
    AchievementDefinition(
        key="streak_7",
        name="Una semana",
        description="Graba notas 7 días seguidos",
        icon="⭐",
        achievement_type=AchievementType.STREAK,
        target_count=7,
    ),
    AchievementDefinition(
        key="entries_10",
        name="Narrador",
        description="Graba 10 notas de voz",
        icon="📖",
        achievement_type=AchievementType.ENTRIES,
        target_count=10,
    ),
    AchievementDefinition(
        key="events_10",
        name="Agenda llena",
        description="Registra 10 eventos",
        icon="🗓️",
        achievement_type=AchievementType.EVENTS,
        target_count=10,
    ),
    AchievementDefinition(
        key="questions_10",
        name="Investigador",
        description="Haz 10 preguntas al asistente",
        icon="🔍",
        achievement_type=AchievementType.QUESTIONS,
        target_count=10,
    ),
    AchievementDefinition(
        key="streak_30",
        name="Constancia",
        description="Graba notas 30 días seguidos",
        icon="🏆",
        achievement_type=AchievementType.STREAK,
        target_count=30,
    ),
    AchievementDefinition(
        key="entries_50",
        name="Cronista",
        description="Graba 50 notas de voz",
        icon="📚",
        achievement_type=AchievementType.ENTRIES,
        target_count=50,
    ),
    AchievementDefinition(
        key="entries_100",
        name="Memorias",
        description="Graba 100 notas de voz",
        icon="👑",
        achievement_type=AchievementType.ENTRIES,
        target_count=100,
    ),
)

__all__ = ["AchievementDefinition", "DEFAULT_CATALOG"]
