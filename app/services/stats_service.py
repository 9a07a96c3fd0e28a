"""Aggregate diary statistics and streak tracking."""
from __future__ import annotations

import uuid
from datetime import date, datetime, timedelta, timezone

from loguru import logger
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.core.achievements import EMPTY_STATS, StatsSnapshot
from app.db.models.achievement import UserStats


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


class StatsService:
    """Own every write to ``user_stats``."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_stats(self, user_id: uuid.UUID) -> UserStats | None:
        """Return the stats row, or ``None`` when the user has none yet."""

        return self.db.scalar(select(UserStats).where(UserStats.user_id == user_id))

    def snapshot(self, user_id: uuid.UUID, *, today: date | None = None) -> StatsSnapshot:
        """Return an engine snapshot, all zeros when no row exists."""

        return to_snapshot(self.get_stats(user_id), today=today)

    def _get_or_create(self, user_id: uuid.UUID) -> UserStats:
        stats = self.get_stats(user_id)
        if stats is None:
            stats = UserStats(
                user_id=user_id,
                total_entries=0,
                total_events=0,
                total_questions=0,
                current_streak=0,
                longest_streak=0,
            )
            self.db.add(stats)
            self.db.flush()
        return stats

    def record_entry(self, user_id: uuid.UUID, *, on: date | None = None) -> UserStats:
        """
        Count a new entry and extend the day streak.

        Same day leaves the streak alone, the next day extends it, and any
        gap (or a first entry) starts over at one.
        """
        today = on or utc_today()
        stats = self._get_or_create(user_id)
        stats.total_entries = (stats.total_entries or 0) + 1

        last = stats.last_entry_date
        if last == today:
            new_streak = stats.current_streak or 1
        elif last is not None and (today - last).days == 1:
            new_streak = (stats.current_streak or 0) + 1
        elif last is not None and last > today:
            # Back-dated entry; keep what we have.
            new_streak = stats.current_streak or 1
            today = last
        else:
            new_streak = 1

        stats.current_streak = new_streak
        stats.last_entry_date = today
        if new_streak > (stats.longest_streak or 0):
            stats.longest_streak = new_streak

        self.db.commit()
        logger.debug(
            "Entry recorded in stats",
            user_id=str(user_id),
            total_entries=stats.total_entries,
            current_streak=stats.current_streak,
        )
        return stats

    def record_events(self, user_id: uuid.UUID, count: int) -> UserStats:
        """Add ``count`` extracted events to the event counter."""

        stats = self._get_or_create(user_id)
        if count > 0:
            stats.total_events = (stats.total_events or 0) + count
        self.db.commit()
        return stats

    def record_question(self, user_id: uuid.UUID) -> UserStats:
        """Increment the question counter by exactly one."""

        stats = self._get_or_create(user_id)
        self.db.execute(
            update(UserStats)
            .where(UserStats.user_id == user_id)
            .values(total_questions=UserStats.total_questions + 1)
        )
        self.db.commit()
        self.db.refresh(stats)
        return stats


def to_snapshot(stats: UserStats | None, *, today: date | None = None) -> StatsSnapshot:
    """Convert a stats row into an engine snapshot.

    A streak whose last entry is older than yesterday is reported as zero.
    """
    if stats is None:
        return EMPTY_STATS

    today = today or utc_today()
    current_streak = stats.current_streak or 0
    last = stats.last_entry_date
    if last is None or last < today - timedelta(days=1):
        current_streak = 0

    return StatsSnapshot(
        total_entries=stats.total_entries or 0,
        total_events=stats.total_events or 0,
        total_questions=stats.total_questions or 0,
        current_streak=current_streak,
        longest_streak=stats.longest_streak or 0,
    )


__all__ = ["StatsService", "to_snapshot", "utc_today"]
