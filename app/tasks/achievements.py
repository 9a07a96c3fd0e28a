"""Celery tasks for achievement processing."""
from __future__ import annotations

from uuid import UUID

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from app.celery_app import celery_app
from app.db.models.user import User
from app.db.session import SessionLocal
from app.services.achievement_service import AchievementService


@celery_app.task(name="app.tasks.achievements.check_user_achievements")
def check_user_achievements(user_id: str) -> dict[str, int | list[str] | str]:
    """Run one evaluation pass for a single user."""

    try:
        user_uuid = UUID(user_id)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid user ID: {user_id}") from exc

    db = SessionLocal()
    try:
        user = db.get(User, user_uuid)
        if not user:
            raise ValueError(f"User {user_id} not found")

        result = AchievementService(db).check_and_unlock(user.id)

        logger.info(
            "User achievement check completed",
            user_id=user_id,
            unlocked_count=len(result.newly_unlocked),
            skipped=result.skipped,
        )
        return {
            "user_id": user_id,
            "newly_unlocked": len(result.newly_unlocked),
            "achievement_keys": [a.key for a in result.newly_unlocked],
        }
    finally:
        db.close()


@celery_app.task(name="app.tasks.achievements.check_all_achievements")
def check_all_achievements() -> dict[str, int]:
    """Catch up unlocks for every active user (periodic task)."""

    db = SessionLocal()
    try:
        user_ids = db.scalars(select(User.id).where(User.is_active.is_(True))).all()

        total_checked = 0
        total_unlocked = 0
        service = AchievementService(db)

        for user_id in user_ids:
            try:
                result = service.check_and_unlock(user_id)
            except SQLAlchemyError as exc:
                db.rollback()
                logger.error(
                    "Achievement check failed for user",
                    user_id=str(user_id),
                    error=str(exc),
                )
                continue
            total_checked += 1
            total_unlocked += len(result.newly_unlocked)

            if total_checked % 100 == 0:
                logger.info(
                    "Achievement check progress",
                    checked=total_checked,
                    total=len(user_ids),
                )

        logger.info(
            "Bulk achievement check completed",
            users_checked=total_checked,
            total_unlocked=total_unlocked,
        )
        return {
            "users_checked": total_checked,
            "total_unlocked": total_unlocked,
        }
    finally:
        db.close()
