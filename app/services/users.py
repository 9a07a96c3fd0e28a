"""Service layer for user profile operations."""
from __future__ import annotations

import uuid
from datetime import datetime

from loguru import logger
from sqlalchemy.orm import Session

from app.db.models.user import User
from app.schemas.user import UserUpdate


class UserNotFoundError(ValueError):
    """Raised when a user lookup fails."""


class UserService:
    """Profile reads and writes for diary owners."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: uuid.UUID) -> User:
        """Return a user by identifier or raise ``UserNotFoundError``."""

        user = self.db.get(User, user_id)
        if not user:
            raise UserNotFoundError("User not found")
        return user

    def update_profile(self, user: User, payload: UserUpdate) -> User:
        """Apply the provided profile fields."""

        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(user, field, value)

        self.db.commit()
        self.db.refresh(user)
        return user

    def set_subscription(self, user_id: uuid.UUID, tier: str, expires_at: datetime | None = None) -> User:
        """Switch a user between ``free`` and ``premium``."""

        if tier not in ("free", "premium"):
            raise ValueError(f"Unknown subscription tier: {tier}")
        user = self.get(user_id)
        user.activate_subscription(tier, expires_at)
        self.db.commit()
        logger.info("Subscription updated", user_id=str(user_id), tier=tier)
        return user
