"""User database model."""
from datetime import datetime, timezone
import uuid

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from app.db.base import Base


class User(Base):
    """Represents a diary owner."""

    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    display_name = Column(String(255))

    # Settings
    notifications_enabled = Column(Boolean, default=True)

    # Subscription
    subscription_tier = Column(String(20), default="free")
    subscription_expires_at = Column(DateTime(timezone=True))

    # Metadata
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    is_active = Column(Boolean, default=True)

    def activate_subscription(self, tier: str, expires_at: datetime | None) -> None:
        """Activate or update the user subscription."""

        self.subscription_tier = tier
        self.subscription_expires_at = expires_at

    def has_active_premium(self, now: datetime | None = None) -> bool:
        """Return whether the user is on an unexpired premium plan."""

        if self.subscription_tier != "premium":
            return False
        if self.subscription_expires_at is None:
            return True
        now = now or datetime.now(timezone.utc)
        expires_at = self.subscription_expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return expires_at > now
