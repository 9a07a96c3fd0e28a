"""Voice entry and extracted event models."""
import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.base import Base


class VoiceEntry(Base):
    """A transcribed voice note."""

    __tablename__ = "voice_entries"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    audio_url = Column(Text)
    transcript = Column(Text)
    summary = Column(Text)
    duration = Column(Integer, nullable=False, default=0)  # seconds

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    events = relationship("DiaryEvent", back_populates="entry")


class DiaryEvent(Base):
    """A dated event mentioned in a voice entry."""

    __tablename__ = "diary_events"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    entry_id = Column(
        UUID(as_uuid=True), ForeignKey("voice_entries.id", ondelete="SET NULL"), index=True
    )
    title = Column(String(255), nullable=False)
    description = Column(Text)
    event_date = Column(DateTime(timezone=True), nullable=False, index=True)
    reminded = Column(Boolean, nullable=False, default=False)
    reminder_minutes = Column(Integer, nullable=False, default=60)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    entry = relationship("VoiceEntry", back_populates="events")
