"""API endpoint modules for v1."""

from app.api.v1.endpoints import (
    achievements,
    assistant,
    audio,
    auth,
    entries,
    events,
    notifications,
    users,
)

__all__ = [
    "achievements",
    "assistant",
    "audio",
    "auth",
    "entries",
    "events",
    "notifications",
    "users",
]
