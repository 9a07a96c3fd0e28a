"""API router for version 1."""
from fastapi import APIRouter

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


api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(audio.router)
api_router.include_router(entries.router)
api_router.include_router(events.router)
api_router.include_router(assistant.router)
api_router.include_router(achievements.router)
api_router.include_router(notifications.router)
