"""FastAPI application factory."""
from __future__ import annotations

from typing import List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from app.api.v1.api import api_router
from app.config import settings
from app.utils.exceptions import VoiceDiaryException


tags_metadata: List[dict[str, str]] = [
    {"name": "auth", "description": "Register users and issue authentication tokens."},
    {"name": "users", "description": "Profile, notification preference and subscription status."},
    {"name": "audio", "description": "Transcribe recordings and read text aloud."},
    {"name": "entries", "description": "Voice diary entries and daily summaries."},
    {"name": "events", "description": "Events extracted from entries and their reminders."},
    {"name": "assistant", "description": "Ask questions about your diary."},
    {"name": "achievements", "description": "Milestones, progress and streak stats."},
    {"name": "notifications", "description": "Web Push subscriptions."},
]


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Voice journaling with AI transcription, event reminders and achievements.",
        version="0.1.0",
        openapi_tags=tags_metadata,
        docs_url=f"{settings.API_V1_STR}/docs",
        redoc_url=f"{settings.API_V1_STR}/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": exc.errors(), "message": "Validation failed"},
        )

    @app.exception_handler(VoiceDiaryException)
    async def diary_exception_handler(
        request: Request, exc: VoiceDiaryException
    ) -> JSONResponse:
        logger.error("Unhandled application error", path=request.url.path, error=exc.message)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": exc.message},
        )

    app.include_router(api_router, prefix=settings.API_V1_STR)
    return app


app = create_app()
