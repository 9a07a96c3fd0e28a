"""Celery tasks package."""

from app.tasks import achievements, notifications

__all__ = ["achievements", "notifications"]
