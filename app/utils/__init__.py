"""Utility helpers package."""

from app.utils.exceptions import (
    AIGatewayError,
    EntryNotFoundError,
    PremiumRequiredError,
    ValidationError,
    VoiceDiaryException,
)

__all__ = [
    "AIGatewayError",
    "EntryNotFoundError",
    "PremiumRequiredError",
    "ValidationError",
    "VoiceDiaryException",
]
