"""Custom exception classes and error handling utilities."""
from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from loguru import logger


class VoiceDiaryException(Exception):
    """Base exception for the application."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(VoiceDiaryException):
    """Data validation errors."""
    pass


class AIGatewayError(VoiceDiaryException):
    """AI gateway communication errors."""
    pass


class AIRateLimitError(AIGatewayError):
    """The gateway rejected the call with HTTP 429."""
    pass


class AICreditsExhaustedError(AIGatewayError):
    """The gateway rejected the call with HTTP 402."""
    pass


class EntryNotFoundError(VoiceDiaryException):
    """Diary entry or event lookup errors."""
    pass


class PremiumRequiredError(VoiceDiaryException):
    """A premium-only feature was requested on the free tier."""
    pass


def handle_validation_error(error: ValidationError) -> HTTPException:
    """Handle validation errors."""
    logger.warning(f"Validation error: {error.message}")
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={
            "message": error.message,
            "details": error.details
        }
    )


def handle_ai_gateway_error(error: AIGatewayError) -> HTTPException:
    """Map gateway failures to the status codes the client understands."""
    if isinstance(error, AIRateLimitError):
        logger.warning(f"AI gateway rate limited: {error.message}")
        return HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Rate limits exceeded, please try again later.",
        )
    if isinstance(error, AICreditsExhaustedError):
        logger.error(f"AI gateway credits exhausted: {error.message}")
        return HTTPException(
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            detail="Payment required, please add funds.",
        )
    logger.error(f"AI gateway error: {error.message}")
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="AI service is temporarily unavailable. Please try again later."
    )


def handle_not_found_error(error: EntryNotFoundError) -> HTTPException:
    """Handle missing diary resources."""
    logger.info(f"Not found: {error.message}")
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=error.message
    )


def handle_premium_required(error: PremiumRequiredError) -> HTTPException:
    """Handle premium gating failures."""
    logger.info(f"Premium required: {error.message}")
    return HTTPException(
        status_code=status.HTTP_402_PAYMENT_REQUIRED,
        detail=error.message
    )
