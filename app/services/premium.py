"""Subscription tiers and premium feature gating."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import FrozenSet, Optional

from app.db.models.user import User
from app.utils.exceptions import PremiumRequiredError


class PremiumFeature(str, Enum):
    """Features reserved for premium subscribers."""

    TTS = "tts"
    VOICE_CUSTOM = "voice_custom"
    AI_ADVANCED = "ai_advanced"
    EXPORT = "export"
    NO_ADS = "no_ads"


FREE_FEATURES: FrozenSet[PremiumFeature] = frozenset()


@dataclass
class PremiumState:
    is_premium: bool
    plan: str
    expires_at: Optional[datetime]


def premium_state(user: User) -> PremiumState:
    is_premium = user.has_active_premium()
    return PremiumState(
        is_premium=is_premium,
        plan="premium" if is_premium else "free",
        expires_at=user.subscription_expires_at if is_premium else None,
    )


def has_feature(user: User, feature: PremiumFeature) -> bool:
    """Premium users get everything; free users only ``FREE_FEATURES``."""

    if user.has_active_premium():
        return True
    return feature in FREE_FEATURES


def require_feature(user: User, feature: PremiumFeature) -> None:
    if not has_feature(user, feature):
        raise PremiumRequiredError(
            f"The '{feature.value}' feature requires a premium subscription",
            {"feature": feature.value},
        )


__all__ = ["FREE_FEATURES", "PremiumFeature", "PremiumState", "has_feature", "premium_state", "require_feature"]
