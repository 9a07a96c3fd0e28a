"""Schemas for Web Push subscriptions."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class PushKeys(BaseModel):
    p256dh: str
    auth: str


class PushSubscriptionCreate(BaseModel):
    """Subscription object produced by ``PushManager.subscribe()`` in the browser."""

    endpoint: str = Field(..., min_length=1)
    keys: PushKeys
    expirationTime: Optional[float] = None


class VapidPublicKeyRead(BaseModel):
    publicKey: Optional[str] = None
