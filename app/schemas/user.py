"""Pydantic models for user API interactions."""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator


class UserBase(BaseModel):
    """Shared properties of user representations."""

    email: EmailStr
    display_name: Optional[str] = Field(default=None, max_length=255)
    notifications_enabled: bool = True


class UserCreate(UserBase):
    """Schema for user registration input."""

    password: str = Field(min_length=8, max_length=128)


class UserLogin(BaseModel):
    """Schema for user login request."""

    email: EmailStr
    password: str


class UserRead(UserBase):
    """Profile returned to the owner."""

    id: uuid.UUID
    is_active: bool
    subscription_tier: str
    subscription_expires_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)


class UserUpdate(BaseModel):
    """Partial profile update."""

    display_name: Optional[str] = Field(default=None, max_length=255)
    notifications_enabled: Optional[bool] = None

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def ensure_payload_not_empty(self) -> "UserUpdate":
        if not any(value is not None for value in self.model_dump().values()):
            raise ValueError("At least one field must be provided")
        return self


class PremiumStatusRead(BaseModel):
    """Subscription state and the premium features it grants."""

    is_premium: bool
    plan: str
    expires_at: Optional[datetime] = None
    features: list[str]
