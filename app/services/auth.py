"""Authentication service layer."""
from __future__ import annotations

import uuid

from fastapi import HTTPException, status
from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.security import (
    REFRESH,
    InvalidTokenError,
    create_access_token,
    decode_token,
    create_refresh_token,
    get_password_hash,
    verify_password,
)
from app.db.models.user import User
from app.schemas import Token, UserCreate


class EmailAlreadyExistsError(ValueError):
    """Raised when attempting to register with an email that already exists."""


class InvalidCredentialsError(ValueError):
    """Raised when authentication credentials are invalid."""


class AuthService:
    """Registers diary owners and issues their tokens."""

    def __init__(self, db: Session):
        self.db = db

    def register_user(self, payload: UserCreate) -> User:
        """Create a new user in the database."""

        email = payload.email.lower()
        if self.db.scalar(select(User).where(User.email == email)):
            raise EmailAlreadyExistsError("A user with this email already exists.")

        user = User(
            email=email,
            hashed_password=get_password_hash(payload.password),
            display_name=payload.display_name or email.split("@")[0],
            notifications_enabled=payload.notifications_enabled,
            subscription_tier="free",
            is_active=True,
        )

        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise EmailAlreadyExistsError("A user with this email already exists.") from exc
        self.db.refresh(user)
        logger.info("User registered", user_id=str(user.id))
        return user

    def authenticate_user(self, email: str, password: str) -> User:
        """Validate credentials and return the associated user."""

        user = self.db.scalar(select(User).where(User.email == email.lower()))
        if not user or not user.is_active or not verify_password(password, user.hashed_password):
            raise InvalidCredentialsError("Incorrect email or password")
        return user

    def refresh(self, refresh_token: str) -> Token:
        """Issue a new token pair for the owner of a valid refresh token."""

        try:
            claims = decode_token(refresh_token, expected_type=REFRESH)
            user = self.db.get(User, uuid.UUID(str(claims.get("sub"))))
        except (InvalidTokenError, ValueError) as exc:
            raise InvalidCredentialsError("Invalid refresh token") from exc
        if user is None or not user.is_active:
            raise InvalidCredentialsError("Invalid refresh token")
        return self.create_tokens(user)

    def create_tokens(self, user: User) -> Token:
        """Generate access and refresh tokens for a user."""

        user_id = uuid.UUID(str(user.id))
        return Token(
            access_token=create_access_token(str(user_id)),
            refresh_token=create_refresh_token(str(user_id)),
        )


def handle_email_exists(error: EmailAlreadyExistsError) -> None:
    """Raise an HTTP 400 error for duplicate email attempts."""

    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=str(error),
    ) from error


def handle_invalid_credentials(error: InvalidCredentialsError) -> None:
    """Raise an HTTP 401 error for invalid login attempts."""

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=str(error),
        headers={"WWW-Authenticate": "Bearer"},
    ) from error
