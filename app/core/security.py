"""Password hashing and JWT helpers for diary accounts."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
from jose import JWTError, jwt

from app.config import settings

ALGORITHM = "HS256"
ACCESS = "access"
REFRESH = "refresh"


class InvalidTokenError(Exception):
    """Raised when a JWT cannot be decoded or is of the wrong kind."""


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def _encode(subject: Any, lifetime: timedelta, token_type: str) -> str:
    issued_at = datetime.now(timezone.utc)
    claims: Dict[str, Any] = {
        "sub": str(subject),
        "type": token_type,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=ALGORITHM)


def create_access_token(subject: Any, expires_minutes: Optional[int] = None) -> str:
    minutes = expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    return _encode(subject, timedelta(minutes=minutes), ACCESS)


def create_refresh_token(subject: Any, expires_days: Optional[int] = None) -> str:
    days = expires_days or settings.REFRESH_TOKEN_EXPIRE_DAYS
    return _encode(subject, timedelta(days=days), REFRESH)


def decode_token(token: str, *, expected_type: Optional[str] = None) -> Dict[str, Any]:
    """Return the claims of ``token``.

    Raises:
        InvalidTokenError: bad signature, expired, or not ``expected_type``.
    """
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise InvalidTokenError(str(exc)) from exc
    if expected_type is not None and claims.get("type") != expected_type:
        raise InvalidTokenError(f"Token must be an {expected_type} token")
    return claims
