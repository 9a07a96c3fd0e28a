"""User profile endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api import deps
from app.db.models.user import User
from app.schemas import PremiumStatusRead, UserRead, UserUpdate
from app.services.premium import PremiumFeature, has_feature, premium_state
from app.services.users import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserRead)
def read_current_user(current_user: User = Depends(deps.get_current_user)) -> User:
    """Return the authenticated user profile."""

    return current_user


@router.patch("/me", response_model=UserRead)
def update_current_user(
    payload: UserUpdate,
    current_user: User = Depends(deps.get_current_user),
    db: Session = Depends(deps.get_db),
) -> User:
    """Update display name or notification preference."""

    return UserService(db).update_profile(current_user, payload)


@router.get("/me/premium", response_model=PremiumStatusRead)
def read_premium_status(current_user: User = Depends(deps.get_current_user)) -> PremiumStatusRead:
    """Return the plan and the premium features it unlocks."""

    state = premium_state(current_user)
    return PremiumStatusRead(
        is_premium=state.is_premium,
        plan=state.plan,
        expires_at=state.expires_at,
        features=[feature.value for feature in PremiumFeature if has_feature(current_user, feature)],
    )
