"""Web Push subscription endpoints."""
from typing import Optional

from fastapi import APIRouter, Depends, Header, status
from sqlalchemy.orm import Session

from app.api import deps
from app.config import settings
from app.db.models.user import User
from app.schemas import PushSubscriptionCreate, VapidPublicKeyRead
from app.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/vapid-public-key", response_model=VapidPublicKeyRead)
def get_vapid_public_key() -> VapidPublicKeyRead:
    return VapidPublicKeyRead(publicKey=settings.VAPID_PUBLIC_KEY)


@router.post("/subscribe", status_code=status.HTTP_201_CREATED)
def subscribe(
    subscription: PushSubscriptionCreate,
    user_agent: Optional[str] = Header(default=None),
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
):
    """Register this browser for event reminders and achievement alerts."""

    NotificationService(db).subscribe(
        current_user.id, subscription.model_dump(exclude={"expirationTime"}), user_agent
    )
    return {"status": "success"}
