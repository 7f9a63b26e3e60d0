"""GET /v1/notifications and PATCH /v1/notifications/{id}/read"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from finance_tracker.api.v1.schemas import NotificationListResponse, NotificationResponse
from finance_tracker.api.v1.transactions import to_notification_response
from finance_tracker.api.dependencies import parse_uuid
from finance_tracker.config import settings
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.database.repositories import NotificationRepository

router = APIRouter()


@router.get("/notifications", response_model=NotificationListResponse)
def list_notifications(
    user_id: str = Query(..., description="User identifier"),
    unread: bool = Query(False, description="Only return unread notifications"),
    db: Session = Depends(get_db),
):
    """
    Retrieve a user's notifications, newest first.

    Returns:
        Budget warnings and other alerts, optionally only the unread ones
    """
    notifications = NotificationRepository(db).get_notifications_by_user(
        user_id,
        only_unread=unread,
        limit=settings.history_limit,
    )
    return NotificationListResponse(
        user_id=user_id,
        notifications=[to_notification_response(n) for n in notifications],
    )


@router.patch("/notifications/{notification_id}/read", response_model=NotificationResponse)
def mark_notification_read(
    notification_id: str,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    notification_uuid = parse_uuid(notification_id, "notification")

    notification = NotificationRepository(db).mark_as_read(notification_uuid, user_id)
    if notification is None:
        raise HTTPException(status_code=404, detail="Notification not found")

    db.commit()
    return to_notification_response(notification)
