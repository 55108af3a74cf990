from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.core.dependencies import get_current_user, get_db
from app.models import user_model
from app.schemas import notification_schema
from app.schemas.admin_schema import MessageResponse
from app.schemas.pagination_schema import PaginationParams, pagination
from app.services import notification_service

router = APIRouter(
    prefix="/api/notifications",
    tags=["Notifications"],
)


@router.get("/", response_model=notification_schema.NotificationListResponse)
def list_notifications(
    unread_only: bool = Query(False),
    pager: PaginationParams = Depends(pagination(20)),
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    notifications = notification_service.list_notifications(
        db, current_user.id, pager, unread_only=unread_only
    )
    return {"notifications": notifications}


@router.patch("/mark-all-read", response_model=notification_schema.MarkAllReadResponse)
def mark_all_read(
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    updated = notification_service.mark_all_as_read(db, current_user.id)
    return {"message": "All notifications marked as read", "updated_count": updated}


@router.get("/unread-count", response_model=notification_schema.UnreadCountResponse)
def unread_count(
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    return {"count": notification_service.unread_count(db, current_user.id)}


@router.patch("/{notification_id}/read", response_model=MessageResponse)
def mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    if not notification_service.mark_as_read(db, notification_id, current_user.id):
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"message": "Notification marked as read"}


@router.delete("/{notification_id}", response_model=MessageResponse)
def delete_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    if not notification_service.delete_notification(db, notification_id, current_user.id):
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"message": "Notification deleted"}
