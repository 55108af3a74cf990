"""
Notifications: creation per type, typed resolution, read state.

Every notification type has its own builder (what it references) and its own
resolver (how those references are rendered). Nothing dispatches on a loose
related id.
"""
import logging
from typing import Callable, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from app.models.enums import MessageType, NotificationType
from app.models.message_model import Message
from app.models.notification_model import Notification
from app.models.property_model import Property
from app.models.property_request_model import PropertyRequest
from app.models.user_model import User
from app.schemas import notification_schema
from app.schemas.pagination_schema import PaginationParams

logger = logging.getLogger(__name__)

MATCH_TITLE = "طلب عقار مطابق لعقارك"
MATCH_CONTENT = "يوجد شخص يبحث عن عقار مشابه لعقارك: {title}"
MESSAGE_TITLE = "رسالة جديدة من {name}"
INQUIRY_TITLE = "استفسار جديد عن عقارك"
INQUIRY_CONTENT = "{name} أرسل استفساراً عن: {title}"
LIKE_TITLE = "{name} أعجب بعقارك"
COMMENT_TITLE = "{name} علّق على عقارك"

MESSAGE_PREVIEW_LENGTH = 100


def display_name(user: User) -> str:
    return user.full_name or user.username


# --- builders (one per type) ---

def build_property_match(request: PropertyRequest, prop: Property) -> Notification:
    return Notification(
        user_id=prop.user_id,
        type=NotificationType.PROPERTY_MATCH.value,
        title=MATCH_TITLE,
        content=MATCH_CONTENT.format(title=prop.title),
        property_request_id=request.id,
        property_id=prop.id,
    )


def build_message(message: Message, sender: User, prop: Optional[Property] = None) -> Notification:
    if prop is not None and message.message_type == MessageType.PROPERTY_INQUIRY.value:
        title = INQUIRY_TITLE
        content = INQUIRY_CONTENT.format(name=display_name(sender), title=prop.title)
    else:
        title = MESSAGE_TITLE.format(name=display_name(sender))
        content = message.content[:MESSAGE_PREVIEW_LENGTH]
    return Notification(
        user_id=message.receiver_id,
        type=NotificationType.MESSAGE.value,
        title=title,
        content=content,
        message_id=message.id,
    )


def build_like(prop: Property, actor: User) -> Notification:
    return Notification(
        user_id=prop.user_id,
        type=NotificationType.LIKE.value,
        title=LIKE_TITLE.format(name=display_name(actor)),
        content=prop.title,
        property_id=prop.id,
        actor_id=actor.id,
    )


def build_comment(prop: Property, actor: User, comment_content: str) -> Notification:
    return Notification(
        user_id=prop.user_id,
        type=NotificationType.COMMENT.value,
        title=COMMENT_TITLE.format(name=display_name(actor)),
        content=comment_content[:MESSAGE_PREVIEW_LENGTH],
        property_id=prop.id,
        actor_id=actor.id,
    )


# --- resolvers (one per type) ---

def _base_fields(n: Notification) -> dict:
    return {
        "id": n.id,
        "title": n.title,
        "content": n.content,
        "is_read": n.is_read,
        "created_at": n.created_at,
    }


def _property_ref(prop: Optional[Property]) -> Optional[notification_schema.PropertyRef]:
    if prop is None:
        return None
    return notification_schema.PropertyRef(id=prop.id, title=prop.title, image_urls=prop.image_urls or [])


def _actor_ref(actor: Optional[User]) -> Optional[notification_schema.ActorRef]:
    if actor is None:
        return None
    return notification_schema.ActorRef(id=actor.id, username=actor.username, full_name=actor.full_name)


def _resolve_property_match(n: Notification) -> notification_schema.PropertyMatchNotification:
    request_ref = None
    if n.property_request is not None:
        request_ref = notification_schema.PropertyRequestRef(
            id=n.property_request.id,
            title=n.property_request.title,
            requester_id=n.property_request.owner.id,
            requester_username=n.property_request.owner.username,
        )
    return notification_schema.PropertyMatchNotification(
        **_base_fields(n), request=request_ref, property=_property_ref(n.property)
    )


def _resolve_message(n: Notification) -> notification_schema.MessageNotification:
    message_ref = None
    if n.message is not None:
        message_ref = notification_schema.MessageRef(
            id=n.message.id,
            sender_id=n.message.sender.id,
            sender_username=n.message.sender.username,
            sender_name=n.message.sender.full_name,
        )
    return notification_schema.MessageNotification(**_base_fields(n), message=message_ref)


def _resolve_like(n: Notification) -> notification_schema.LikeNotification:
    return notification_schema.LikeNotification(
        **_base_fields(n), property=_property_ref(n.property), actor=_actor_ref(n.actor)
    )


def _resolve_comment(n: Notification) -> notification_schema.CommentNotification:
    return notification_schema.CommentNotification(
        **_base_fields(n), property=_property_ref(n.property), actor=_actor_ref(n.actor)
    )


RESOLVERS: Dict[str, Callable[[Notification], notification_schema.NotificationBase]] = {
    NotificationType.PROPERTY_MATCH.value: _resolve_property_match,
    NotificationType.MESSAGE.value: _resolve_message,
    NotificationType.LIKE.value: _resolve_like,
    NotificationType.COMMENT.value: _resolve_comment,
}


def resolve(n: Notification) -> notification_schema.NotificationBase:
    return RESOLVERS[n.type](n)


# --- queries ---

def list_notifications(
    db: Session,
    user_id: int,
    pager: PaginationParams,
    unread_only: bool = False,
) -> List[notification_schema.NotificationBase]:
    query = (
        db.query(Notification)
        .options(
            selectinload(Notification.property_request).selectinload(PropertyRequest.owner),
            selectinload(Notification.property),
            selectinload(Notification.message).selectinload(Message.sender),
            selectinload(Notification.actor),
        )
        .filter(Notification.user_id == user_id)
    )
    if unread_only:
        query = query.filter(Notification.is_read.is_(False))
    rows = (
        query.order_by(Notification.created_at.desc(), Notification.id.desc())
        .offset(pager.offset)
        .limit(pager.limit)
        .all()
    )
    return [resolve(n) for n in rows]


def _get_own(db: Session, notification_id: int, user_id: int) -> Optional[Notification]:
    return (
        db.query(Notification)
        .filter(Notification.id == notification_id, Notification.user_id == user_id)
        .first()
    )


def mark_as_read(db: Session, notification_id: int, user_id: int) -> bool:
    notification = _get_own(db, notification_id, user_id)
    if not notification:
        return False
    notification.is_read = True
    db.commit()
    return True


def mark_all_as_read(db: Session, user_id: int) -> int:
    updated = (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
        .update({Notification.is_read: True}, synchronize_session=False)
    )
    db.commit()
    return updated


def unread_count(db: Session, user_id: int) -> int:
    return (
        db.query(func.count(Notification.id))
        .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
        .scalar()
    ) or 0


def delete_notification(db: Session, notification_id: int, user_id: int) -> bool:
    notification = _get_own(db, notification_id, user_id)
    if not notification:
        return False
    db.delete(notification)
    db.commit()
    return True

