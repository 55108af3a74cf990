import logging
from typing import List, Optional

from sqlalchemy import and_, case, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.models.enums import MessageType
from app.models.message_model import Message
from app.models.property_model import Property
from app.models.user_model import User
from app.schemas import message_schema
from app.schemas.pagination_schema import PaginationParams
from app.services import notification_service

logger = logging.getLogger(__name__)

DEFAULT_INQUIRY_TEXT = "مرحباً، أنا مهتم بعقارك: {title}. هل يمكنك تزويدي بمزيد من التفاصيل؟"


def _load(db: Session, message_id: int) -> Message:
    return (
        db.query(Message)
        .options(joinedload(Message.sender), joinedload(Message.property))
        .filter(Message.id == message_id)
        .one()
    )


def send_message(
    db: Session,
    sender: User,
    receiver_id: int,
    content: str,
    prop: Optional[Property] = None,
    message_type: MessageType = MessageType.TEXT,
) -> Message:
    """
    Stores a message and the receiver's notification as one unit of work.

    Receiver and property existence are checked by the caller.
    """
    message = Message(
        sender_id=sender.id,
        receiver_id=receiver_id,
        property_id=prop.id if prop else None,
        content=content,
        message_type=message_type.value,
    )
    try:
        db.add(message)
        db.flush()
        db.add(notification_service.build_message(message, sender, prop))
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    logger.info(f"Message {message.id} sent from user {sender.id} to user {receiver_id}")
    return _load(db, message.id)


def send_inquiry(db: Session, sender: User, prop: Property, text: Optional[str] = None) -> Message:
    """Raises ValueError when the sender owns the property"""
    if prop.user_id == sender.id:
        raise ValueError("You cannot send an inquiry about your own property")
    content = (text or "").strip() or DEFAULT_INQUIRY_TEXT.format(title=prop.title)
    return send_message(
        db,
        sender,
        prop.user_id,
        content,
        prop=prop,
        message_type=MessageType.PROPERTY_INQUIRY,
    )


def list_conversations(db: Session, user_id: int) -> List[message_schema.ConversationOut]:
    contact_id = case(
        (Message.sender_id == user_id, Message.receiver_id),
        else_=Message.sender_id,
    ).label("contact_id")
    unread = func.sum(
        case(
            (and_(Message.receiver_id == user_id, Message.is_read.is_(False)), 1),
            else_=0,
        )
    ).label("unread_count")

    summary = (
        db.query(contact_id, func.max(Message.id).label("last_id"), unread)
        .filter(or_(Message.sender_id == user_id, Message.receiver_id == user_id))
        .group_by(contact_id)
        .subquery()
    )

    rows = (
        db.query(User, Message, summary.c.unread_count)
        .join(summary, summary.c.contact_id == User.id)
        .join(Message, Message.id == summary.c.last_id)
        .order_by(Message.created_at.desc(), Message.id.desc())
        .all()
    )
    return [
        message_schema.ConversationOut(
            contact_id=contact.id,
            username=contact.username,
            full_name=contact.full_name,
            profile_picture=contact.profile_picture,
            last_message=last.content,
            last_message_time=last.created_at,
            unread_count=unread_count or 0,
        )
        for contact, last, unread_count in rows
    ]


def get_thread(
    db: Session,
    user_id: int,
    other_id: int,
    pager: PaginationParams,
    property_id: Optional[int] = None,
) -> List[Message]:
    """
    Marks everything other_id sent to user_id as read, then returns one page
    of the thread: most recent page first, oldest first within the page.
    """
    (
        db.query(Message)
        .filter(
            Message.sender_id == other_id,
            Message.receiver_id == user_id,
            Message.is_read.is_(False),
        )
        .update({Message.is_read: True}, synchronize_session=False)
    )
    db.commit()

    query = (
        db.query(Message)
        .options(joinedload(Message.sender), joinedload(Message.property))
        .filter(
            or_(
                and_(Message.sender_id == user_id, Message.receiver_id == other_id),
                and_(Message.sender_id == other_id, Message.receiver_id == user_id),
            )
        )
    )
    if property_id is not None:
        query = query.filter(Message.property_id == property_id)

    page = (
        query.order_by(Message.created_at.desc(), Message.id.desc())
        .offset(pager.offset)
        .limit(pager.limit)
        .all()
    )
    page.reverse()
    return page


def delete_message(db: Session, message_id: int, sender_id: int) -> bool:
    """Only the sender may delete; False covers both missing and not owned"""
    message = (
        db.query(Message)
        .filter(Message.id == message_id, Message.sender_id == sender_id)
        .first()
    )
    if not message:
        return False
    db.delete(message)
    db.commit()
    return True
