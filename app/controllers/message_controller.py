from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.core.dependencies import get_current_user, get_db
from app.models import user_model
from app.schemas import message_schema
from app.schemas.admin_schema import MessageResponse
from app.schemas.pagination_schema import PaginationParams, pagination
from app.services import message_service, property_service, user_service

router = APIRouter(
    prefix="/api/messages",
    tags=["Messages"],
)


@router.post(
    "/send",
    response_model=message_schema.MessageSentResponse,
    status_code=status.HTTP_201_CREATED,
)
def send_message(
    message_in: message_schema.MessageCreate,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    if not user_service.get_user_by_id(db, message_in.receiver_id):
        raise HTTPException(status_code=404, detail="Receiver not found")
    prop = None
    if message_in.property_id is not None:
        prop = property_service.get_property(db, message_in.property_id)
        if not prop:
            raise HTTPException(status_code=404, detail="Property not found")

    message = message_service.send_message(
        db,
        current_user,
        message_in.receiver_id,
        message_in.content,
        prop=prop,
        message_type=message_in.message_type,
    )
    return {
        "message": "Message sent successfully",
        "data": message_schema.MessageOut.from_message(message),
    }


@router.post(
    "/property-inquiry",
    response_model=message_schema.MessageSentResponse,
    status_code=status.HTTP_201_CREATED,
)
def send_property_inquiry(
    inquiry_in: message_schema.PropertyInquiryCreate,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    prop = property_service.get_property(db, inquiry_in.property_id)
    if not prop:
        raise HTTPException(status_code=404, detail="Property not found")
    try:
        message = message_service.send_inquiry(db, current_user, prop, inquiry_in.message)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "message": "Inquiry sent successfully",
        "data": message_schema.MessageOut.from_message(message),
    }


@router.get("/conversations", response_model=message_schema.ConversationListResponse)
def list_conversations(
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    return {"conversations": message_service.list_conversations(db, current_user.id)}


@router.get("/conversation/{user_id}", response_model=message_schema.MessageListResponse)
def get_conversation(
    user_id: int,
    property_id: Optional[int] = Query(None),
    pager: PaginationParams = Depends(pagination(50)),
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    if not user_service.get_user_by_id(db, user_id):
        raise HTTPException(status_code=404, detail="User not found")
    messages = message_service.get_thread(
        db, current_user.id, user_id, pager, property_id=property_id
    )
    return {"messages": [message_schema.MessageOut.from_message(m) for m in messages]}


@router.delete("/{message_id}", response_model=MessageResponse)
def delete_message(
    message_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    if not message_service.delete_message(db, message_id, current_user.id):
        raise HTTPException(status_code=404, detail="Message not found")
    return {"message": "Message deleted successfully"}
