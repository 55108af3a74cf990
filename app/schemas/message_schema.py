from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from app.models.enums import MessageType


class MessageCreate(BaseModel):
    receiver_id: int
    content: str = Field(..., min_length=1)
    property_id: Optional[int] = None
    message_type: MessageType = MessageType.TEXT

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class PropertyInquiryCreate(BaseModel):
    property_id: int
    message: Optional[str] = None


class MessageOut(BaseModel):
    id: int
    sender_id: int
    receiver_id: int
    property_id: Optional[int] = None
    content: str
    message_type: MessageType
    is_read: bool
    created_at: datetime

    sender_username: str
    sender_name: Optional[str] = None
    sender_picture: Optional[str] = None

    property_title: Optional[str] = None
    property_price: Optional[float] = None
    property_images: Optional[List[str]] = None

    @classmethod
    def from_message(cls, message) -> "MessageOut":
        prop = message.property
        return cls(
            id=message.id,
            sender_id=message.sender_id,
            receiver_id=message.receiver_id,
            property_id=message.property_id,
            content=message.content,
            message_type=message.message_type,
            is_read=message.is_read,
            created_at=message.created_at,
            sender_username=message.sender.username,
            sender_name=message.sender.full_name,
            sender_picture=message.sender.profile_picture,
            property_title=prop.title if prop else None,
            property_price=prop.price if prop else None,
            property_images=(prop.image_urls or []) if prop else None,
        )


class MessageSentResponse(BaseModel):
    message: str
    data: MessageOut


class MessageListResponse(BaseModel):
    messages: List[MessageOut]


class ConversationOut(BaseModel):
    contact_id: int
    username: str
    full_name: Optional[str] = None
    profile_picture: Optional[str] = None
    last_message: str
    last_message_time: datetime
    unread_count: int


class ConversationListResponse(BaseModel):
    conversations: List[ConversationOut]
