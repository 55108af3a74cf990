from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class PropertyRef(BaseModel):
    id: int
    title: str
    image_urls: List[str] = []


class PropertyRequestRef(BaseModel):
    id: int
    title: str
    requester_id: int
    requester_username: str


class MessageRef(BaseModel):
    id: int
    sender_id: int
    sender_username: str
    sender_name: Optional[str] = None


class ActorRef(BaseModel):
    id: int
    username: str
    full_name: Optional[str] = None


class NotificationBase(BaseModel):
    id: int
    title: str
    content: Optional[str] = None
    is_read: bool
    created_at: datetime


class PropertyMatchNotification(NotificationBase):
    type: Literal["property_match"] = "property_match"
    request: Optional[PropertyRequestRef] = None
    property: Optional[PropertyRef] = None


class MessageNotification(NotificationBase):
    type: Literal["message"] = "message"
    message: Optional[MessageRef] = None


class LikeNotification(NotificationBase):
    type: Literal["like"] = "like"
    property: Optional[PropertyRef] = None
    actor: Optional[ActorRef] = None


class CommentNotification(NotificationBase):
    type: Literal["comment"] = "comment"
    property: Optional[PropertyRef] = None
    actor: Optional[ActorRef] = None


NotificationOut = Annotated[
    Union[PropertyMatchNotification, MessageNotification, LikeNotification, CommentNotification],
    Field(discriminator="type"),
]


class NotificationListResponse(BaseModel):
    notifications: List[NotificationOut]


class UnreadCountResponse(BaseModel):
    count: int


class MarkAllReadResponse(BaseModel):
    message: str
    updated_count: int
