from .user_model import Follow, User
from .property_model import Comment, Like, Property
from .property_request_model import PropertyRequest
from .message_model import Message
from .notification_model import Notification

__all__ = [
    "Comment",
    "Follow",
    "Like",
    "Message",
    "Notification",
    "Property",
    "PropertyRequest",
    "User",
]
