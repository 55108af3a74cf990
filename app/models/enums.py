from enum import Enum


class PropertyType(str, Enum):
    SALE = "sale"
    RENT = "rent"
    COMMERCIAL = "commercial"
    RESIDENTIAL = "residential"


class PropertyCategory(str, Enum):
    APARTMENT = "apartment"
    HOUSE = "house"
    VILLA = "villa"
    LAND = "land"
    OFFICE = "office"
    SHOP = "shop"


class PropertyStatus(str, Enum):
    ACTIVE = "active"
    SOLD = "sold"
    RENTED = "rented"
    INACTIVE = "inactive"


class RequestStatus(str, Enum):
    ACTIVE = "active"
    FULFILLED = "fulfilled"
    CANCELLED = "cancelled"


class MessageType(str, Enum):
    TEXT = "text"
    PROPERTY_INQUIRY = "property_inquiry"


class NotificationType(str, Enum):
    PROPERTY_MATCH = "property_match"
    MESSAGE = "message"
    LIKE = "like"
    COMMENT = "comment"
