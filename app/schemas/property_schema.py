from datetime import datetime
from typing import List, Optional

from fastapi import Form
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field, ValidationError, field_validator

from app.core.config import settings
from app.models.enums import PropertyCategory, PropertyStatus, PropertyType


def split_features(raw: Optional[str]) -> List[str]:
    """'pool, garden,,garage' -> ['pool', 'garden', 'garage']"""
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


class PropertyBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    currency: str = settings.DEFAULT_CURRENCY
    property_type: PropertyType
    category: PropertyCategory
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    area: Optional[float] = Field(None, ge=0)
    area_unit: str = "sqm"
    location: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    district: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    features: List[str] = []


class PropertyCreate(PropertyBase):

    @field_validator("title", "location", "city")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()

    @classmethod
    def as_form(
        cls,
        title: str                        = Form(...),
        description: Optional[str]        = Form(None),
        price: float                      = Form(..., ge=0),
        currency: str                     = Form(settings.DEFAULT_CURRENCY),
        property_type: PropertyType       = Form(...),
        category: PropertyCategory        = Form(...),
        bedrooms: Optional[int]           = Form(None, ge=0),
        bathrooms: Optional[int]          = Form(None, ge=0),
        area: Optional[float]             = Form(None, ge=0),
        area_unit: str                    = Form("sqm"),
        location: str                     = Form(...),
        city: str                         = Form(...),
        district: Optional[str]           = Form(None),
        latitude: Optional[float]         = Form(None),
        longitude: Optional[float]        = Form(None),
        features: Optional[str]           = Form(None),
    ) -> "PropertyCreate":
        try:
            return cls(
                title=title,
                description=description,
                price=price,
                currency=currency,
                property_type=property_type,
                category=category,
                bedrooms=bedrooms,
                bathrooms=bathrooms,
                area=area,
                area_unit=area_unit,
                location=location,
                city=city,
                district=district,
                latitude=latitude,
                longitude=longitude,
                features=split_features(features),
            )
        except ValidationError as exc:
            raise RequestValidationError(exc.errors()) from exc


class PropertyFilters(BaseModel):
    type: Optional[PropertyType] = None
    category: Optional[PropertyCategory] = None
    city: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None


class PropertyOut(PropertyBase):
    id: int
    user_id: int
    image_urls: List[str] = []
    video_url: Optional[str] = None
    is_featured: bool
    status: PropertyStatus
    views_count: int
    created_at: datetime
    updated_at: datetime

    # owner summary
    username: Optional[str] = None
    full_name: Optional[str] = None
    profile_picture: Optional[str] = None
    phone: Optional[str] = None

    like_count: int = 0
    comment_count: int = 0
    is_liked: bool = False

    class Config:
        from_attributes = True

    @field_validator("features", "image_urls", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return v or []

    @classmethod
    def from_row(
        cls,
        prop,
        like_count: int = 0,
        comment_count: int = 0,
        is_liked: bool = False,
        include_phone: bool = False,
    ) -> "PropertyOut":
        out = cls.model_validate(prop)
        out.username = prop.owner.username
        out.full_name = prop.owner.full_name
        out.profile_picture = prop.owner.profile_picture
        if include_phone:
            out.phone = prop.owner.phone
        out.like_count = like_count or 0
        out.comment_count = comment_count or 0
        out.is_liked = bool(is_liked)
        return out


class PropertyListResponse(BaseModel):
    properties: List[PropertyOut]


class PropertyEnvelope(BaseModel):
    property: PropertyOut


class PropertyCreatedResponse(BaseModel):
    message: str
    property: PropertyOut


class LikeResponse(BaseModel):
    message: str
    liked: bool


class CommentCreate(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Comment content is required")
        return v.strip()


class CommentOut(BaseModel):
    id: int
    content: str
    created_at: datetime
    user_id: int
    username: str
    full_name: Optional[str] = None
    profile_picture: Optional[str] = None

    @classmethod
    def from_comment(cls, comment) -> "CommentOut":
        return cls(
            id=comment.id,
            content=comment.content,
            created_at=comment.created_at,
            user_id=comment.user.id,
            username=comment.user.username,
            full_name=comment.user.full_name,
            profile_picture=comment.user.profile_picture,
        )


class CommentListResponse(BaseModel):
    comments: List[CommentOut]


class CommentCreatedResponse(BaseModel):
    message: str
    comment: CommentOut
