from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from app.core.config import settings
from app.models.enums import PropertyCategory, PropertyType, RequestStatus


class PropertyRequestBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    property_type: PropertyType
    category: PropertyCategory
    min_price: Optional[float] = Field(None, ge=0)
    max_price: Optional[float] = Field(None, ge=0)
    currency: str = settings.DEFAULT_CURRENCY
    min_bedrooms: Optional[int] = Field(None, ge=0)
    max_bedrooms: Optional[int] = Field(None, ge=0)
    min_bathrooms: Optional[int] = Field(None, ge=0)
    min_area: Optional[float] = Field(None, ge=0)
    max_area: Optional[float] = Field(None, ge=0)
    preferred_cities: List[str] = []
    preferred_districts: List[str] = []
    features: List[str] = []
    description: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_whatsapp: Optional[str] = None

    @field_validator("preferred_cities", "preferred_districts", "features", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return v or []


class PropertyRequestCreate(PropertyRequestBase):

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()

    @field_validator("preferred_cities", "preferred_districts", "features")
    @classmethod
    def unique_non_blank(cls, v: List[str]) -> List[str]:
        # Set semantics, first occurrence order kept
        seen = []
        for item in v:
            item = item.strip()
            if item and item not in seen:
                seen.append(item)
        return seen

    @model_validator(mode="after")
    def ranges_are_ordered(self):
        for low, high in (
            ("min_price", "max_price"),
            ("min_bedrooms", "max_bedrooms"),
            ("min_area", "max_area"),
        ):
            low_value, high_value = getattr(self, low), getattr(self, high)
            if low_value is not None and high_value is not None and low_value > high_value:
                raise ValueError(f"{low} must not be greater than {high}")
        return self


class PropertyRequestOut(PropertyRequestBase):
    id: int
    user_id: int
    status: RequestStatus
    created_at: datetime
    updated_at: datetime
    match_count: int = 0

    # requester summary (active listing only)
    username: Optional[str] = None
    full_name: Optional[str] = None
    profile_picture: Optional[str] = None

    class Config:
        from_attributes = True


class PropertyRequestCreatedResponse(BaseModel):
    message: str
    request_id: int
    match_count: int


class PropertyRequestListResponse(BaseModel):
    requests: List[PropertyRequestOut]


class StatusUpdate(BaseModel):
    status: RequestStatus
