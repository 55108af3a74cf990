from datetime import datetime
from typing import List, Optional

from fastapi import Form
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, EmailStr, Field, ValidationError, field_validator

from app.schemas.property_schema import PropertyOut


class UserBase(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    full_name: Optional[str] = None
    phone: Optional[str] = None


class UserCreate(UserBase):
    password: str = Field(..., min_length=6)
    is_admin: Optional[bool] = False

    @field_validator("username")
    @classmethod
    def username_has_no_spaces(cls, v: str) -> str:
        v = v.strip()
        if " " in v:
            raise ValueError("Username must not contain spaces")
        return v


class LoginRequest(BaseModel):
    # Accepts either the username or the email address
    username: str
    password: str


class UserUpdate(BaseModel):
    full_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    bio: Optional[str] = None

    @classmethod
    def as_form(
        cls,
        full_name: Optional[str] = Form(None),
        email: Optional[EmailStr] = Form(None),
        phone: Optional[str]     = Form(None),
        bio: Optional[str]       = Form(None),
    ) -> "UserUpdate":
        try:
            return cls(full_name=full_name, email=email, phone=phone, bio=bio)
        except ValidationError as exc:
            raise RequestValidationError(exc.errors()) from exc


class UserSummary(BaseModel):
    id: int
    username: str
    full_name: Optional[str] = None
    profile_picture: Optional[str] = None

    class Config:
        from_attributes = True


class UserOut(UserSummary):
    email: EmailStr
    bio: Optional[str] = None
    phone: Optional[str] = None
    is_admin: bool
    created_at: datetime


class UserEnvelope(BaseModel):
    user: UserOut


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserOut


class Token(BaseModel):
    access_token: str
    token_type: str


class UserSearchResponse(BaseModel):
    users: List[UserSummary]


class FollowResponse(BaseModel):
    message: str
    following: bool


class UserProfileOut(UserSummary):
    bio: Optional[str] = None
    created_at: datetime
    property_count: int = 0
    followers_count: int = 0
    following_count: int = 0
    is_following: bool = False
    properties: List[PropertyOut] = []


class UserProfileResponse(BaseModel):
    user: UserProfileOut
