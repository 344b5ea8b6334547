# backend/app/schemas/user.py
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from backend.app.schemas.base import ApiSchema


# Schema used when a client registers
class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=20)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=128)


# Returned by registration and login. The only place a token is ever sent.
class AuthResponse(ApiSchema):
    success: bool = True
    user_id: str
    username: str
    access_token: str


# Public view of a user (never includes password hash or token)
class UserResponse(ApiSchema):
    id: str
    username: str
    email: str
    is_admin: bool
    created_at: datetime


class UserDeleteResponse(ApiSchema):
    success: bool = True
    message: str
    deleted_thoughts: int
