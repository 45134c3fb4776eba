from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional

from app.utils.validation import as_utc, is_non_empty_string, is_valid_email
from models.user import USER_TYPES


class UserCreate(BaseModel):
    """Request schema for user profile creation"""
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address (unique)")
    user_type: str = Field(..., description="student, society or organization")

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v):
        if not is_non_empty_string(v):
            raise ValueError("name must be a non-empty string.")
        return v.strip()

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v):
        if not is_non_empty_string(v) or not is_valid_email(v.strip()):
            raise ValueError("email must be a valid email address.")
        return v.strip().lower()

    @field_validator("user_type", mode="before")
    @classmethod
    def validate_user_type(cls, v):
        if v not in USER_TYPES:
            raise ValueError(f"user_type must be one of: {', '.join(USER_TYPES)}.")
        return v


class UserUpdate(UserCreate):
    """Request schema for user update; every field optional"""
    name: Optional[str] = None
    email: Optional[str] = None
    user_type: Optional[str] = None


class UserResponse(BaseModel):
    """Response schema for user"""
    id: str
    name: str
    email: str
    user_type: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @field_validator("created_at", "updated_at", mode="after")
    @classmethod
    def normalize_utc(cls, v):
        return as_utc(v) if v is not None else v
