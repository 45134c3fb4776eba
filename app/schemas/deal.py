from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional

from app.utils.validation import as_utc, clean_optional_string, is_non_empty_string, is_valid_email
from models.deal import DEAL_STATUSES

_OPTIONAL_TEXT = ("description", "code", "terms", "action_label", "action_url", "image_url")


class DealCreate(BaseModel):
    """Request schema for deal submission"""
    title: str = Field(..., description="Deal headline")
    description: Optional[str] = None
    code: Optional[str] = Field(None, description="Discount code")
    terms: Optional[str] = None
    action_label: Optional[str] = None
    action_url: Optional[str] = None
    image_url: Optional[str] = None
    contact_email: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v):
        if not is_non_empty_string(v):
            raise ValueError("title must be a non-empty string.")
        return v.strip()

    @field_validator(*_OPTIONAL_TEXT, mode="before")
    @classmethod
    def validate_optional_text(cls, v):
        return clean_optional_string(v)

    @field_validator("contact_email", mode="before")
    @classmethod
    def validate_contact_email(cls, v):
        if v is None:
            return None
        if not is_valid_email(v):
            raise ValueError("contact_email must be a valid email address.")
        return v


class DealUpdate(DealCreate):
    """Admin update; also the place where a deal gets approved or rejected"""
    title: Optional[str] = None
    status: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v):
        if v not in DEAL_STATUSES:
            raise ValueError(f"status must be one of: {', '.join(DEAL_STATUSES)}.")
        return v


class DealResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    code: Optional[str] = None
    terms: Optional[str] = None
    action_label: Optional[str] = None
    action_url: Optional[str] = None
    image_url: Optional[str] = None
    contact_email: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @field_validator("created_at", "updated_at", mode="after")
    @classmethod
    def normalize_utc(cls, v):
        return as_utc(v) if v is not None else v
