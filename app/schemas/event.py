from pydantic import BaseModel, Field, field_validator, model_validator
from datetime import datetime
from typing import Optional

from app.utils.validation import (
    as_utc,
    clean_optional_string,
    is_non_empty_string,
    parse_utc_datetime,
)
from models.event import EVENT_CATEGORIES, EVENT_STATUSES


def _required_text(value, field: str) -> str:
    if not is_non_empty_string(value):
        raise ValueError(f"{field} must be a non-empty string.")
    return value.strip()


def _timestamp(value, field: str) -> datetime:
    parsed = parse_utc_datetime(value)
    if parsed is None:
        raise ValueError(f"{field} must be a valid ISO 8601 date string.")
    return parsed


def _category(value) -> Optional[str]:
    value = clean_optional_string(value)
    if value is None:
        return None
    value = value.lower()
    if value not in EVENT_CATEGORIES:
        raise ValueError(f"category must be one of: {', '.join(EVENT_CATEGORIES)}.")
    return value


class SocietySummary(BaseModel):
    """Society fields embedded in event listings"""
    id: str
    name: str
    contact_email: str

    class Config:
        from_attributes = True


class EventCreate(BaseModel):
    """Request schema for event submission"""
    name: str = Field(..., description="Event name")
    description: Optional[str] = Field(None, description="Event description")
    start_time: datetime = Field(..., description="Start time, ISO 8601")
    end_time: datetime = Field(..., description="End time, ISO 8601")
    location: str = Field(..., description="Event location")
    category: Optional[str] = Field(None, description="Event category")
    society_id: str = Field(..., description="Owning society")
    signup_link: Optional[str] = Field(None, description="External signup link")
    image_url: Optional[str] = Field(None, description="Event image")

    @field_validator("name", "location", "society_id", mode="before")
    @classmethod
    def validate_required_text(cls, v, info):
        return _required_text(v, info.field_name)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def validate_timestamp(cls, v, info):
        return _timestamp(v, info.field_name)

    @field_validator("description", "signup_link", "image_url", mode="before")
    @classmethod
    def validate_optional_text(cls, v):
        return clean_optional_string(v)

    @field_validator("category", mode="before")
    @classmethod
    def validate_category(cls, v):
        return _category(v)

    @model_validator(mode="after")
    def check_time_order(self):
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time.")
        return self


class EventUpdate(BaseModel):
    """Request schema for partial event update; only provided fields change"""
    name: Optional[str] = None
    description: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    location: Optional[str] = None
    category: Optional[str] = None
    signup_link: Optional[str] = None
    image_url: Optional[str] = None
    status: Optional[str] = None
    attendee_count: Optional[int] = None

    @field_validator("name", "location", mode="before")
    @classmethod
    def validate_required_text(cls, v, info):
        return _required_text(v, info.field_name)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def validate_timestamp(cls, v, info):
        return _timestamp(v, info.field_name)

    @field_validator("description", "signup_link", "image_url", mode="before")
    @classmethod
    def validate_optional_text(cls, v):
        return clean_optional_string(v)

    @field_validator("category", mode="before")
    @classmethod
    def validate_category(cls, v):
        return _category(v)

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v):
        if v not in EVENT_STATUSES:
            raise ValueError(f"status must be one of: {', '.join(EVENT_STATUSES)}.")
        return v

    @field_validator("attendee_count", mode="before")
    @classmethod
    def validate_attendee_count(cls, v):
        if isinstance(v, bool) or not isinstance(v, (int, float)) or v < 0 or v != int(v):
            raise ValueError("attendee_count must be a non-negative number.")
        return int(v)

    @model_validator(mode="after")
    def check_time_order(self):
        if self.start_time and self.end_time and self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time.")
        return self


class EventReject(BaseModel):
    """Optional body for the reject action"""
    reason: Optional[str] = Field(None, description="Reason passed on to the society")

    @field_validator("reason", mode="before")
    @classmethod
    def validate_reason(cls, v):
        return clean_optional_string(v)


class EventResponse(BaseModel):
    """Response schema for event"""
    id: str = Field(..., description="Event ID")
    name: str = Field(..., description="Event name")
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    location: str
    category: Optional[str] = None
    society_id: str
    signup_link: Optional[str] = None
    image_url: Optional[str] = None
    status: str = Field(..., description="pending, approved or rejected")
    rejection_reason: Optional[str] = None
    attendee_count: int = 0
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: Optional[datetime] = None
    society: Optional[SocietySummary] = None

    class Config:
        from_attributes = True  # Pydantic v2 (allows reading from SQLAlchemy models)

    @field_validator("start_time", "end_time", "created_at", "updated_at", mode="after")
    @classmethod
    def normalize_utc(cls, v):
        return as_utc(v) if v is not None else v
