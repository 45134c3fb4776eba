"""
Request/response schemas for the admin dashboard endpoints.

Field names in the moderation payloads (eventId, totalPages) follow what the
admin dashboard frontend already sends and reads.
"""

from pydantic import BaseModel, Field, field_validator
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from app.schemas.event import EventResponse
from app.utils.validation import as_utc, clean_optional_string, is_non_empty_string
from models.event import EVENT_STATUSES


class AdminEventUpdate(BaseModel):
    """Moderation decision for a single event"""
    eventId: str = Field(..., description="Event to moderate")
    status: str = Field(..., description="pending, approved or rejected")
    rejection_reason: Optional[str] = Field(None, description="Only stored for rejections")

    @field_validator("eventId", mode="before")
    @classmethod
    def validate_event_id(cls, v):
        if not is_non_empty_string(v):
            raise ValueError("Event ID and status are required.")
        return v.strip()

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v):
        if v not in EVENT_STATUSES:
            raise ValueError("Invalid status provided.")
        return v

    @field_validator("rejection_reason", mode="before")
    @classmethod
    def validate_reason(cls, v):
        return clean_optional_string(v)


class AdminEventUpdateResponse(BaseModel):
    id: str
    status: str
    rejection_reason: Optional[str] = None


class EventPage(BaseModel):
    events: List[EventResponse]
    total: int
    page: int
    limit: int
    totalPages: int


class AdminUserRow(BaseModel):
    """A user or society account as listed on the admin users page"""
    id: str
    email: str
    name: str
    role: str
    created_at: datetime

    @field_validator("created_at", mode="after")
    @classmethod
    def normalize_utc(cls, v):
        return as_utc(v)


class AdminUserPage(BaseModel):
    data: List[AdminUserRow]
    count: int


class DailyCount(BaseModel):
    date: date
    count: int


class ActivityResponse(BaseModel):
    id: str
    admin_id: Optional[str] = None
    admin_email: Optional[str] = None
    action: str
    target_entity: Optional[str] = None
    target_id: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    created_at: datetime

    class Config:
        from_attributes = True

    @field_validator("created_at", mode="after")
    @classmethod
    def normalize_utc(cls, v):
        return as_utc(v)


class SettingsUpdate(BaseModel):
    config: Dict[str, Any] = Field(..., description="Full platform settings document")


class SettingsResponse(BaseModel):
    key: str
    config: Dict[str, Any]
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @field_validator("updated_at", mode="after")
    @classmethod
    def normalize_utc(cls, v):
        return as_utc(v) if v is not None else v


class SystemStatus(BaseModel):
    api: str
    db: str
    ts: datetime
