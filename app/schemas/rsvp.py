from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import List, Optional

from app.utils.validation import as_utc, is_non_empty_string


class RSVPCreate(BaseModel):
    """Request schema for RSVP creation"""
    user_id: str = Field(..., description="Attending user")
    event_id: str = Field(..., description="Event being attended")

    @field_validator("user_id", "event_id", mode="before")
    @classmethod
    def validate_ids(cls, v, info):
        if not is_non_empty_string(v):
            raise ValueError(f"{info.field_name} must be a non-empty string.")
        return v.strip()


class RSVPResponse(BaseModel):
    """Response schema for RSVP"""
    id: str
    user_id: str
    event_id: str
    created_at: datetime

    class Config:
        from_attributes = True

    @field_validator("created_at", mode="after")
    @classmethod
    def normalize_utc(cls, v):
        return as_utc(v)


class Attendee(BaseModel):
    name: str
    email: str

    class Config:
        from_attributes = True


class RSVPListEntry(BaseModel):
    """One line of a society's RSVP list"""
    id: str
    created_at: datetime
    user: Optional[Attendee] = None

    class Config:
        from_attributes = True

    @field_validator("created_at", mode="after")
    @classmethod
    def normalize_utc(cls, v):
        return as_utc(v)


class RSVPListResponse(BaseModel):
    event_id: str
    rsvps: List[RSVPListEntry]


class EmailRSVPListRequest(BaseModel):
    eventId: str = Field(..., description="Event whose RSVP list is emailed to the society")

    @field_validator("eventId", mode="before")
    @classmethod
    def validate_event_id(cls, v):
        if not is_non_empty_string(v):
            raise ValueError("eventId must be a non-empty string.")
        return v.strip()
