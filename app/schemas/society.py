from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional

from app.utils.validation import as_utc, clean_optional_string, is_non_empty_string, is_valid_email


def _name(value) -> str:
    if not is_non_empty_string(value):
        raise ValueError("name must be a non-empty string.")
    return value.strip()


def _email(value, field: str) -> str:
    if not is_non_empty_string(value) or not is_valid_email(value.strip()):
        raise ValueError(f"{field} must be a valid email address.")
    return value.strip().lower()


class SocietyCreate(BaseModel):
    """Request schema for society registration"""
    name: str = Field(..., description="Society name (unique)")
    contact_email: str = Field(..., description="Contact email (unique)")
    description: Optional[str] = None
    email: Optional[str] = Field(None, description="Public society email")
    contact_person: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v):
        return _name(v)

    @field_validator("contact_email", mode="before")
    @classmethod
    def validate_contact_email(cls, v):
        return _email(v, "contact_email")

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v):
        if v is None:
            return None
        return _email(v, "email")

    @field_validator("description", "contact_person", mode="before")
    @classmethod
    def validate_optional_text(cls, v):
        return clean_optional_string(v)


class SocietyUpdate(BaseModel):
    """Request schema for society update"""
    name: Optional[str] = None
    contact_email: Optional[str] = None
    description: Optional[str] = None
    email: Optional[str] = None
    contact_person: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v):
        return _name(v)

    @field_validator("contact_email", mode="before")
    @classmethod
    def validate_contact_email(cls, v):
        return _email(v, "contact_email")

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v):
        if v is None:
            return None
        return _email(v, "email")

    @field_validator("description", "contact_person", mode="before")
    @classmethod
    def validate_optional_text(cls, v):
        return clean_optional_string(v)


class SocietyResponse(BaseModel):
    """Response schema for society"""
    id: str
    name: str
    contact_email: str
    description: Optional[str] = None
    email: Optional[str] = None
    contact_person: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @field_validator("created_at", "updated_at", mode="after")
    @classmethod
    def normalize_utc(cls, v):
        return as_utc(v) if v is not None else v
