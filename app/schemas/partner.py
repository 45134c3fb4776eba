from pydantic import BaseModel, Field, field_validator
from typing import Optional

from app.utils.validation import clean_optional_string, is_non_empty_string, is_valid_email


class PartnerCreate(BaseModel):
    """Request schema for partner registration"""
    contact_email: str = Field(..., description="Partner contact email (unique)")
    user_id: str = Field(..., description="Auth provider id of the registering account")
    description: Optional[str] = None
    website_url: Optional[str] = None

    @field_validator("contact_email", mode="before")
    @classmethod
    def validate_contact_email(cls, v):
        if not is_non_empty_string(v) or not is_valid_email(v.strip()):
            raise ValueError("contact_email must be a valid email address.")
        return v.strip().lower()

    @field_validator("user_id", mode="before")
    @classmethod
    def validate_user_id(cls, v):
        if not is_non_empty_string(v):
            raise ValueError("user_id must be a non-empty string.")
        return v.strip()

    @field_validator("description", "website_url", mode="before")
    @classmethod
    def validate_optional_text(cls, v):
        return clean_optional_string(v)


class PartnerResponse(BaseModel):
    """Registration receipt"""
    id: str
    contact_email: str

    class Config:
        from_attributes = True
