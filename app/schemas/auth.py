from pydantic import BaseModel, field_validator
from typing import Any, Dict, Optional

from app.utils.validation import is_non_empty_string


class LoginRequest(BaseModel):
    """Email/password sign-in"""
    email: str
    password: str

    @field_validator("email", "password", mode="before")
    @classmethod
    def validate_present(cls, v, info):
        if not is_non_empty_string(v):
            raise ValueError(f"{info.field_name.capitalize()} is required.")
        return v.strip() if info.field_name == "email" else v


class LoginResponse(BaseModel):
    user: Dict[str, Any]
    session: Dict[str, Any]
    user_type: Optional[str] = None
    message: str = "Login successful."
