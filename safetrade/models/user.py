"""
User models for registration, login and profile management.
"""

from pydantic import BaseModel, Field
from typing import Optional

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class LoginRequest(BaseModel):
    """Credentials for citizen and admin login."""
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN, description="Account e-mail")
    password: str = Field(..., min_length=1, description="Account password")


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1, description="Refresh token issued at login")


class RegisterRequest(BaseModel):
    """Model for creating a new citizen account."""
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN, description="Unique e-mail")
    name: Optional[str] = Field(None, max_length=255, description="Display name (optional)")
    password: str = Field(..., min_length=8, max_length=128, description="Password, at least 8 characters")

    class Config:
        json_schema_extra = {
            "example": {
                "email": "ana@example.com",
                "name": "Ana",
                "password": "contraseña-segura",
            }
        }


class UpdateEmailRequest(BaseModel):
    new_email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN, description="New e-mail")
    password: str = Field(..., min_length=1, description="Current password for confirmation")


class UpdateNameRequest(BaseModel):
    new_name: str = Field(..., min_length=2, max_length=255, description="New display name")
    password: str = Field(..., min_length=1, description="Current password for confirmation")


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1, description="Current password")
    new_password: str = Field(..., min_length=8, max_length=128, description="New password, at least 8 characters")
