import re
import bleach
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator


# Username validation pattern: alphanumeric, underscores, hyphens only
USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")

RESERVED_USERNAMES = {"admin", "api", "signup", "login", "stories", "users", "recovery"}


def clean_text(value: str) -> str:
    """Strip any markup from free text fields"""
    return bleach.clean(value, tags=[], strip=True).strip()


class SignupRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=64)
    name: str = Field(..., min_length=1, max_length=256)
    password: str = Field(..., min_length=6, max_length=128)
    phone: str | None = Field(None, max_length=32)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        if not USERNAME_PATTERN.match(v):
            raise ValueError(
                "Username can only contain letters, numbers, underscores, and hyphens"
            )
        if v.lower() in RESERVED_USERNAMES:
            raise ValueError("This username is reserved")
        return v

    @field_validator("name")
    @classmethod
    def sanitize_name(cls, v: str) -> str:
        cleaned = clean_text(v)
        if not cleaned:
            raise ValueError("Name cannot be empty")
        return cleaned


class AccountResponse(BaseModel):
    """Account as shown to its owner"""

    model_config = ConfigDict(from_attributes=True)

    username: str
    name: str
    phone: str | None = None
    created_at: datetime
    updated_at: datetime
