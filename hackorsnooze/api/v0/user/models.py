from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from hackorsnooze.api.v0.auth.models import clean_text
from hackorsnooze.api.v0.story.models import StoryResponse


class AccountUpdate(BaseModel):
    """Request schema for PATCH /users/{username}; at least one field"""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=256)
    password: str | None = Field(None, min_length=6, max_length=128)
    # null removes the phone number
    phone: str | None = Field(None, max_length=32)

    @field_validator("name")
    @classmethod
    def sanitize_name(cls, v: str | None) -> str | None:
        if v is None:
            raise ValueError("Name cannot be null")
        cleaned = clean_text(v)
        if not cleaned:
            raise ValueError("Name cannot be empty")
        return cleaned

    @field_validator("password")
    @classmethod
    def password_not_null(cls, v: str | None) -> str | None:
        if v is None:
            raise ValueError("Password cannot be null")
        return v

    @model_validator(mode="after")
    def require_a_field(self) -> "AccountUpdate":
        if not self.model_fields_set:
            raise ValueError("Provide at least one of: name, password, phone")
        return self


class PublicAccountResponse(BaseModel):
    """Account as shown to everyone; the phone number stays private"""

    model_config = ConfigDict(from_attributes=True)

    username: str
    name: str
    created_at: datetime
    updated_at: datetime


class AccountDetailResponse(PublicAccountResponse):
    stories: list[StoryResponse] = []
    favorites: list[StoryResponse] = []


class RecoveryRedeemRequest(BaseModel):
    code: str = Field(..., pattern=r"^\d{6}$")
    password: str = Field(..., min_length=6, max_length=128)


class MessageResponse(BaseModel):
    message: str


def get_detail_response(detail) -> AccountDetailResponse:
    """Convert an AccountDetail into its response schema"""
    user = PublicAccountResponse.model_validate(detail.user)
    return AccountDetailResponse(
        **user.model_dump(),
        stories=[StoryResponse.model_validate(story) for story in detail.stories],
        favorites=[StoryResponse.model_validate(story) for story in detail.favorites],
    )
