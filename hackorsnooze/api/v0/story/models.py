from datetime import datetime
from urllib.parse import urlparse
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from hackorsnooze.api.v0.auth.models import clean_text


# Stories link out to web pages only; javascript: and data: URLs are refused
ALLOWED_URL_SCHEMES = {"http", "https"}


def validate_story_url(url: str) -> str:
    parsed = urlparse(url.strip())
    if parsed.scheme.lower() not in ALLOWED_URL_SCHEMES or not parsed.netloc:
        raise ValueError("url must be an absolute http:// or https:// URL")
    return url.strip()


class StoryCreate(BaseModel):
    """Request schema for posting a story"""

    title: str = Field(..., min_length=1, max_length=512)
    url: str = Field(..., max_length=2048)

    @field_validator("title")
    @classmethod
    def sanitize_title(cls, v: str) -> str:
        cleaned = clean_text(v)
        if not cleaned:
            raise ValueError("Title cannot be empty")
        return cleaned

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return validate_story_url(v)


class StoryUpdate(BaseModel):
    """Request schema for editing a story; at least one field"""

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(None, min_length=1, max_length=512)
    url: str | None = Field(None, max_length=2048)

    @field_validator("title")
    @classmethod
    def sanitize_title(cls, v: str | None) -> str | None:
        if v is None:
            raise ValueError("Title cannot be null")
        cleaned = clean_text(v)
        if not cleaned:
            raise ValueError("Title cannot be empty")
        return cleaned

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str | None) -> str | None:
        if v is None:
            raise ValueError("url cannot be null")
        return validate_story_url(v)

    @model_validator(mode="after")
    def require_a_field(self) -> "StoryUpdate":
        if not self.model_fields_set:
            raise ValueError("Provide at least one of: title, url")
        return self


class StoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    story_id: int
    title: str
    url: str
    author: str
    username: str
    created_at: datetime
    updated_at: datetime
