"""Profile-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import optional_url


class ProfileUpdate(BaseModel):
    """Editable profile fields; empty strings clear a field."""

    display_name: str | None = Field(None, description="Public display name (max 100)")
    bio: str | None = Field(None, description="Short biography (max 500)")
    avatar_url: str | None = Field(None, description="Absolute URL of the avatar image")
    website: str | None = Field(None, description="Personal website")

    @field_validator("display_name")
    @classmethod
    def _display_name_length(cls, value: str | None) -> str | None:
        if value is not None and len(value) > 100:
            raise ValueError("Name must be less than 100 characters")
        return value

    @field_validator("bio")
    @classmethod
    def _bio_length(cls, value: str | None) -> str | None:
        if value is not None and len(value) > 500:
            raise ValueError("Bio must be less than 500 characters")
        return value

    @field_validator("avatar_url", "website")
    @classmethod
    def _valid_url(cls, value: str | None) -> str | None:
        return optional_url(value)


class AuthorSummary(BaseModel):
    """Author details shown next to posts and comments."""

    id: str
    display_name: str | None = None
    avatar_url: str | None = None

    model_config = ConfigDict(extra="ignore")


class ProfileResponse(BaseModel):
    """Profile information returned by the API."""

    id: str
    display_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    website: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    is_default: bool = Field(
        False, description="True when no profile row exists yet and defaults were derived"
    )

    model_config = ConfigDict(extra="ignore")
