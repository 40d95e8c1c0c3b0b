"""Tag-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TagCreate(BaseModel):
    """Schema for creating a tag; the slug is derived from the name when omitted."""

    name: str = Field(..., min_length=1, max_length=50, description="Display name")
    slug: str | None = Field(None, max_length=60, description="URL slug")

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Tag name is required")
        return value


class TagResponse(BaseModel):
    """Tag information returned by the API."""

    id: str
    name: str
    slug: str

    model_config = ConfigDict(extra="ignore")


class PostTagLink(BaseModel):
    """Request body attaching an existing tag to a post."""

    tag_id: str = Field(..., description="Identifier of the tag to attach")
