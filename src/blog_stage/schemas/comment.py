"""Comment-related Pydantic schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .profile import AuthorSummary

COMMENT_MAX_LENGTH = 2000


def _check_body(value: str) -> str:
    if not value.strip():
        raise ValueError("Comment is required")
    if len(value) > COMMENT_MAX_LENGTH:
        raise ValueError("Comment must be less than 2000 characters")
    return value


class CommentCreate(BaseModel):
    """Schema for posting a comment or a reply."""

    body: str = Field(..., description="Comment text (1-2000 characters)")
    parent_id: str | None = Field(None, description="Comment being replied to")

    @field_validator("body")
    @classmethod
    def _body(cls, value: str) -> str:
        return _check_body(value)


class CommentUpdate(BaseModel):
    """Schema for editing a comment."""

    body: str

    @field_validator("body")
    @classmethod
    def _body(cls, value: str) -> str:
        return _check_body(value)


class CommentResponse(BaseModel):
    """A comment with its author and nested replies."""

    id: str
    post_id: str
    author_id: str
    body: str
    parent_id: str | None = None
    status: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    author: AuthorSummary | None = None
    replies: list[CommentResponse] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class CommentThreadResponse(BaseModel):
    """Threaded comments of a post."""

    post_id: str
    count: int = Field(..., ge=0, description="Number of approved comments loaded")
    comments: list[CommentResponse]
