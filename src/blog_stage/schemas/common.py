"""Shared Pydantic schemas and validators for common API elements."""
from __future__ import annotations

from urllib.parse import urlsplit

from pydantic import BaseModel, Field

INVALID_URL_MESSAGE = "Must be a valid URL"


def optional_url(value: str | None) -> str | None:
    """Accept ``None``, an empty string, or an absolute http(s) URL."""
    if value is None or value == "":
        return value
    parts = urlsplit(value.strip())
    if parts.scheme not in {"http", "https"} or not parts.netloc:
        raise ValueError(INVALID_URL_MESSAGE)
    return value.strip()


def blank_to_none(value: str | None) -> str | None:
    """Return ``None`` for empty or whitespace-only strings."""
    if value is None or not value.strip():
        return None
    return value


class PageInfo(BaseModel):
    """Page-number pagination metadata returned by list endpoints."""

    page: int = Field(..., ge=1)
    per_page: int = Field(..., ge=1)
    total_count: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=0)
    has_next: bool
    has_previous: bool
    showing_from: int = Field(..., ge=0)
    showing_to: int = Field(..., ge=0)


class MessageResponse(BaseModel):
    """Plain acknowledgement message."""

    message: str
