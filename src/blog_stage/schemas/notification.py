"""Notification-related Pydantic schemas."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

NotificationType = Literal["new_comment", "new_post", "mention", "system"]


class NotificationResponse(BaseModel):
    """A single notification addressed to the current user."""

    id: str
    type: NotificationType | str
    title: str
    message: str | None = None
    read: bool = False
    data: dict[str, Any] | None = None
    created_at: str | None = None
    target_path: str | None = Field(None, description="Site path to open on click")

    model_config = ConfigDict(extra="ignore")


class NotificationListResponse(BaseModel):
    """A page of notifications plus the unread badge."""

    notifications: list[NotificationResponse]
    unread_count: int = Field(..., ge=0)
    badge: str
    has_more: bool = False


class UnreadCountResponse(BaseModel):
    """Unread notification count and its badge label."""

    unread_count: int = Field(..., ge=0)
    badge: str


class MarkAllReadResponse(BaseModel):
    """Number of notifications marked as read."""

    updated: int = Field(..., ge=0)
