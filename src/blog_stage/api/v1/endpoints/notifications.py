"""Notification endpoints for the Blog Stage API."""

import asyncio
from typing import Any

from fastapi import APIRouter, HTTPException, Query, status

from blog_stage.api.v1.dependencies import (
    CurrentSessionDep,
    NotificationServiceDep,
    service_errors,
)
from blog_stage.schemas.notification import (
    MarkAllReadResponse,
    NotificationListResponse,
    UnreadCountResponse,
)
from blog_stage.services.notifications import badge_label

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=NotificationListResponse)
async def list_notifications(
    notifications: NotificationServiceDep,
    limit: int | None = Query(None, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> dict[str, Any]:
    """List the caller's notifications, newest first, with the unread badge."""
    with service_errors():
        (items, has_more), unread = await asyncio.gather(
            notifications.list_notifications(limit, offset),
            notifications.unread_count(),
        )
    return {
        "notifications": items,
        "unread_count": unread,
        "badge": badge_label(unread),
        "has_more": has_more,
    }


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(notifications: NotificationServiceDep) -> dict[str, Any]:
    """Return the number of unread notifications."""
    with service_errors():
        count = await notifications.unread_count()
    return {"unread_count": count, "badge": badge_label(count)}


@router.post("/read-all", response_model=MarkAllReadResponse)
async def mark_all_read(
    notifications: NotificationServiceDep,
    session: CurrentSessionDep,
) -> dict[str, int]:
    """Mark every unread notification as read."""
    with service_errors():
        updated = await notifications.mark_all_read(session.user.id)
    return {"updated": updated}


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_read(notification_id: str, notifications: NotificationServiceDep) -> None:
    """Mark a notification as read."""
    with service_errors():
        found = await notifications.mark_read(notification_id)
    if not found:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found",
        )


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: str,
    notifications: NotificationServiceDep,
) -> None:
    """Delete a notification."""
    with service_errors():
        found = await notifications.delete_notification(notification_id)
    if not found:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found",
        )
