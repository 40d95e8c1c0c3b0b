"""Per-user notifications.

Every call runs with the caller's access token; row-level security limits
reads and writes to the caller's own notifications.
"""

from __future__ import annotations

from typing import Any

from blog_stage.core.settings import settings
from blog_stage.graphql import edge_count, first_record, mutations, nodes, page_info, queries
from blog_stage.services.graphql_client import GraphQLClient

BADGE_LIMIT = 9


def badge_label(count: int) -> str:
    """Text for the unread badge: empty when zero, capped at ``9+``."""
    if count <= 0:
        return ""
    if count > BADGE_LIMIT:
        return f"{BADGE_LIMIT}+"
    return str(count)


def target_path(notification: dict[str, Any]) -> str | None:
    """Site path a notification links to, if its payload names a post."""
    data = notification.get("data")
    if isinstance(data, dict) and data.get("post_id"):
        return f"/posts/{data['post_id']}"
    return None


class NotificationService:
    def __init__(self, client: GraphQLClient, access_token: str) -> None:
        self.client = client
        self.access_token = access_token

    async def list_notifications(
        self,
        first: int | None = None,
        offset: int = 0,
    ) -> tuple[list[dict[str, Any]], bool]:
        data = await self.client.execute(
            queries.GET_NOTIFICATIONS,
            {"first": first or settings.notifications_page_size, "offset": max(offset, 0)},
            access_token=self.access_token,
        )
        connection = data.get("notificationsCollection")
        items = [{**item, "target_path": target_path(item)} for item in nodes(connection)]
        return items, bool(page_info(connection).get("hasNextPage"))

    async def unread_count(self) -> int:
        data = await self.client.execute(
            queries.GET_UNREAD_NOTIFICATION_COUNT,
            access_token=self.access_token,
        )
        return edge_count(data.get("notificationsCollection"))

    async def mark_read(self, notification_id: str) -> bool:
        result = await self.client.execute(
            mutations.MARK_NOTIFICATION_READ,
            {"id": notification_id},
            access_token=self.access_token,
        )
        return first_record(result, "updatenotificationsCollection") is not None

    async def mark_all_read(self, user_id: str) -> int:
        """Mark every unread notification of ``user_id`` read; returns the count."""
        result = await self.client.execute(
            mutations.MARK_ALL_NOTIFICATIONS_READ,
            {"user_id": user_id},
            access_token=self.access_token,
        )
        payload = result.get("updatenotificationsCollection") or {}
        affected = payload.get("affectedCount")
        if affected is None:
            affected = len(payload.get("records") or [])
        return int(affected)

    async def delete_notification(self, notification_id: str) -> bool:
        result = await self.client.execute(
            mutations.DELETE_NOTIFICATION,
            {"id": notification_id},
            access_token=self.access_token,
        )
        return first_record(result, "deleteFromnotificationsCollection") is not None
