"""Comment listing, threading and moderation-free CRUD."""

from __future__ import annotations

import logging
from typing import Any

from blog_stage.core.security import AuthUser
from blog_stage.core.settings import settings
from blog_stage.graphql import edge_count, first_node, first_record, mutations, nodes, queries
from blog_stage.services.exceptions import EntityNotFoundError, OwnershipError
from blog_stage.services.graphql_client import GraphQLClient
from blog_stage.services.http import GraphQLError
from blog_stage.services.profiles import ProfileService

logger = logging.getLogger(__name__)


def build_thread(comments: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Nest replies under their parent comment.

    Input order is preserved at every level. A reply whose parent is not in
    ``comments``, or whose parent chain loops back to itself, is promoted to a
    root so it is never lost.
    """
    by_id: dict[str, dict[str, Any]] = {}
    for comment in comments:
        by_id[comment["id"]] = {**comment, "replies": []}

    attached: dict[str, str] = {}

    def reaches(start: str, target: str) -> bool:
        seen: set[str] = set()
        current: str | None = start
        while current is not None and current not in seen:
            if current == target:
                return True
            seen.add(current)
            current = attached.get(current)
        return False

    roots: list[dict[str, Any]] = []
    for comment in comments:
        node = by_id[comment["id"]]
        parent_id = comment.get("parent_id")
        parent = by_id.get(parent_id) if parent_id else None
        if parent is None or reaches(parent_id, comment["id"]):
            roots.append(node)
        else:
            attached[comment["id"]] = parent_id
            parent["replies"].append(node)
    return roots


class CommentService:
    """Read and write ``comments`` rows on behalf of a caller."""

    def __init__(self, client: GraphQLClient, access_token: str | None = None) -> None:
        self.client = client
        self.access_token = access_token

    async def list_comments(self, post_id: str) -> list[dict[str, Any]]:
        """Return approved comments oldest first, each with its ``author``."""
        data = await self.client.execute(
            queries.GET_COMMENTS,
            {"postId": post_id, "first": settings.comments_page_size, "offset": 0},
        )
        comments = nodes(data.get("commentsCollection"))
        profiles = await ProfileService(self.client).get_profiles(
            comment["author_id"] for comment in comments
        )
        return [
            {**comment, "author": profiles.get(comment["author_id"])}
            for comment in comments
        ]

    async def count(self, post_id: str) -> int:
        data = await self.client.execute(queries.GET_COMMENT_COUNT, {"postId": post_id})
        return edge_count(data.get("commentsCollection"))

    async def get_comment(self, comment_id: str) -> dict[str, Any] | None:
        try:
            data = await self.client.execute(
                queries.GET_COMMENT_BY_ID,
                {"id": comment_id},
                access_token=self.access_token,
            )
        except GraphQLError as err:
            logger.warning("Comment lookup %r failed: %s", comment_id, err)
            return None
        return first_node(data.get("commentsCollection"))

    async def create_comment(
        self,
        post_id: str,
        author_id: str,
        body: str,
        parent_id: str | None = None,
    ) -> dict[str, Any]:
        result = await self.client.execute(
            mutations.CREATE_COMMENT,
            {
                "post_id": post_id,
                "author_id": author_id,
                "body": body,
                "parent_id": parent_id,
            },
            access_token=self.access_token,
        )
        comment = first_record(result, "insertIntocommentsCollection")
        if comment is None:
            raise GraphQLError("Comment was not created")
        logger.info("Comment %s added to post %s", comment.get("id"), post_id)
        return comment

    async def _require_owned(self, comment_id: str, user: AuthUser) -> dict[str, Any]:
        comment = await self.get_comment(comment_id)
        if comment is None:
            raise EntityNotFoundError("Comment", comment_id)
        if comment.get("author_id") != user.id:
            raise OwnershipError("Comment")
        return comment

    async def update_comment(self, comment_id: str, user: AuthUser, body: str) -> dict[str, Any]:
        await self._require_owned(comment_id, user)
        result = await self.client.execute(
            mutations.UPDATE_COMMENT,
            {"id": comment_id, "body": body},
            access_token=self.access_token,
        )
        comment = first_record(result, "updatecommentsCollection")
        if comment is None:
            raise EntityNotFoundError("Comment", comment_id)
        return comment

    async def delete_comment(self, comment_id: str, user: AuthUser) -> None:
        await self._require_owned(comment_id, user)
        await self.client.execute(
            mutations.DELETE_COMMENT,
            {"id": comment_id},
            access_token=self.access_token,
        )
