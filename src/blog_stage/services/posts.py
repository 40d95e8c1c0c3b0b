"""Post listing, search, detail enrichment and author-only writes."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from blog_stage.core.security import AuthUser
from blog_stage.core.settings import settings
from blog_stage.graphql import edge_count, first_node, first_record, mutations, nodes, page_info, queries
from blog_stage.schemas.common import blank_to_none
from blog_stage.schemas.post import PostCreate, PostUpdate
from blog_stage.services.comments import CommentService
from blog_stage.services.exceptions import EntityNotFoundError, OwnershipError
from blog_stage.services.graphql_client import GraphQLClient
from blog_stage.services.http import GraphQLError
from blog_stage.services.pagination import PageWindow, parse_page
from blog_stage.services.profiles import ProfileService
from blog_stage.services.tags import TagService
from blog_stage.utils.text import extract_excerpt, reading_time_minutes

logger = logging.getLogger(__name__)

NEWEST_FIRST = [{"created_at": "DescNullsLast"}]
SUMMARY_LENGTH = 160
EDITABLE_FIELDS = ("title", "body", "excerpt", "featured_image", "status")
NULLABLE_FIELDS = frozenset({"excerpt", "featured_image"})


@dataclass
class PostPage:
    posts: list[dict[str, Any]]
    window: PageWindow


@dataclass
class SearchResult:
    query: str
    posts: list[dict[str, Any]] = field(default_factory=list)
    has_more: bool = False


class PostService:
    """Read and write ``posts`` rows on behalf of a caller.

    Public listings run with the anonymous key so they are served from the
    shared read cache. Single-post reads and writes use the caller's token so
    that authors can see and change their own drafts.
    """

    def __init__(self, client: GraphQLClient, access_token: str | None = None) -> None:
        self.client = client
        self.access_token = access_token

    async def list_published(self, page: Any = 1) -> PostPage:
        """Return one page of published posts, newest first."""
        per_page = settings.posts_per_page
        page = parse_page(page)
        data = await self.client.execute(
            queries.GET_POSTS_WITH_OFFSET,
            {"first": per_page, "offset": (page - 1) * per_page, "orderBy": NEWEST_FIRST},
        )
        connection = data.get("postsCollection")
        posts = nodes(connection)
        # A missing or empty count alias falls back to what was returned.
        total = edge_count(data.get("postsCount")) or len(posts)
        info = page_info(connection)
        window = PageWindow(
            page=page,
            per_page=per_page,
            total_count=total,
            has_next_hint=info.get("hasNextPage"),
            has_previous_hint=info.get("hasPreviousPage"),
        )
        return PostPage(posts=posts, window=window)

    async def get_post(self, post_id: str) -> dict[str, Any] | None:
        """Return the post, or ``None`` if it is missing, hidden or ``post_id`` is malformed."""
        try:
            data = await self.client.execute(
                queries.GET_POST_BY_ID,
                {"id": post_id},
                access_token=self.access_token,
            )
        except GraphQLError as err:
            logger.warning("Post lookup %r failed: %s", post_id, err)
            return None
        return first_node(data.get("postsCollection"))

    async def get_post_detail(self, post_id: str) -> dict[str, Any] | None:
        """Return a post with its author, tags, comment count and reading stats."""
        post = await self.get_post(post_id)
        if post is None:
            return None
        author, tags, comment_count = await asyncio.gather(
            ProfileService(self.client).get_profile(post["author_id"]),
            TagService(self.client).tags_for_post(post_id),
            CommentService(self.client).count(post_id),
        )
        return {
            **post,
            "summary": post.get("excerpt") or extract_excerpt(post.get("body"), SUMMARY_LENGTH),
            "reading_time_minutes": reading_time_minutes(post.get("body")),
            "comment_count": comment_count,
            "author": author,
            "tags": tags,
        }

    async def list_published_ids(self) -> list[dict[str, Any]]:
        """Return ``id``/``updated_at`` of every published post."""
        data = await self.client.execute(
            queries.GET_ALL_POST_IDS,
            {"first": settings.sitemap_max_posts},
        )
        return nodes(data.get("postsCollection"))

    async def list_by_author(
        self,
        author_id: str,
        first: int | None = None,
        offset: int = 0,
    ) -> tuple[list[dict[str, Any]], bool]:
        """Return an author's posts (drafts included) and whether more exist."""
        data = await self.client.execute(
            queries.GET_POSTS_BY_AUTHOR,
            {
                "authorId": author_id,
                "first": first or settings.author_posts_page_size,
                "offset": max(offset, 0),
            },
            access_token=self.access_token,
        )
        connection = data.get("postsCollection")
        return nodes(connection), bool(page_info(connection).get("hasNextPage"))

    async def search(self, query: str | None) -> SearchResult:
        """Case-insensitive substring search over published titles and bodies."""
        term = (query or "").strip()
        if not term:
            return SearchResult(query="")
        data = await self.client.execute(
            queries.SEARCH_POSTS,
            {"searchQuery": f"%{term}%", "first": settings.search_page_size, "offset": 0},
        )
        connection = data.get("postsCollection")
        return SearchResult(
            query=term,
            posts=nodes(connection),
            has_more=bool(page_info(connection).get("hasNextPage")),
        )

    async def create_post(self, author_id: str, data: PostCreate) -> dict[str, Any]:
        result = await self.client.execute(
            mutations.CREATE_POST,
            {
                "title": data.title,
                "body": data.body,
                "author_id": author_id,
                "excerpt": blank_to_none(data.excerpt),
                "featured_image": blank_to_none(data.featured_image),
                "status": data.status,
            },
            access_token=self.access_token,
        )
        post = first_record(result, "insertIntopostsCollection")
        if post is None:
            raise GraphQLError("Post was not created")
        logger.info("Post %s created by %s", post.get("id"), author_id)
        return post

    async def require_owned(self, post_id: str, user: AuthUser) -> dict[str, Any]:
        """Return the post if ``user`` wrote it.

        Raises:
            EntityNotFoundError: If the post does not exist or is not visible.
            OwnershipError: If another user wrote the post.
        """
        post = await self.get_post(post_id)
        if post is None:
            raise EntityNotFoundError("Post", post_id)
        if post.get("author_id") != user.id:
            raise OwnershipError("Post")
        return post

    async def update_post(self, post_id: str, user: AuthUser, data: PostUpdate) -> dict[str, Any]:
        """Apply a partial update; unspecified fields keep their stored value."""
        current = await self.require_owned(post_id, user)
        changes = data.model_dump(exclude_unset=True)
        merged: dict[str, Any] = {}
        for key in EDITABLE_FIELDS:
            if key in changes and (changes[key] is not None or key in NULLABLE_FIELDS):
                merged[key] = changes[key]
            else:
                merged[key] = current.get(key)
        merged["excerpt"] = blank_to_none(merged["excerpt"])
        merged["featured_image"] = blank_to_none(merged["featured_image"])
        result = await self.client.execute(
            mutations.UPDATE_POST,
            {"id": post_id, **merged},
            access_token=self.access_token,
        )
        post = first_record(result, "updatepostsCollection")
        if post is None:
            raise EntityNotFoundError("Post", post_id)
        return post

    async def delete_post(self, post_id: str, user: AuthUser) -> None:
        await self.require_owned(post_id, user)
        await self.client.execute(
            mutations.DELETE_POST,
            {"id": post_id},
            access_token=self.access_token,
        )
        logger.info("Post %s deleted by %s", post_id, user.id)
