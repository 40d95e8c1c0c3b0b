"""Tag listing, creation and post tagging."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from blog_stage.core.settings import settings
from blog_stage.graphql import first_node, first_record, mutations, nodes, queries
from blog_stage.services.graphql_client import GraphQLClient
from blog_stage.services.http import GraphQLError
from blog_stage.utils.text import slugify


@dataclass
class TaggedPosts:
    """A tag and the published posts carrying it."""

    tag: dict[str, Any]
    posts: list[dict[str, Any]]


class TagService:
    """Manage ``tags`` and the ``post_tags`` join table."""

    def __init__(self, client: GraphQLClient, access_token: str | None = None) -> None:
        self.client = client
        self.access_token = access_token

    async def list_tags(self) -> list[dict[str, Any]]:
        data = await self.client.execute(queries.GET_TAGS)
        return nodes(data.get("tagsCollection"))

    async def tags_for_post(self, post_id: str) -> list[dict[str, Any]]:
        data = await self.client.execute(queries.GET_POST_TAGS, {"postId": post_id})
        return [
            node["tags"]
            for node in nodes(data.get("post_tagsCollection"))
            if node.get("tags")
        ]

    async def create_tag(self, name: str, slug: str | None = None) -> dict[str, Any]:
        slug = slugify(slug or name)
        if not slug:
            raise ValueError("Tag name must contain letters or digits")
        result = await self.client.execute(
            mutations.CREATE_TAG,
            {"name": name, "slug": slug},
            access_token=self.access_token,
        )
        tag = first_record(result, "insertIntotagsCollection")
        if tag is None:
            raise GraphQLError("Tag was not created")
        return tag

    async def add_tag_to_post(self, post_id: str, tag_id: str) -> dict[str, Any] | None:
        result = await self.client.execute(
            mutations.ADD_TAG_TO_POST,
            {"post_id": post_id, "tag_id": tag_id},
            access_token=self.access_token,
        )
        return first_record(result, "insertIntopost_tagsCollection")

    async def remove_tag_from_post(self, post_id: str, tag_id: str) -> bool:
        result = await self.client.execute(
            mutations.REMOVE_TAG_FROM_POST,
            {"post_id": post_id, "tag_id": tag_id},
            access_token=self.access_token,
        )
        return first_record(result, "deleteFrompost_tagsCollection") is not None

    async def posts_by_tag(self, slug: str) -> TaggedPosts | None:
        """Return the tag with ``slug`` and its published posts, or ``None``."""
        data = await self.client.execute(queries.GET_POSTS_BY_TAG, {"tagSlug": slug})
        tag = first_node(data.get("tagsCollection"))
        if tag is None:
            return None
        post_ids = [
            link["post_id"]
            for link in nodes(tag.pop("post_tagsCollection", None))
            if link.get("post_id")
        ]
        if not post_ids:
            return TaggedPosts(tag=tag, posts=[])
        posts_data = await self.client.execute(
            queries.GET_POSTS_BY_IDS,
            {"ids": post_ids, "first": min(len(post_ids), settings.sitemap_max_posts)},
        )
        return TaggedPosts(tag=tag, posts=nodes(posts_data.get("postsCollection")))
