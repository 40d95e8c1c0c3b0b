"""Tests for TagService."""

import pytest

from tests.support import POST_ID, GraphQLStub

from blog_stage.graphql import mutations
from blog_stage.services.http import GraphQLError
from blog_stage.services.tags import TagService


@pytest.mark.asyncio
async def test_explicit_slug_is_normalized(stub_client: GraphQLStub) -> None:
    stub_client.on(
        mutations.CREATE_TAG,
        lambda variables: {"insertIntotagsCollection": {"records": [{"id": "t1", **variables}]}},
    )

    tag = await TagService(stub_client, "user-token").create_tag("Web Dev", "Web Development!")

    assert tag["slug"] == "web-development"


@pytest.mark.asyncio
async def test_empty_slug_rejected(stub_client: GraphQLStub) -> None:
    with pytest.raises(ValueError):
        await TagService(stub_client, "user-token").create_tag("???")
    assert stub_client.calls == []


@pytest.mark.asyncio
async def test_duplicate_tag(stub_client: GraphQLStub) -> None:
    stub_client.on(
        mutations.CREATE_TAG,
        GraphQLError('duplicate key value violates unique constraint "tags_slug_key"'),
    )

    with pytest.raises(GraphQLError, match="duplicate key"):
        await TagService(stub_client, "user-token").create_tag("Python")


@pytest.mark.asyncio
async def test_remove_reports_whether_link_existed(stub_client: GraphQLStub) -> None:
    service = TagService(stub_client, "user-token")

    assert await service.remove_tag_from_post(POST_ID, "t1") is False

    stub_client.on(
        mutations.REMOVE_TAG_FROM_POST,
        {"deleteFrompost_tagsCollection": {"records": [{"post_id": POST_ID, "tag_id": "t1"}]}},
    )
    assert await service.remove_tag_from_post(POST_ID, "t1") is True
