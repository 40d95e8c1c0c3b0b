"""Tests for ProfileService."""

import pytest

from tests.support import USER_ID, GraphQLStub

from blog_stage.core.security import AuthUser
from blog_stage.graphql import queries
from blog_stage.services.profiles import ProfileService, default_profile


def test_default_profile_from_email() -> None:
    profile = default_profile(AuthUser(id=USER_ID, email="ada@example.com"))

    assert profile["display_name"] == "ada"
    assert profile["avatar_url"] is None
    assert profile["is_default"] is True


def test_default_profile_from_metadata() -> None:
    user = AuthUser(
        id=USER_ID,
        email="ada@example.com",
        user_metadata={"full_name": "Ada Lovelace", "avatar_url": "https://cdn.example.com/a.png"},
    )

    profile = default_profile(user)

    assert profile["display_name"] == "Ada Lovelace"
    assert profile["avatar_url"] == "https://cdn.example.com/a.png"


@pytest.mark.asyncio
async def test_get_profiles_deduplicates(stub_client: GraphQLStub) -> None:
    await ProfileService(stub_client).get_profiles(["a", "b", "a", "", "b"])

    assert stub_client.called(queries.GET_PROFILES_BY_IDS)[0][0] == {"ids": ["a", "b"]}


@pytest.mark.asyncio
async def test_get_profiles_empty(stub_client: GraphQLStub) -> None:
    assert await ProfileService(stub_client).get_profiles([]) == {}
    assert stub_client.calls == []
