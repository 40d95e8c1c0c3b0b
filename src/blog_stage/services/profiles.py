"""Profile lookups and updates."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from blog_stage.core.security import AuthUser
from blog_stage.graphql import first_node, first_record, mutations, nodes, queries
from blog_stage.schemas.common import blank_to_none
from blog_stage.schemas.profile import ProfileUpdate
from blog_stage.services.graphql_client import GraphQLClient

logger = logging.getLogger(__name__)


def default_profile(user: AuthUser) -> dict[str, Any]:
    """Derive a profile for a user who has not saved one yet."""
    metadata = user.user_metadata or {}
    return {
        "id": user.id,
        "display_name": metadata.get("full_name") or user.email_local_part,
        "bio": None,
        "avatar_url": metadata.get("avatar_url"),
        "website": None,
        "created_at": user.created_at,
        "updated_at": None,
        "is_default": True,
    }


def _profile_variables(profile_id: str, data: ProfileUpdate) -> dict[str, Any]:
    return {
        "id": profile_id,
        "display_name": blank_to_none(data.display_name),
        "bio": blank_to_none(data.bio),
        "avatar_url": blank_to_none(data.avatar_url),
        "website": blank_to_none(data.website),
    }


class ProfileService:
    """Read and write ``profiles`` rows on behalf of a caller."""

    def __init__(self, client: GraphQLClient, access_token: str | None = None) -> None:
        self.client = client
        self.access_token = access_token

    async def get_profile(self, profile_id: str) -> dict[str, Any] | None:
        data = await self.client.execute(queries.GET_PROFILE, {"id": profile_id})
        return first_node(data.get("profilesCollection"))

    async def get_profiles(self, profile_ids: Iterable[str]) -> dict[str, dict[str, Any]]:
        """Return profiles keyed by id, fetched in a single request.

        Duplicate and empty ids are dropped; no request is made when nothing
        remains.
        """
        unique_ids = list(dict.fromkeys(pid for pid in profile_ids if pid))
        if not unique_ids:
            return {}
        data = await self.client.execute(queries.GET_PROFILES_BY_IDS, {"ids": unique_ids})
        return {node["id"]: node for node in nodes(data.get("profilesCollection"))}

    async def get_or_default(self, user: AuthUser) -> dict[str, Any]:
        """Return the user's saved profile, or one derived from their account."""
        profile = await self.get_profile(user.id)
        if profile is None:
            return default_profile(user)
        return {**profile, "is_default": False}

    async def update_profile(self, profile_id: str, data: ProfileUpdate) -> dict[str, Any] | None:
        """Update an existing row; returns ``None`` when no row matched."""
        result = await self.client.execute(
            mutations.UPDATE_PROFILE,
            _profile_variables(profile_id, data),
            access_token=self.access_token,
        )
        return first_record(result, "updateprofilesCollection")

    async def create_profile(self, profile_id: str, data: ProfileUpdate) -> dict[str, Any] | None:
        result = await self.client.execute(
            mutations.CREATE_PROFILE,
            _profile_variables(profile_id, data),
            access_token=self.access_token,
        )
        return first_record(result, "insertIntoprofilesCollection")

    async def save_profile(self, profile_id: str, data: ProfileUpdate) -> dict[str, Any] | None:
        """Update the profile, creating it when the user has none yet."""
        profile = await self.update_profile(profile_id, data)
        if profile is None:
            logger.info("No profile row for %s; creating one", profile_id)
            profile = await self.create_profile(profile_id, data)
        return profile
