"""GraphQL executor for the hosted pg_graphql endpoint."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any

from blog_stage.core.settings import settings
from blog_stage.graphql.operation import Operation
from blog_stage.services.cache import QueryCache, cache_key
from blog_stage.services.http import GraphQLError, SupabaseHTTP, get_supabase_http

logger = logging.getLogger(__name__)

GRAPHQL_PATH = "/graphql/v1"


class GraphQLClient:
    """Execute operations with per-user credentials and a shared read cache.

    Reads made with the anonymous key are cached for the revalidation window;
    reads made with a user token bypass the cache because row-level security
    makes their results user-specific. A successful mutation evicts every
    cached read of the collections it writes.
    """

    def __init__(
        self,
        http: SupabaseHTTP | None = None,
        cache: QueryCache | None = None,
    ) -> None:
        self.http = http or get_supabase_http()
        if cache is None:
            cache = QueryCache(
                ttl_seconds=settings.revalidate_seconds,
                max_entries=settings.query_cache_max_entries,
            )
        self.cache = cache

    async def execute(
        self,
        operation: Operation,
        variables: Mapping[str, Any] | None = None,
        *,
        access_token: str | None = None,
    ) -> dict[str, Any]:
        """Run ``operation`` and return its ``data`` object.

        Args:
            operation: The query or mutation to run.
            variables: GraphQL variables; ``None`` values are sent as ``null``.
            access_token: The caller's access token, or ``None`` for anonymous access.

        Raises:
            GraphQLError: If the backend rejects the request or reports errors.
            BackendUnavailableError: If the backend cannot be reached.
        """
        cacheable = not operation.is_mutation and access_token is None
        key = cache_key(operation.name, variables)
        if cacheable:
            cached = self.cache.get(key)
            if cached is not None:
                return copy.deepcopy(cached)

        response = await self.http.request(
            "POST",
            GRAPHQL_PATH,
            json_data={
                "query": operation.document,
                "variables": dict(variables or {}),
                "operationName": operation.name,
            },
            access_token=access_token,
        )

        try:
            payload = response.json()
        except ValueError as err:
            raise GraphQLError(
                f"{operation.name}: invalid response ({response.status_code})"
            ) from err

        if not isinstance(payload, dict):
            raise GraphQLError(
                f"{operation.name}: unexpected response ({response.status_code})"
            )

        errors = payload.get("errors")
        if errors:
            if not isinstance(errors, list):
                errors = [errors]
            errors = [err if isinstance(err, dict) else {"message": str(err)} for err in errors]
            message = errors[0].get("message") or "GraphQL request failed"
            logger.warning("%s failed: %s", operation.name, message)
            raise GraphQLError(str(message), errors)
        if response.status_code >= 400:
            message = payload.get("message")
            raise GraphQLError(message or f"GraphQL request failed ({response.status_code})")

        data = payload.get("data")
        if data is None:
            data = {}
        elif not isinstance(data, dict):
            raise GraphQLError(f"{operation.name}: unexpected data ({type(data).__name__})")

        if operation.is_mutation:
            for collection in operation.collections:
                self.cache.evict(collection)
        elif cacheable:
            self.cache.set(key, copy.deepcopy(data), operation.collections)

        return data


class _GraphQLClientSingleton:
    """Singleton wrapper for GraphQLClient."""

    _instance: GraphQLClient | None = None

    @classmethod
    def get_instance(cls) -> GraphQLClient:
        if cls._instance is None:
            cls._instance = GraphQLClient()
        return cls._instance


def get_graphql_client() -> GraphQLClient:
    """Return the process-wide GraphQL client."""
    return _GraphQLClientSingleton.get_instance()
