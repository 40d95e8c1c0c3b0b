"""Tests for the GraphQL executor against an in-memory backend."""

import json
import time

import httpx
import pytest

from blog_stage.graphql import mutations, queries
from blog_stage.services.cache import QueryCache
from blog_stage.services.graphql_client import GraphQLClient
from blog_stage.services.http import (
    BackendUnavailableError,
    GraphQLError,
    SupabaseHTTP,
    load_backend_config,
)


class Backend:
    """Answers GraphQL requests and records what it received."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status = 200
        self.payload: object = {"data": {"postsCollection": {"edges": []}}}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.payload, str):
            return httpx.Response(self.status, text=self.payload)
        return httpx.Response(self.status, json=self.payload)

    def body(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].content)


@pytest.fixture
def backend() -> Backend:
    return Backend()


@pytest.fixture
def client(backend: Backend) -> GraphQLClient:
    http = SupabaseHTTP(load_backend_config(), transport=httpx.MockTransport(backend))
    return GraphQLClient(http=http, cache=QueryCache(ttl_seconds=60))


@pytest.mark.asyncio
async def test_sends_operation_with_anon_key(client: GraphQLClient, backend: Backend) -> None:
    data = await client.execute(queries.GET_TAGS)

    assert data == {"postsCollection": {"edges": []}}
    request = backend.requests[0]
    assert request.url.path == "/graphql/v1"
    assert request.headers["apikey"] == "anon-key"
    assert request.headers["Authorization"] == "Bearer anon-key"
    body = backend.body()
    assert body["operationName"] == "GetTags"
    assert body["variables"] == {}


@pytest.mark.asyncio
async def test_user_token_forwarded(client: GraphQLClient, backend: Backend) -> None:
    await client.execute(queries.GET_POST_BY_ID, {"id": "p1"}, access_token="user-token")

    request = backend.requests[0]
    assert request.headers["Authorization"] == "Bearer user-token"
    assert request.headers["apikey"] == "anon-key"


@pytest.mark.asyncio
async def test_anonymous_reads_are_cached(client: GraphQLClient, backend: Backend) -> None:
    first = await client.execute(queries.GET_TAGS)
    first["mutated"] = True
    second = await client.execute(queries.GET_TAGS)

    assert len(backend.requests) == 1
    assert "mutated" not in second


@pytest.mark.asyncio
async def test_authenticated_reads_bypass_cache(client: GraphQLClient, backend: Backend) -> None:
    await client.execute(queries.GET_TAGS, access_token="user-token")
    await client.execute(queries.GET_TAGS, access_token="user-token")

    assert len(backend.requests) == 2
    assert len(client.cache) == 0


@pytest.mark.asyncio
async def test_mutation_evicts_cached_reads(client: GraphQLClient, backend: Backend) -> None:
    await client.execute(queries.GET_POSTS_WITH_OFFSET, {"first": 6, "offset": 0})
    await client.execute(queries.GET_TAGS)
    assert len(client.cache) == 2

    backend.payload = {"data": {"deleteFrompostsCollection": {"records": [{"id": "p1"}]}}}
    await client.execute(mutations.DELETE_POST, {"id": "p1"}, access_token="user-token")

    assert len(client.cache) == 1
    await client.execute(queries.GET_POSTS_WITH_OFFSET, {"first": 6, "offset": 0})
    assert len(backend.requests) == 4


@pytest.mark.asyncio
async def test_graphql_errors_raise(client: GraphQLClient, backend: Backend) -> None:
    backend.payload = {"data": None, "errors": [{"message": "permission denied for table posts"}]}

    with pytest.raises(GraphQLError, match="permission denied") as excinfo:
        await client.execute(queries.GET_TAGS)

    assert excinfo.value.errors == [{"message": "permission denied for table posts"}]
    assert len(client.cache) == 0


@pytest.mark.asyncio
async def test_client_error_status_raises(client: GraphQLClient, backend: Backend) -> None:
    backend.status = 401
    backend.payload = {"message": "Invalid API key"}

    with pytest.raises(GraphQLError, match="Invalid API key"):
        await client.execute(queries.GET_TAGS)


@pytest.mark.asyncio
async def test_non_json_response(client: GraphQLClient, backend: Backend) -> None:
    backend.payload = "<html>gateway</html>"

    with pytest.raises(GraphQLError, match="invalid response"):
        await client.execute(queries.GET_TAGS)


@pytest.mark.asyncio
async def test_json_array_response(client: GraphQLClient, backend: Backend) -> None:
    backend.payload = [{"data": {}}]

    with pytest.raises(GraphQLError, match="unexpected response"):
        await client.execute(queries.GET_TAGS)


@pytest.mark.asyncio
async def test_plain_string_errors(client: GraphQLClient, backend: Backend) -> None:
    backend.payload = {"errors": ["relation does not exist"]}

    with pytest.raises(GraphQLError, match="relation does not exist") as excinfo:
        await client.execute(queries.GET_TAGS)

    assert excinfo.value.errors == [{"message": "relation does not exist"}]


@pytest.mark.asyncio
async def test_non_object_data(client: GraphQLClient, backend: Backend) -> None:
    backend.payload = {"data": ["postsCollection"]}

    with pytest.raises(GraphQLError, match="unexpected data"):
        await client.execute(queries.GET_TAGS)
    assert len(client.cache) == 0


@pytest.mark.asyncio
async def test_server_error_is_unavailable(client: GraphQLClient, backend: Backend) -> None:
    backend.status = 502

    with pytest.raises(BackendUnavailableError):
        await client.execute(queries.GET_TAGS)


@pytest.mark.asyncio
async def test_circuit_opens_after_repeated_failures(backend: Backend) -> None:
    config = load_backend_config()
    http = SupabaseHTTP(config, transport=httpx.MockTransport(backend))
    client = GraphQLClient(http=http, cache=QueryCache(ttl_seconds=0))
    backend.status = 500

    for _ in range(config.failure_threshold):
        with pytest.raises(BackendUnavailableError):
            await client.execute(queries.GET_TAGS)
    sent = len(backend.requests)

    with pytest.raises(BackendUnavailableError, match="circuit breaker is open"):
        await client.execute(queries.GET_TAGS)
    assert len(backend.requests) == sent
    assert http.get_metrics()["error_count"] == config.failure_threshold


@pytest.mark.asyncio
async def test_circuit_recovers_after_timeout(backend: Backend, mocker) -> None:
    config = load_backend_config()
    http = SupabaseHTTP(config, transport=httpx.MockTransport(backend))
    client = GraphQLClient(http=http, cache=QueryCache(ttl_seconds=0))
    backend.status = 500
    for _ in range(config.failure_threshold):
        with pytest.raises(BackendUnavailableError):
            await client.execute(queries.GET_TAGS)

    later = time.time() + config.recovery_timeout + 1
    mocker.patch("blog_stage.services.http.time.time", return_value=later)
    backend.status = 200

    for _ in range(config.success_threshold):
        assert await client.execute(queries.GET_TAGS) == backend.payload["data"]

    health = await http.health_check()
    assert health["circuit_breaker"]["state"] == "closed"
    assert health["circuit_breaker"]["failure_count"] == 0


@pytest.mark.asyncio
async def test_network_failure_is_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    http = SupabaseHTTP(load_backend_config(), transport=httpx.MockTransport(handler))
    client = GraphQLClient(http=http, cache=QueryCache(ttl_seconds=60))

    with pytest.raises(BackendUnavailableError):
        await client.execute(queries.GET_TAGS)
    assert http.get_metrics()["error_counts_by_type"] == {"network_error": 1}
