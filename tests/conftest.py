# tests/conftest.py
from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from tests.support import OTHER_USER_ID, GraphQLStub, make_token

from blog_stage.api.v1.dependencies import get_auth_client_dep, get_graphql_client_dep
from blog_stage.core.settings import Settings, settings
from blog_stage.main import app as fastapi_app
from blog_stage.services.auth_client import AuthClient


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def graphql_stub(app: FastAPI) -> Iterator[GraphQLStub]:
    stub = GraphQLStub()
    app.dependency_overrides[get_graphql_client_dep] = lambda: stub
    try:
        yield stub
    finally:
        app.dependency_overrides.pop(get_graphql_client_dep, None)


@pytest.fixture()
def auth_stub(app: FastAPI, mocker) -> Iterator[AsyncMock]:
    stub = mocker.AsyncMock(spec=AuthClient)
    # URL building is synchronous.
    stub.oauth_authorize_url = mocker.MagicMock(
        return_value="https://project.supabase.test/auth/v1/authorize?provider=google"
    )
    app.dependency_overrides[get_auth_client_dep] = lambda: stub
    try:
        yield stub
    finally:
        app.dependency_overrides.pop(get_auth_client_dep, None)


@pytest.fixture()
def client(app: FastAPI, graphql_stub: GraphQLStub, auth_stub: AsyncMock) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture()
def other_auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(OTHER_USER_ID, 'reader@example.com')}"}


@pytest.fixture()
def stub_client() -> GraphQLStub:
    """A GraphQL stub for service-level tests (no app involved)."""
    return GraphQLStub()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Provide the Settings instance the application was loaded with."""
    return settings
