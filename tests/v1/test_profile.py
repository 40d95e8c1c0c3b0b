# tests/v1/test_profile.py
"""Tests for profile endpoints."""

from fastapi import status
from fastapi.testclient import TestClient

from tests.support import USER_ID, GraphQLStub, connection, make_token

from blog_stage.graphql import mutations, queries


class TestMyProfile:
    """Reading and saving the caller's own profile."""

    def test_requires_authentication(self, client: TestClient) -> None:
        response = client.get("/api/v1/profile/me")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_saved_profile(
        self, client: TestClient, graphql_stub: GraphQLStub, auth_headers: dict[str, str]
    ) -> None:
        graphql_stub.on(
            queries.GET_PROFILE,
            {"profilesCollection": connection(
                {"id": USER_ID, "display_name": "Writer", "bio": "Hello"}
            )},
        )

        response = client.get("/api/v1/profile/me", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["display_name"] == "Writer"
        assert data["is_default"] is False

    def test_default_profile_from_account(
        self, client: TestClient, graphql_stub: GraphQLStub
    ) -> None:
        graphql_stub.on(queries.GET_PROFILE, {"profilesCollection": connection()})
        token = make_token(user_metadata={"avatar_url": "https://cdn.example.com/a.png"})

        response = client.get("/api/v1/profile/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["id"] == USER_ID
        assert data["display_name"] == "writer"
        assert data["avatar_url"] == "https://cdn.example.com/a.png"
        assert data["is_default"] is True

    def test_default_profile_prefers_full_name(
        self, client: TestClient, graphql_stub: GraphQLStub
    ) -> None:
        token = make_token(user_metadata={"full_name": "Ada Lovelace"})

        response = client.get("/api/v1/profile/me", headers={"Authorization": f"Bearer {token}"})

        assert response.json()["display_name"] == "Ada Lovelace"

    def test_update_existing_profile(
        self, client: TestClient, graphql_stub: GraphQLStub, auth_headers: dict[str, str]
    ) -> None:
        graphql_stub.on(
            mutations.UPDATE_PROFILE,
            lambda variables: {"updateprofilesCollection": {"records": [variables]}},
        )

        response = client.put(
            "/api/v1/profile/me",
            json={"display_name": "New Name", "bio": "", "website": "https://example.com"},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["display_name"] == "New Name"
        variables, token = graphql_stub.called(mutations.UPDATE_PROFILE)[0]
        assert variables["id"] == USER_ID
        assert variables["bio"] is None
        assert token is not None
        assert graphql_stub.called(mutations.CREATE_PROFILE) == []

    def test_first_save_creates_profile(
        self, client: TestClient, graphql_stub: GraphQLStub, auth_headers: dict[str, str]
    ) -> None:
        graphql_stub.on(mutations.UPDATE_PROFILE, {"updateprofilesCollection": {"records": []}})
        graphql_stub.on(
            mutations.CREATE_PROFILE,
            lambda variables: {"insertIntoprofilesCollection": {"records": [variables]}},
        )

        response = client.put(
            "/api/v1/profile/me", json={"display_name": "First"}, headers=auth_headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["display_name"] == "First"
        assert len(graphql_stub.called(mutations.CREATE_PROFILE)) == 1

    def test_save_rejected_by_backend(
        self, client: TestClient, graphql_stub: GraphQLStub, auth_headers: dict[str, str]
    ) -> None:
        response = client.put(
            "/api/v1/profile/me", json={"display_name": "Nobody"}, headers=auth_headers
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Profile could not be saved"

    def test_validation_messages(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        response = client.put(
            "/api/v1/profile/me",
            json={"display_name": "x" * 101, "bio": "y" * 501, "avatar_url": "ftp://nope"},
            headers=auth_headers,
        )

        assert response.status_code == 422
        messages = " ".join(err["msg"] for err in response.json()["detail"])
        assert "Name must be less than 100 characters" in messages
        assert "Bio must be less than 500 characters" in messages
        assert "Must be a valid URL" in messages


def test_public_profile(client: TestClient, graphql_stub: GraphQLStub) -> None:
    graphql_stub.on(
        queries.GET_PROFILE,
        {"profilesCollection": connection({"id": USER_ID, "display_name": "Writer"})},
    )

    response = client.get(f"/api/v1/profile/{USER_ID}")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["display_name"] == "Writer"
    _, token = graphql_stub.called(queries.GET_PROFILE)[0]
    assert token is None


def test_unknown_profile(client: TestClient, graphql_stub: GraphQLStub) -> None:
    response = client.get(f"/api/v1/profile/{USER_ID}")
    assert response.status_code == status.HTTP_404_NOT_FOUND
