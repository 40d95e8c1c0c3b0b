"""Tests for tag endpoints."""

from fastapi import status
from fastapi.testclient import TestClient

from tests.support import POST_ID, GraphQLStub, connection, post_node

from blog_stage.graphql import mutations, queries


def test_list_tags(client: TestClient, graphql_stub: GraphQLStub) -> None:
    graphql_stub.on(
        queries.GET_TAGS,
        {"tagsCollection": connection(
            {"id": "t1", "name": "Python", "slug": "python"},
            {"id": "t2", "name": "Web", "slug": "web"},
        )},
    )

    r = client.get("/api/v1/tags/")

    assert r.status_code == status.HTTP_200_OK
    assert [tag["slug"] for tag in r.json()] == ["python", "web"]


def test_create_tag_requires_auth(client: TestClient) -> None:
    r = client.post("/api/v1/tags/", json={"name": "Python"})
    assert r.status_code == status.HTTP_401_UNAUTHORIZED


def test_create_tag_slugifies_name(
    client: TestClient, graphql_stub: GraphQLStub, auth_headers: dict[str, str]
) -> None:
    graphql_stub.on(
        mutations.CREATE_TAG,
        lambda variables: {"insertIntotagsCollection": {"records": [{"id": "t3", **variables}]}},
    )

    r = client.post("/api/v1/tags/", json={"name": "  Café Culture "}, headers=auth_headers)

    assert r.status_code == status.HTTP_201_CREATED
    assert r.json() == {"id": "t3", "name": "Café Culture", "slug": "cafe-culture"}


def test_create_tag_without_usable_slug(
    client: TestClient, graphql_stub: GraphQLStub, auth_headers: dict[str, str]
) -> None:
    r = client.post("/api/v1/tags/", json={"name": "!!!"}, headers=auth_headers)

    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert graphql_stub.called(mutations.CREATE_TAG) == []


def test_posts_for_tag(client: TestClient, graphql_stub: GraphQLStub) -> None:
    graphql_stub.on(
        queries.GET_POSTS_BY_TAG,
        {"tagsCollection": connection({
            "id": "t1",
            "name": "Python",
            "slug": "python",
            "post_tagsCollection": connection({"post_id": POST_ID}, {"post_id": "p2"}),
        })},
    )
    graphql_stub.on(
        queries.GET_POSTS_BY_IDS,
        {"postsCollection": connection(post_node(), post_node(post_id="p2"))},
    )

    r = client.get("/api/v1/tags/python/posts")

    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert data["tag"] == {"id": "t1", "name": "Python", "slug": "python"}
    assert [post["id"] for post in data["posts"]] == [POST_ID, "p2"]
    variables, _ = graphql_stub.called(queries.GET_POSTS_BY_IDS)[0]
    assert variables == {"ids": [POST_ID, "p2"], "first": 2}


def test_tag_without_posts(client: TestClient, graphql_stub: GraphQLStub) -> None:
    graphql_stub.on(
        queries.GET_POSTS_BY_TAG,
        {"tagsCollection": connection({"id": "t1", "name": "Python", "slug": "python"})},
    )

    r = client.get("/api/v1/tags/python/posts")

    assert r.status_code == status.HTTP_200_OK
    assert r.json()["posts"] == []
    assert graphql_stub.called(queries.GET_POSTS_BY_IDS) == []


def test_unknown_tag(client: TestClient, graphql_stub: GraphQLStub) -> None:
    r = client.get("/api/v1/tags/missing/posts")
    assert r.status_code == status.HTTP_404_NOT_FOUND


def test_tags_of_post(client: TestClient, graphql_stub: GraphQLStub) -> None:
    graphql_stub.on(
        queries.GET_POST_TAGS,
        {"post_tagsCollection": connection(
            {"tags": {"id": "t1", "name": "Python", "slug": "python"}},
            {"tags": None},
        )},
    )

    r = client.get(f"/api/v1/posts/{POST_ID}/tags")

    assert r.status_code == status.HTTP_200_OK
    assert r.json() == [{"id": "t1", "name": "Python", "slug": "python"}]
