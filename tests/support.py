"""Shared test helpers: tokens, payload builders and a GraphQL stub."""
from __future__ import annotations

import os
import time
from typing import Any
from unittest.mock import AsyncMock

os.environ.setdefault("SUPABASE_URL", "https://project.supabase.test")
os.environ.setdefault("SUPABASE_ANON_KEY", "anon-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-with-enough-length")
os.environ.setdefault("SITE_URL", "http://test")
os.environ.setdefault("COOKIE_SECURE", "false")

from jose import jwt

from blog_stage.core.security import AuthUser
from blog_stage.core.settings import settings
from blog_stage.graphql import Operation
from blog_stage.services.auth_client import Session
from blog_stage.services.cache import QueryCache

USER_ID = "11111111-1111-1111-1111-111111111111"
OTHER_USER_ID = "22222222-2222-2222-2222-222222222222"
POST_ID = "33333333-3333-3333-3333-333333333333"


def make_token(
    user_id: str = USER_ID,
    email: str = "writer@example.com",
    expires_in: int = 3600,
    **claims: Any,
) -> str:
    """Sign an access token the way the hosted auth service does."""
    now = int(time.time())
    payload = {
        "sub": user_id,
        "email": email,
        "role": "authenticated",
        "aud": "authenticated",
        "iat": now,
        "exp": now + expires_in,
        "user_metadata": {},
        **claims,
    }
    return jwt.encode(payload, settings.supabase_jwt_secret, algorithm=settings.jwt_algorithm)


def make_session(user_id: str = USER_ID, email: str = "writer@example.com") -> Session:
    return Session(
        access_token=make_token(user_id, email),
        refresh_token="refresh-token",
        expires_in=3600,
        expires_at=int(time.time()) + 3600,
        token_type="bearer",
        user=AuthUser(id=user_id, email=email, role="authenticated"),
    )


def connection(*nodes: dict[str, Any], has_next: bool | None = None) -> dict[str, Any]:
    """Build a Relay connection payload."""
    result: dict[str, Any] = {"edges": [{"node": node} for node in nodes]}
    if has_next is not None:
        result["pageInfo"] = {"hasNextPage": has_next, "hasPreviousPage": False}
    return result


def post_node(
    post_id: str = POST_ID,
    author_id: str = USER_ID,
    status: str = "published",
    **fields: Any,
) -> dict[str, Any]:
    node = {
        "id": post_id,
        "title": "Hello world",
        "body": "<p>A post body that is long enough.</p>",
        "excerpt": None,
        "featured_image": None,
        "status": status,
        "author_id": author_id,
        "created_at": "2024-05-01T10:00:00+00:00",
        "updated_at": "2024-05-02T10:00:00+00:00",
    }
    node.update(fields)
    return node


class GraphQLStub:
    """Records executed operations and answers them from a routing table."""

    def __init__(self) -> None:
        self.responses: dict[str, Any] = {}
        self.calls: list[tuple[str, dict[str, Any], str | None]] = []
        self.cache = QueryCache(ttl_seconds=60)
        self.execute = AsyncMock(side_effect=self._execute)

    def on(self, operation: Operation, response: Any) -> None:
        """Answer ``operation`` with ``response`` (a dict, callable or exception)."""
        self.responses[operation.name] = response

    def called(self, operation: Operation) -> list[tuple[dict[str, Any], str | None]]:
        return [(variables, token) for name, variables, token in self.calls if name == operation.name]

    async def _execute(
        self,
        operation: Operation,
        variables: dict[str, Any] | None = None,
        *,
        access_token: str | None = None,
    ) -> dict[str, Any]:
        variables = dict(variables or {})
        self.calls.append((operation.name, variables, access_token))
        response = self.responses.get(operation.name, {})
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(variables)
        return response
