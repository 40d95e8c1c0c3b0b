"""Tests for access-token verification and redirect helpers."""

import base64
import hashlib

import pytest

from tests.support import USER_ID, make_token

from blog_stage.core.security import (
    InvalidTokenError,
    create_pkce_pair,
    decode_access_token,
    safe_redirect_path,
    user_from_payload,
)


class TestDecodeAccessToken:
    def test_valid_token(self) -> None:
        token = make_token(user_metadata={"full_name": "Ada"})

        user = decode_access_token(token)

        assert user.id == USER_ID
        assert user.email == "writer@example.com"
        assert user.role == "authenticated"
        assert user.user_metadata == {"full_name": "Ada"}
        assert user.email_local_part == "writer"

    def test_expired_token(self) -> None:
        with pytest.raises(InvalidTokenError):
            decode_access_token(make_token(expires_in=-60))

    def test_wrong_audience(self) -> None:
        with pytest.raises(InvalidTokenError):
            decode_access_token(make_token(aud="someone-else"))

    def test_missing_subject(self) -> None:
        with pytest.raises(InvalidTokenError):
            decode_access_token(make_token(sub=""))

    def test_tampered_token(self) -> None:
        token = make_token()
        with pytest.raises(InvalidTokenError):
            decode_access_token(token[:-4] + "abcd")

    def test_empty_token(self) -> None:
        with pytest.raises(InvalidTokenError):
            decode_access_token("")


def test_user_from_payload_tolerates_bad_metadata() -> None:
    user = user_from_payload({"id": USER_ID, "email": None, "user_metadata": "oops"})

    assert user.id == USER_ID
    assert user.user_metadata == {}
    assert user.email_local_part is None


@pytest.mark.parametrize(
    "value,expected",
    [
        ("/posts/new", "/posts/new"),
        ("/search?q=python", "/search?q=python"),
        (None, "/"),
        ("", "/"),
        ("https://evil.example.com", "/"),
        ("//evil.example.com", "/"),
        ("/\\evil.example.com", "/"),
        ("posts/new", "/"),
    ],
)
def test_safe_redirect_path(value: str | None, expected: str) -> None:
    assert safe_redirect_path(value) == expected


def test_safe_redirect_path_custom_default() -> None:
    assert safe_redirect_path("https://evil.example.com", "/auth/login") == "/auth/login"


def test_pkce_pair() -> None:
    verifier, challenge = create_pkce_pair()

    expected = base64.urlsafe_b64encode(hashlib.sha256(verifier.encode()).digest()).rstrip(b"=")
    assert challenge == expected.decode()
    assert 43 <= len(verifier) <= 128
    assert create_pkce_pair()[0] != verifier
