"""Access-token verification and redirect helpers."""
from __future__ import annotations

import base64
import hashlib
import secrets
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

from jose import JWTError, jwt

from blog_stage.core.settings import settings


class InvalidTokenError(ValueError):
    """Raised when an access token cannot be trusted."""


@dataclass(frozen=True)
class AuthUser:
    """Identity extracted from a verified access token."""

    id: str
    email: str | None = None
    role: str | None = None
    user_metadata: dict[str, Any] = field(default_factory=dict)
    created_at: str | None = None

    @property
    def email_local_part(self) -> str | None:
        """Return the part of the email address before ``@``."""
        if not self.email:
            return None
        return self.email.split("@", 1)[0] or None


def decode_access_token(token: str) -> AuthUser:
    """Verify a vendor-issued access token and return its user.

    Args:
        token: Encoded JWT from the ``Authorization`` header or session cookie.

    Returns:
        The authenticated user described by the token claims.

    Raises:
        InvalidTokenError: If the signature, expiry, audience or subject is invalid.
    """
    if not token:
        raise InvalidTokenError("Missing access token")
    try:
        payload = jwt.decode(
            token,
            settings.supabase_jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
        )
    except JWTError as err:
        raise InvalidTokenError("Could not validate credentials") from err

    subject = payload.get("sub")
    if not subject:
        raise InvalidTokenError("Could not validate credentials")

    metadata = payload.get("user_metadata") or {}
    return AuthUser(
        id=str(subject),
        email=payload.get("email"),
        role=payload.get("role"),
        user_metadata=dict(metadata) if isinstance(metadata, dict) else {},
        created_at=payload.get("created_at"),
    )


def user_from_payload(payload: dict[str, Any]) -> AuthUser:
    """Build an :class:`AuthUser` from a user object returned by the auth API."""
    metadata = payload.get("user_metadata") or {}
    return AuthUser(
        id=str(payload["id"]),
        email=payload.get("email"),
        role=payload.get("role"),
        user_metadata=dict(metadata) if isinstance(metadata, dict) else {},
        created_at=payload.get("created_at"),
    )


def safe_redirect_path(value: str | None, default: str = "/") -> str:
    """Return ``value`` only if it is a site-relative path.

    Absolute URLs, protocol-relative URLs (``//host``) and backslash tricks
    fall back to ``default`` so callback redirects never leave the site.
    """
    if not value:
        return default
    candidate = value.strip()
    if not candidate.startswith("/") or candidate.startswith("//"):
        return default
    if "\\" in candidate:
        return default
    parts = urlsplit(candidate)
    if parts.scheme or parts.netloc:
        return default
    return candidate


def create_pkce_pair() -> tuple[str, str]:
    """Return ``(code_verifier, code_challenge)`` using the S256 method."""
    verifier = secrets.token_urlsafe(48)
    digest = hashlib.sha256(verifier.encode("ascii")).digest()
    challenge = base64.urlsafe_b64encode(digest).decode().rstrip("=")
    return verifier, challenge
