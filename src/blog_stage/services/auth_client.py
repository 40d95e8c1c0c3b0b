"""Client for the hosted authentication endpoints.

Wraps the password, OAuth, magic-link/OTP, PKCE code exchange, refresh and
sign-out endpoints. Every failure reported by the auth service surfaces as
:class:`AuthError` carrying the service's own message.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote, urlencode

import httpx

from blog_stage.core.security import AuthUser, user_from_payload
from blog_stage.core.settings import settings
from blog_stage.services.http import AuthError, SupabaseHTTP, get_supabase_http

logger = logging.getLogger(__name__)

AUTH_PATH = "/auth/v1"
SUPPORTED_OAUTH_PROVIDERS = frozenset({"google"})


@dataclass(frozen=True)
class Session:
    """Tokens issued by the auth service for a signed-in user."""

    access_token: str
    refresh_token: str
    expires_in: int
    expires_at: int
    token_type: str
    user: AuthUser


@dataclass(frozen=True)
class SignUpResult:
    """Outcome of a sign-up; ``session`` is ``None`` until the email is confirmed."""

    user: AuthUser | None
    session: Session | None


def callback_url(redirect_to: str | None = None) -> str:
    """Return the site's auth callback URL, optionally carrying ``redirectTo``."""
    url = f"{settings.base_site_url}/auth/callback"
    if redirect_to:
        url = f"{url}?redirectTo={quote(redirect_to, safe='/')}"
    return url


def _error_message(response: httpx.Response) -> tuple[str, str | None]:
    try:
        payload = response.json()
    except ValueError:
        return (response.text or f"Auth request failed ({response.status_code})", None)
    if not isinstance(payload, dict):
        return (f"Auth request failed ({response.status_code})", None)
    message = (
        payload.get("msg")
        or payload.get("message")
        or payload.get("error_description")
        or payload.get("error")
        or f"Auth request failed ({response.status_code})"
    )
    return str(message), payload.get("error_code")


def _parse_session(payload: dict[str, Any]) -> Session:
    expires_in = int(payload.get("expires_in") or 0)
    expires_at = int(payload.get("expires_at") or (int(time.time()) + expires_in))
    return Session(
        access_token=payload["access_token"],
        refresh_token=payload.get("refresh_token", ""),
        expires_in=expires_in,
        expires_at=expires_at,
        token_type=payload.get("token_type", "bearer"),
        user=user_from_payload(payload["user"]),
    )


class AuthClient:
    """Thin wrapper over the hosted auth REST API."""

    def __init__(self, http: SupabaseHTTP | None = None) -> None:
        self.http = http or get_supabase_http()

    async def _post(
        self,
        path: str,
        body: dict[str, Any] | None = None,
        *,
        params: dict[str, Any] | None = None,
        access_token: str | None = None,
    ) -> httpx.Response:
        response = await self.http.request(
            "POST",
            f"{AUTH_PATH}{path}",
            json_data=body,
            params=params,
            access_token=access_token,
        )
        if response.status_code >= 400:
            message, code = _error_message(response)
            logger.info("Auth %s rejected (%s): %s", path, response.status_code, message)
            raise AuthError(message, status_code=response.status_code, code=code)
        return response

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        """Sign in with email and password."""
        response = await self._post(
            "/token",
            {"email": email, "password": password},
            params={"grant_type": "password"},
        )
        return _parse_session(response.json())

    async def sign_up(
        self,
        email: str,
        password: str,
        *,
        redirect_to: str | None = None,
        code_challenge: str | None = None,
    ) -> SignUpResult:
        """Register a new account; the confirmation email links back to ``redirect_to``."""
        body: dict[str, Any] = {"email": email, "password": password}
        if code_challenge:
            body["code_challenge"] = code_challenge
            body["code_challenge_method"] = "s256"
        response = await self._post(
            "/signup",
            body,
            params={"redirect_to": redirect_to or callback_url("/auth/login")},
        )
        payload = response.json()
        if payload.get("access_token"):
            session = _parse_session(payload)
            return SignUpResult(user=session.user, session=session)
        user = user_from_payload(payload) if payload.get("id") else None
        return SignUpResult(user=user, session=None)

    async def sign_in_with_otp(
        self,
        email: str,
        *,
        redirect_to: str | None = None,
        code_challenge: str | None = None,
    ) -> None:
        """Send a magic link / one-time code to ``email``."""
        body: dict[str, Any] = {"email": email, "create_user": True}
        if code_challenge:
            body["code_challenge"] = code_challenge
            body["code_challenge_method"] = "s256"
        await self._post(
            "/otp",
            body,
            params={"redirect_to": redirect_to or callback_url("/auth/login")},
        )

    async def verify_otp(self, email: str, token: str, otp_type: str = "email") -> Session:
        """Exchange an emailed one-time code for a session."""
        response = await self._post(
            "/verify",
            {"email": email, "token": token, "type": otp_type},
        )
        return _parse_session(response.json())

    def oauth_authorize_url(
        self,
        provider: str,
        *,
        redirect_to: str | None = None,
        code_challenge: str | None = None,
    ) -> str:
        """Return the URL that starts the provider's OAuth consent flow."""
        if provider not in SUPPORTED_OAUTH_PROVIDERS:
            raise AuthError(f"Unsupported OAuth provider: {provider}", status_code=400)
        query: dict[str, str] = {
            "provider": provider,
            "redirect_to": redirect_to or callback_url(),
        }
        if code_challenge:
            query["code_challenge"] = code_challenge
            query["code_challenge_method"] = "s256"
        return f"{self.http.config.base_url}{AUTH_PATH}/authorize?{urlencode(query)}"

    async def exchange_code_for_session(self, code: str, code_verifier: str) -> Session:
        """Exchange an OAuth / magic-link ``code`` for a session (PKCE)."""
        response = await self._post(
            "/token",
            {"auth_code": code, "code_verifier": code_verifier},
            params={"grant_type": "pkce"},
        )
        return _parse_session(response.json())

    async def refresh_session(self, refresh_token: str) -> Session:
        """Trade a refresh token for a fresh session."""
        response = await self._post(
            "/token",
            {"refresh_token": refresh_token},
            params={"grant_type": "refresh_token"},
        )
        return _parse_session(response.json())

    async def sign_out(self, access_token: str) -> None:
        """Revoke the session behind ``access_token``."""
        await self._post("/logout", access_token=access_token)

    async def get_user(self, access_token: str) -> AuthUser:
        """Fetch the user owning ``access_token`` from the auth service."""
        response = await self.http.request(
            "GET",
            f"{AUTH_PATH}/user",
            access_token=access_token,
        )
        if response.status_code >= 400:
            message, code = _error_message(response)
            raise AuthError(message, status_code=response.status_code, code=code)
        return user_from_payload(response.json())


class _AuthClientSingleton:
    """Singleton wrapper for AuthClient."""

    _instance: AuthClient | None = None

    @classmethod
    def get_instance(cls) -> AuthClient:
        if cls._instance is None:
            cls._instance = AuthClient()
        return cls._instance


def get_auth_client() -> AuthClient:
    """Return the process-wide auth client."""
    return _AuthClientSingleton.get_instance()
