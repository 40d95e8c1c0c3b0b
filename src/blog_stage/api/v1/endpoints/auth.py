"""Authentication endpoints for the Blog Stage API.

Sign-in state lives in HTTP-only cookies so browser clients need no token
handling; API clients may instead use the ``access_token`` returned in the
response body as a bearer token.
"""

from __future__ import annotations

import logging
from urllib.parse import quote

from fastapi import APIRouter, HTTPException, Query, Request, Response, status
from fastapi.responses import RedirectResponse

from blog_stage.api.v1.dependencies import (
    AuthClientDep,
    CurrentSessionDep,
    clear_session_cookies,
    service_errors,
    set_session_cookies,
)
from blog_stage.core.security import AuthUser, create_pkce_pair, safe_redirect_path
from blog_stage.core.settings import settings
from blog_stage.schemas.auth import (
    LoginRequest,
    MagicLinkRequest,
    RefreshRequest,
    SessionResponse,
    SignupRequest,
    SignupResponse,
    UserResponse,
    VerifyOtpRequest,
)
from blog_stage.schemas.common import MessageResponse
from blog_stage.services.auth_client import Session, callback_url
from blog_stage.services.http import AuthError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

# The PKCE verifier only has to survive the round trip through the provider.
VERIFIER_COOKIE_MAX_AGE = 10 * 60


def _user_response(user: AuthUser) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        role=user.role,
        user_metadata=dict(user.user_metadata),
        created_at=user.created_at,
    )


def _session_response(session: Session) -> SessionResponse:
    return SessionResponse(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        token_type=session.token_type,
        expires_in=session.expires_in,
        expires_at=session.expires_at,
        user=_user_response(session.user),
    )


def _set_verifier_cookie(response: Response, verifier: str) -> None:
    response.set_cookie(
        settings.verifier_cookie_name,
        verifier,
        max_age=VERIFIER_COOKIE_MAX_AGE,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        path="/",
    )


@router.post("/login", response_model=SessionResponse)
async def login(
    credentials: LoginRequest,
    response: Response,
    auth_client: AuthClientDep,
) -> SessionResponse:
    """Sign in with email and password and start a cookie session."""
    with service_errors():
        session = await auth_client.sign_in_with_password(
            credentials.email, credentials.password
        )
    set_session_cookies(response, session)
    return _session_response(session)


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    payload: SignupRequest,
    response: Response,
    auth_client: AuthClientDep,
) -> SignupResponse:
    """Register a new account.

    When the project requires email confirmation no session is returned; the
    confirmation link lands on the auth callback, which signs the user in and
    continues to the login page.
    """
    verifier, challenge = create_pkce_pair()
    with service_errors():
        result = await auth_client.sign_up(
            payload.email,
            payload.password,
            redirect_to=callback_url("/auth/login"),
            code_challenge=challenge,
        )
    if result.session is not None:
        set_session_cookies(response, result.session)
        return SignupResponse(
            user=_user_response(result.session.user),
            session=_session_response(result.session),
            confirmation_required=False,
            message="Account created",
        )
    _set_verifier_cookie(response, verifier)
    return SignupResponse(
        user=_user_response(result.user) if result.user else None,
        session=None,
        confirmation_required=True,
        message="Check your email for the confirmation link",
    )


@router.post("/magic-link", response_model=MessageResponse)
async def magic_link(
    payload: MagicLinkRequest,
    response: Response,
    auth_client: AuthClientDep,
) -> MessageResponse:
    """Email a passwordless sign-in link."""
    verifier, challenge = create_pkce_pair()
    landing = safe_redirect_path(payload.redirect_to, default="/auth/login")
    with service_errors():
        await auth_client.sign_in_with_otp(
            payload.email,
            redirect_to=callback_url(landing),
            code_challenge=challenge,
        )
    _set_verifier_cookie(response, verifier)
    return MessageResponse(message="Check your email for the login link")


@router.post("/verify-otp", response_model=SessionResponse)
async def verify_otp(
    payload: VerifyOtpRequest,
    response: Response,
    auth_client: AuthClientDep,
) -> SessionResponse:
    """Exchange an emailed one-time code for a session."""
    with service_errors():
        session = await auth_client.verify_otp(payload.email, payload.token)
    set_session_cookies(response, session)
    return _session_response(session)


@router.get("/oauth/{provider}")
async def oauth_start(
    provider: str,
    auth_client: AuthClientDep,
    redirect_to: str | None = Query(None, alias="redirectTo"),
) -> RedirectResponse:
    """Redirect the browser to the provider's consent screen."""
    verifier, challenge = create_pkce_pair()
    landing = safe_redirect_path(redirect_to, default="/") if redirect_to else None
    with service_errors():
        url = auth_client.oauth_authorize_url(
            provider,
            redirect_to=callback_url(landing),
            code_challenge=challenge,
        )
    redirect = RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)
    _set_verifier_cookie(redirect, verifier)
    return redirect


@router.get("/callback")
async def auth_callback(
    request: Request,
    auth_client: AuthClientDep,
    code: str | None = Query(None),
    redirect_to: str | None = Query(None, alias="redirectTo"),
) -> RedirectResponse:
    """Finish an OAuth, magic-link or email-confirmation round trip.

    Exchanges ``code`` for a session, stores it in cookies and continues to
    ``redirectTo`` (site-relative paths only). Failures land on the login page
    with the error message in the query string.
    """
    destination = safe_redirect_path(redirect_to, default="/")
    if not code:
        return RedirectResponse(destination, status_code=status.HTTP_303_SEE_OTHER)

    verifier = request.cookies.get(settings.verifier_cookie_name)
    try:
        if not verifier:
            raise AuthError("Missing code verifier; please sign in again", status_code=400)
        session = await auth_client.exchange_code_for_session(code, verifier)
    except AuthError as err:
        logger.info("Auth callback failed: %s", err)
        failure = RedirectResponse(
            f"/auth/login?error={quote(str(err))}",
            status_code=status.HTTP_303_SEE_OTHER,
        )
        failure.delete_cookie(settings.verifier_cookie_name, path="/")
        return failure

    redirect = RedirectResponse(destination, status_code=status.HTTP_303_SEE_OTHER)
    set_session_cookies(redirect, session)
    redirect.delete_cookie(settings.verifier_cookie_name, path="/")
    return redirect


@router.post("/refresh", response_model=SessionResponse)
async def refresh(
    request: Request,
    response: Response,
    auth_client: AuthClientDep,
    payload: RefreshRequest | None = None,
) -> SessionResponse:
    """Issue new tokens from a refresh token (body or cookie)."""
    token = (payload.refresh_token if payload else None) or request.cookies.get(
        settings.refresh_cookie_name
    )
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Refresh token required",
        )
    with service_errors():
        session = await auth_client.refresh_session(token)
    set_session_cookies(response, session)
    return _session_response(session)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    response: Response,
    session: CurrentSessionDep,
    auth_client: AuthClientDep,
) -> None:
    """Revoke the session and clear cookies."""
    try:
        await auth_client.sign_out(session.access_token)
    except AuthError as err:
        # The token may already be revoked; cookies are cleared regardless.
        logger.info("Sign-out rejected: %s", err)
    clear_session_cookies(response)


@router.get("/me", response_model=UserResponse)
async def me(session: CurrentSessionDep) -> UserResponse:
    """Return the signed-in user."""
    return _user_response(session.user)
