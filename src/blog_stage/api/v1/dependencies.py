"""Shared API dependencies for authentication and common functionality."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from blog_stage.core.security import AuthUser, InvalidTokenError, decode_access_token
from blog_stage.core.settings import settings
from blog_stage.services.auth_client import AuthClient, Session, get_auth_client
from blog_stage.services.comments import CommentService
from blog_stage.services.exceptions import EntityNotFoundError, OwnershipError
from blog_stage.services.graphql_client import GraphQLClient, get_graphql_client
from blog_stage.services.http import AuthError, BackendUnavailableError, GraphQLError
from blog_stage.services.notifications import NotificationService
from blog_stage.services.posts import PostService
from blog_stage.services.profiles import ProfileService
from blog_stage.services.tags import TagService

logger = logging.getLogger(__name__)

# Bearer auth is optional because browsers authenticate with cookies.
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class UserSession:
    """The authenticated caller and the token to forward to the backend."""

    user: AuthUser
    access_token: str


def get_graphql_client_dep() -> GraphQLClient:
    """Return the shared GraphQL client."""
    return get_graphql_client()


def get_auth_client_dep() -> AuthClient:
    """Return the shared auth client."""
    return get_auth_client()


GraphQLClientDep = Annotated[GraphQLClient, Depends(get_graphql_client_dep)]
AuthClientDep = Annotated[AuthClient, Depends(get_auth_client_dep)]


def set_session_cookies(response: Response, session: Session) -> None:
    """Store the session tokens in HTTP-only cookies."""
    response.set_cookie(
        settings.access_cookie_name,
        session.access_token,
        max_age=session.expires_in or None,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        path="/",
    )
    response.set_cookie(
        settings.refresh_cookie_name,
        session.refresh_token,
        max_age=settings.refresh_cookie_max_age,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        path="/",
    )


def clear_session_cookies(response: Response) -> None:
    """Remove the session cookies."""
    response.delete_cookie(settings.access_cookie_name, path="/")
    response.delete_cookie(settings.refresh_cookie_name, path="/")


# Marker stored on ``request.state`` when the session cookies must be dropped.
CLEAR_SESSION = "clear"


def apply_session_update(request: Request, response: Response) -> None:
    """Write the cookie change recorded while resolving the session.

    Runs on the final response, error responses included. Endpoints that set
    or clear the session cookies themselves (login, logout) take precedence.
    """
    update = getattr(request.state, "session_update", None)
    if update is None:
        return
    prefix = f"{settings.refresh_cookie_name}="
    if any(value.startswith(prefix) for value in response.headers.getlist("set-cookie")):
        return
    if update == CLEAR_SESSION:
        clear_session_cookies(response)
    else:
        set_session_cookies(response, update)


async def get_optional_session(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    auth_client: AuthClientDep,
) -> UserSession | None:
    """Resolve the caller's session, if any.

    An ``Authorization: Bearer`` header takes precedence over the access-token
    cookie. When the cookie token is missing or expired and a refresh-token
    cookie is present, the session is refreshed. The resulting cookie change
    is recorded on ``request.state`` and written by :func:`apply_session_update`
    so that it also reaches error responses.

    Raises:
        HTTPException: If an explicit bearer token is invalid.
    """
    if credentials is not None:
        try:
            user = decode_access_token(credentials.credentials)
        except InvalidTokenError as err:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Could not validate credentials",
                headers={"WWW-Authenticate": "Bearer"},
            ) from err
        return UserSession(user=user, access_token=credentials.credentials)

    token = request.cookies.get(settings.access_cookie_name)
    if token:
        try:
            return UserSession(user=decode_access_token(token), access_token=token)
        except InvalidTokenError:
            logger.debug("Access-token cookie rejected; trying refresh")

    refresh_token = request.cookies.get(settings.refresh_cookie_name)
    if not refresh_token:
        return None
    try:
        session = await auth_client.refresh_session(refresh_token)
    except AuthError as err:
        logger.info("Session refresh failed: %s", err)
        request.state.session_update = CLEAR_SESSION
        return None
    except BackendUnavailableError as err:
        raise http_error(err) from err
    request.state.session_update = session
    return UserSession(user=session.user, access_token=session.access_token)


OptionalSessionDep = Annotated[UserSession | None, Depends(get_optional_session)]


def get_current_session(session: OptionalSessionDep) -> UserSession:
    """Require an authenticated caller.

    Raises:
        HTTPException: If no valid session is present.
    """
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session


CurrentSessionDep = Annotated[UserSession, Depends(get_current_session)]


def get_current_user(session: CurrentSessionDep) -> AuthUser:
    """Return the authenticated user."""
    return session.user


CurrentUserDep = Annotated[AuthUser, Depends(get_current_user)]


def _token(session: UserSession | None) -> str | None:
    return session.access_token if session else None


def get_post_service(client: GraphQLClientDep, session: OptionalSessionDep) -> PostService:
    return PostService(client, _token(session))


def get_comment_service(client: GraphQLClientDep, session: OptionalSessionDep) -> CommentService:
    return CommentService(client, _token(session))


def get_profile_service(client: GraphQLClientDep, session: OptionalSessionDep) -> ProfileService:
    return ProfileService(client, _token(session))


def get_tag_service(client: GraphQLClientDep, session: OptionalSessionDep) -> TagService:
    return TagService(client, _token(session))


def get_notification_service(
    client: GraphQLClientDep,
    session: CurrentSessionDep,
) -> NotificationService:
    return NotificationService(client, session.access_token)


PostServiceDep = Annotated[PostService, Depends(get_post_service)]
CommentServiceDep = Annotated[CommentService, Depends(get_comment_service)]
ProfileServiceDep = Annotated[ProfileService, Depends(get_profile_service)]
TagServiceDep = Annotated[TagService, Depends(get_tag_service)]
NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]


def http_error(exc: Exception) -> HTTPException:
    """Translate a service exception into an HTTP error response."""
    if isinstance(exc, EntityNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, OwnershipError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
    if isinstance(exc, AuthError):
        code = exc.status_code if exc.status_code in (400, 401, 403, 422, 429) else 400
        return HTTPException(status_code=code, detail=str(exc))
    if isinstance(exc, GraphQLError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, BackendUnavailableError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Backend temporarily unavailable",
        )
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@contextmanager
def service_errors() -> Iterator[None]:
    """Re-raise service and backend failures as ``HTTPException``."""
    try:
        yield
    except (
        EntityNotFoundError,
        OwnershipError,
        AuthError,
        GraphQLError,
        BackendUnavailableError,
    ) as err:
        if isinstance(err, BackendUnavailableError):
            logger.error("Backend unavailable: %s", err)
        raise http_error(err) from err
