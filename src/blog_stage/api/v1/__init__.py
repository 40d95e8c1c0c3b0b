"""Version 1 API endpoints."""

from .endpoints import (
    auth_router,
    comments_router,
    notifications_router,
    posts_router,
    profile_router,
    system_router,
    tags_router,
)

__all__ = [
    "auth_router",
    "posts_router",
    "comments_router",
    "profile_router",
    "tags_router",
    "notifications_router",
    "system_router",
]
