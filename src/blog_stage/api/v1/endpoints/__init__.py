"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .comments import router as comments_router
from .notifications import router as notifications_router
from .posts import router as posts_router
from .profile import router as profile_router
from .system import router as system_router
from .tags import router as tags_router

__all__ = [
    "auth_router",
    "posts_router",
    "comments_router",
    "profile_router",
    "tags_router",
    "notifications_router",
    "system_router",
]
