"""Business logic services for the Blog Stage application."""

from .auth_client import AuthClient
from .comments import CommentService
from .graphql_client import GraphQLClient
from .notifications import NotificationService
from .posts import PostService
from .profiles import ProfileService
from .tags import TagService

__all__ = [
    "AuthClient",
    "GraphQLClient",
    "PostService",
    "CommentService",
    "ProfileService",
    "TagService",
    "NotificationService",
]
