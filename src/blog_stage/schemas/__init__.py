"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .auth import LoginRequest, SessionResponse, SignupRequest, UserResponse
from .comment import CommentCreate, CommentResponse, CommentUpdate
from .notification import NotificationResponse
from .post import PostCreate, PostDetailResponse, PostResponse, PostUpdate
from .profile import ProfileResponse, ProfileUpdate
from .tag import TagCreate, TagResponse

__all__ = [
    "LoginRequest", "SignupRequest", "SessionResponse", "UserResponse",
    "CommentCreate", "CommentUpdate", "CommentResponse",
    "NotificationResponse",
    "PostCreate", "PostUpdate", "PostResponse", "PostDetailResponse",
    "ProfileResponse", "ProfileUpdate",
    "TagCreate", "TagResponse",
]
