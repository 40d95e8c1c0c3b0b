"""Post-related Pydantic schemas."""

from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from .common import PageInfo, optional_url
from .profile import AuthorSummary
from .tag import TagResponse

PostStatus = Literal["draft", "published"]


def _check_title(value: str) -> str:
    if not value.strip():
        raise ValueError("Title is required")
    if len(value) > 500:
        raise ValueError("Title must be less than 500 characters")
    return value


def _check_body(value: str) -> str:
    if not value.strip():
        raise ValueError("Body is required")
    if len(value) < 10:
        raise ValueError("Body must be at least 10 characters")
    return value


def _check_excerpt(value: str | None) -> str | None:
    if value is not None and len(value) > 300:
        raise ValueError("Excerpt must be less than 300 characters")
    return value


Title = Annotated[str, AfterValidator(_check_title)]
Body = Annotated[str, AfterValidator(_check_body)]
Excerpt = Annotated[str | None, AfterValidator(_check_excerpt)]
ImageUrl = Annotated[str | None, AfterValidator(optional_url)]


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    title: Title = Field(..., description="Post title (1-500 characters)")
    body: Body = Field(..., description="HTML body (at least 10 characters)")
    excerpt: Excerpt = Field(None, description="Optional summary (max 300)")
    featured_image: ImageUrl = Field(None, description="Optional image URL")
    status: PostStatus = Field("draft", description="Publication status")


class PostUpdate(BaseModel):
    """Partial update of a post; omitted fields keep their current value."""

    title: Title | None = None
    body: Body | None = None
    excerpt: Excerpt = None
    featured_image: ImageUrl = None
    status: PostStatus | None = None


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: str
    title: str
    body: str | None = None
    excerpt: str | None = None
    featured_image: str | None = None
    status: PostStatus | None = None
    author_id: str
    created_at: str | None = None
    updated_at: str | None = None

    model_config = ConfigDict(extra="ignore")


class PostDetailResponse(PostResponse):
    """A single post enriched for display."""

    summary: str = Field(..., description="Stored excerpt or one derived from the body")
    reading_time_minutes: int = Field(..., ge=1)
    comment_count: int = Field(0, ge=0)
    author: AuthorSummary | None = None
    tags: list[TagResponse] = Field(default_factory=list)


class PostListResponse(BaseModel):
    """A page of published posts."""

    posts: list[PostResponse]
    pagination: PageInfo


class SearchResponse(BaseModel):
    """Search results for a query."""

    query: str
    posts: list[PostResponse]
    has_more: bool = False


class AuthorPostsResponse(BaseModel):
    """Posts written by the current user, drafts included."""

    posts: list[PostResponse]
    has_more: bool = False


class TagPostsResponse(BaseModel):
    """A tag together with its published posts."""

    tag: TagResponse
    posts: list[PostResponse]
