"""Post-related endpoints for the Blog Stage API."""

from typing import Any

from fastapi import APIRouter, HTTPException, Query, status

from blog_stage.api.v1.dependencies import (
    CommentServiceDep,
    CurrentSessionDep,
    OptionalSessionDep,
    PostServiceDep,
    TagServiceDep,
    service_errors,
)
from blog_stage.schemas.comment import (
    CommentCreate,
    CommentResponse,
    CommentThreadResponse,
)
from blog_stage.schemas.post import (
    AuthorPostsResponse,
    PostCreate,
    PostDetailResponse,
    PostListResponse,
    PostResponse,
    PostUpdate,
    SearchResponse,
)
from blog_stage.schemas.tag import PostTagLink, TagResponse
from blog_stage.services.comments import build_thread

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("/", response_model=PostListResponse)
async def list_posts(
    posts: PostServiceDep,
    page: str | None = Query(None, description="1-based page number"),
) -> dict[str, Any]:
    """List published posts, newest first, one page at a time.

    Args:
        posts: Post service
        page: Requested page; anything below 1 or non-numeric means page 1

    Returns:
        The page of posts and its pagination metadata
    """
    with service_errors():
        result = await posts.list_published(page)
    return {"posts": result.posts, "pagination": result.window.as_dict()}


@router.get("/search", response_model=SearchResponse)
async def search_posts(
    posts: PostServiceDep,
    q: str = Query("", description="Text to look for in titles and bodies"),
) -> dict[str, Any]:
    """Search published posts; an empty query returns no results."""
    with service_errors():
        result = await posts.search(q)
    return {"query": result.query, "posts": result.posts, "has_more": result.has_more}


@router.get("/mine", response_model=AuthorPostsResponse)
async def list_my_posts(
    posts: PostServiceDep,
    session: CurrentSessionDep,
    limit: int | None = Query(None, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> dict[str, Any]:
    """List the caller's posts, drafts included."""
    with service_errors():
        items, has_more = await posts.list_by_author(session.user.id, limit, offset)
    return {"posts": items, "has_more": has_more}


@router.get("/{post_id}", response_model=PostDetailResponse)
async def get_post(
    post_id: str,
    posts: PostServiceDep,
    session: OptionalSessionDep,
) -> dict[str, Any]:
    """Get a post with its author, tags and comment count.

    Drafts are only visible to their author.

    Raises:
        HTTPException: If the post does not exist or is a draft of someone else
    """
    with service_errors():
        post = await posts.get_post_detail(post_id)
    viewer_id = session.user.id if session else None
    if post is None or (post.get("status") == "draft" and post.get("author_id") != viewer_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found",
        )
    return post


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    posts: PostServiceDep,
    session: CurrentSessionDep,
) -> dict[str, Any]:
    """Create a post authored by the caller."""
    with service_errors():
        return await posts.create_post(session.user.id, post_data)


@router.patch("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: str,
    post_data: PostUpdate,
    posts: PostServiceDep,
    session: CurrentSessionDep,
) -> dict[str, Any]:
    """Edit a post; only its author may do so."""
    with service_errors():
        return await posts.update_post(post_id, session.user, post_data)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: str,
    posts: PostServiceDep,
    session: CurrentSessionDep,
) -> None:
    """Delete a post together with its comments and tag links."""
    with service_errors():
        await posts.delete_post(post_id, session.user)


@router.get("/{post_id}/comments", response_model=CommentThreadResponse)
async def list_post_comments(
    post_id: str,
    comments: CommentServiceDep,
) -> dict[str, Any]:
    """List approved comments of a post as a reply tree."""
    with service_errors():
        flat = await comments.list_comments(post_id)
    return {"post_id": post_id, "count": len(flat), "comments": build_thread(flat)}


@router.post(
    "/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_post_comment(
    post_id: str,
    comment_data: CommentCreate,
    comments: CommentServiceDep,
    session: CurrentSessionDep,
) -> dict[str, Any]:
    """Comment on a post, optionally as a reply to another comment."""
    with service_errors():
        return await comments.create_comment(
            post_id,
            session.user.id,
            comment_data.body,
            comment_data.parent_id,
        )


@router.get("/{post_id}/tags", response_model=list[TagResponse])
async def list_post_tags(post_id: str, tags: TagServiceDep) -> list[dict[str, Any]]:
    """List the tags attached to a post."""
    with service_errors():
        return await tags.tags_for_post(post_id)


@router.post("/{post_id}/tags", status_code=status.HTTP_201_CREATED)
async def add_post_tag(
    post_id: str,
    link: PostTagLink,
    posts: PostServiceDep,
    tags: TagServiceDep,
    session: CurrentSessionDep,
) -> dict[str, str]:
    """Attach a tag to one of the caller's posts."""
    with service_errors():
        await posts.require_owned(post_id, session.user)
        record = await tags.add_tag_to_post(post_id, link.tag_id)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Tag could not be added",
        )
    return {"post_id": post_id, "tag_id": link.tag_id}


@router.delete("/{post_id}/tags/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_post_tag(
    post_id: str,
    tag_id: str,
    posts: PostServiceDep,
    tags: TagServiceDep,
    session: CurrentSessionDep,
) -> None:
    """Detach a tag from one of the caller's posts."""
    with service_errors():
        await posts.require_owned(post_id, session.user)
        removed = await tags.remove_tag_from_post(post_id, tag_id)
    if not removed:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Tag is not attached to this post",
        )
