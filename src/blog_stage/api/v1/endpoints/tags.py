"""Tag endpoints for the Blog Stage API."""

from typing import Any

from fastapi import APIRouter, HTTPException, status

from blog_stage.api.v1.dependencies import CurrentSessionDep, TagServiceDep, service_errors
from blog_stage.schemas.post import TagPostsResponse
from blog_stage.schemas.tag import TagCreate, TagResponse

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("/", response_model=list[TagResponse])
async def list_tags(tags: TagServiceDep) -> list[dict[str, Any]]:
    """List every tag by name."""
    with service_errors():
        return await tags.list_tags()


@router.post("/", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
async def create_tag(
    tag_data: TagCreate,
    tags: TagServiceDep,
    _session: CurrentSessionDep,
) -> dict[str, Any]:
    """Create a tag; signed-in users only."""
    try:
        with service_errors():
            return await tags.create_tag(tag_data.name, tag_data.slug)
    except ValueError as err:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(err),
        ) from err


@router.get("/{slug}/posts", response_model=TagPostsResponse)
async def list_tag_posts(slug: str, tags: TagServiceDep) -> dict[str, Any]:
    """List published posts carrying the tag ``slug``."""
    with service_errors():
        result = await tags.posts_by_tag(slug)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Tag not found",
        )
    return {"tag": result.tag, "posts": result.posts}
