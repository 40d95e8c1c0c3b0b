"""Comment editing endpoints for the Blog Stage API."""

from typing import Any

from fastapi import APIRouter, status

from blog_stage.api.v1.dependencies import CommentServiceDep, CurrentSessionDep, service_errors
from blog_stage.schemas.comment import CommentResponse, CommentUpdate

router = APIRouter(prefix="/comments", tags=["comments"])


@router.patch("/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: str,
    comment_data: CommentUpdate,
    comments: CommentServiceDep,
    session: CurrentSessionDep,
) -> dict[str, Any]:
    """Edit one of the caller's comments."""
    with service_errors():
        return await comments.update_comment(comment_id, session.user, comment_data.body)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    comment_id: str,
    comments: CommentServiceDep,
    session: CurrentSessionDep,
) -> None:
    """Delete one of the caller's comments."""
    with service_errors():
        await comments.delete_comment(comment_id, session.user)
