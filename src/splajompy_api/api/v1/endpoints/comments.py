# src/splajompy_api/api/v1/endpoints/comments.py
"""Comment endpoints nested under posts."""

from fastapi import APIRouter, status

from splajompy_api.schemas import CommentCreate, DetailedComment

from ..dependencies import CommentServiceDep, CurrentUserDep

router = APIRouter(prefix="/posts/{post_id}/comments", tags=["comments"])


@router.get("", response_model=list[DetailedComment])
async def list_comments(
    post_id: int,
    current_user: CurrentUserDep,
    service: CommentServiceDep,
) -> list[DetailedComment]:
    """List a post's comments, oldest first."""
    return await service.get_comments(current_user, post_id)


@router.post("", response_model=DetailedComment, status_code=status.HTTP_201_CREATED)
async def add_comment(
    post_id: int,
    comment_data: CommentCreate,
    current_user: CurrentUserDep,
    service: CommentServiceDep,
) -> DetailedComment:
    """Comment on a post."""
    return await service.add_comment(current_user, post_id, comment_data.text)


@router.post("/{comment_id}/like", status_code=status.HTTP_204_NO_CONTENT)
async def like_comment(
    post_id: int,
    comment_id: int,
    current_user: CurrentUserDep,
    service: CommentServiceDep,
) -> None:
    await service.like_comment(current_user, post_id, comment_id)


@router.delete("/{comment_id}/like", status_code=status.HTTP_204_NO_CONTENT)
async def unlike_comment(
    post_id: int,
    comment_id: int,
    current_user: CurrentUserDep,
    service: CommentServiceDep,
) -> None:
    await service.unlike_comment(current_user, post_id, comment_id)
