# src/splajompy_api/api/v1/endpoints/posts.py
"""Post-related endpoints for the Splajompy API."""

from fastapi import APIRouter, status

from splajompy_api.schemas import DetailedPost, PostCreate, PostOut

from ..dependencies import CurrentUserDep, PostServiceDep

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post("", response_model=PostOut, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    current_user: CurrentUserDep,
    service: PostServiceDep,
) -> PostOut:
    """Create a new post."""
    return await service.create_post(current_user, post_data)


# Declared before "/{post_id}" so "pin" is not parsed as an id.
@router.delete("/pin", status_code=status.HTTP_204_NO_CONTENT)
async def unpin_post(current_user: CurrentUserDep, service: PostServiceDep) -> None:
    """Remove the caller's pinned post."""
    await service.unpin_post(current_user)


@router.get("/{post_id}", response_model=DetailedPost)
async def get_post(
    post_id: int,
    current_user: CurrentUserDep,
    service: PostServiceDep,
) -> DetailedPost:
    """Get a specific post by ID."""
    return await service.get_post(current_user, post_id)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: int,
    current_user: CurrentUserDep,
    service: PostServiceDep,
) -> None:
    """Delete one of the caller's posts."""
    await service.delete_post(current_user, post_id)


@router.post("/{post_id}/like", status_code=status.HTTP_204_NO_CONTENT)
async def like_post(
    post_id: int,
    current_user: CurrentUserDep,
    service: PostServiceDep,
) -> None:
    await service.like_post(current_user, post_id)


@router.delete("/{post_id}/like", status_code=status.HTTP_204_NO_CONTENT)
async def unlike_post(
    post_id: int,
    current_user: CurrentUserDep,
    service: PostServiceDep,
) -> None:
    await service.unlike_post(current_user, post_id)


@router.post("/{post_id}/vote/{option_index}", status_code=status.HTTP_204_NO_CONTENT)
async def vote_on_poll(
    post_id: int,
    option_index: int,
    current_user: CurrentUserDep,
    service: PostServiceDep,
) -> None:
    """Vote on the post's poll; voting again changes the vote."""
    await service.vote_on_poll(current_user, post_id, option_index)


@router.post("/{post_id}/pin", status_code=status.HTTP_204_NO_CONTENT)
async def pin_post(
    post_id: int,
    current_user: CurrentUserDep,
    service: PostServiceDep,
) -> None:
    """Pin one of the caller's posts to their profile."""
    await service.pin_post(current_user, post_id)


@router.post("/{post_id}/report", status_code=status.HTTP_204_NO_CONTENT)
async def report_post(
    post_id: int,
    current_user: CurrentUserDep,
    service: PostServiceDep,
) -> None:
    """Flag a post for moderation."""
    await service.report_post(current_user, post_id)
