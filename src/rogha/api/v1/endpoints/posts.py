"""Post-related endpoints for the Rogha API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import JSONResponse

from rogha.api.v1.dependencies import CurrentUserDep, NotifierDep, SessionDep
from rogha.models import Post
from rogha.schemas.post import PostCreate, PostResponse, PostUpdate, PostUpdateResponse
from rogha.services import posts as post_service
from rogha.services.posts import UpdateStatus
from rogha.services.visibility import can_view

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Post:
    """Create a new draft owned by the caller."""
    return post_service.create_post(
        db,
        current_user.id,
        title=post_data.title,
        content=post_data.content,
        audience_type=post_data.audience_type,
        circle_id=post_data.circle_id,
    )


@router.get("/mine", response_model=list[PostResponse])
async def list_my_posts(current_user: CurrentUserDep, db: SessionDep) -> list[Post]:
    """List the caller's own posts in every status."""
    return list(post_service.list_posts_by_author(db, current_user.id))


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: str, current_user: CurrentUserDep, db: SessionDep) -> Post:
    """Get a post the caller is allowed to read.

    Posts the caller may not read are reported exactly like missing ones.
    """
    post = post_service.get_post(db, post_id)
    if post is None or not can_view(db, current_user.id, post):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return post


@router.patch(
    "/{post_id}",
    response_model=PostUpdateResponse,
    responses={
        status.HTTP_404_NOT_FOUND: {"description": "Missing post or not the author"},
        status.HTTP_409_CONFLICT: {"description": "Stale expected_version; re-fetch and retry"},
    },
)
async def update_post(
    post_id: str,
    update_data: PostUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
    notifier: NotifierDep,
) -> PostUpdateResponse | JSONResponse:
    """Update a post with optimistic concurrency.

    Submitting (status DRAFT -> SUBMITTED) binds the post to this week's
    edition and notifies its audience once.
    """
    result = post_service.update_post(
        db,
        post_id,
        current_user.id,
        update_data.changes(),
        update_data.expected_version,
        notifier=notifier,
    )
    if result.status == UpdateStatus.CONFLICT:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"status": UpdateStatus.CONFLICT.value},
        )
    if result.status == UpdateStatus.NOT_FOUND:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"status": UpdateStatus.NOT_FOUND.value},
        )
    return PostUpdateResponse(version=result.version, updated_at=result.updated_at)
