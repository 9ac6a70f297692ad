"""Edition endpoints: reading editions and the operator publish action."""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rogha.api.v1.dependencies import AdminUserDep, CurrentUserDep, SessionDep
from rogha.models import Edition
from rogha.schemas.edition import EditionWithPosts, PublishRequest, PublishResponse
from rogha.services.publication import publish_edition
from rogha.services.visibility import list_published_editions, list_visible_posts
from rogha.services.weeks import default_publish_target, local_date_instant

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/editions", tags=["editions"])


def run_publication(db: Session, week_iso: date | None, trigger: str) -> PublishResponse:
    """Publish the requested week, or last week when none is given.

    Store failures surface as 500; the job is idempotent so the caller may
    simply retry.
    """
    target = local_date_instant(week_iso) if week_iso else default_publish_target()
    logger.info("publish.trigger mode=%s target=%s", trigger, target.isoformat())
    try:
        result = publish_edition(db, target)
    except SQLAlchemyError as err:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Publication failed; it is safe to retry",
        ) from err
    return PublishResponse.from_result(result)


@router.get("/", response_model=list[EditionWithPosts])
async def list_editions(current_user: CurrentUserDep, db: SessionDep) -> list[EditionWithPosts]:
    """List published editions, newest first, with the posts the caller may read."""
    return [
        EditionWithPosts.build(edition, posts)
        for edition, posts in list_published_editions(db, current_user.id)
    ]


@router.post("/publish", response_model=PublishResponse)
async def publish(
    _admin: AdminUserDep,
    db: SessionDep,
    payload: PublishRequest | None = None,
) -> PublishResponse:
    """Manually publish a week's edition (operators only)."""
    week_iso = payload.week_iso if payload else None
    return run_publication(db, week_iso, trigger="admin")


@router.get("/{edition_id}", response_model=EditionWithPosts)
async def get_edition(edition_id: str, current_user: CurrentUserDep, db: SessionDep) -> EditionWithPosts:
    """Get one edition with the posts the caller may read."""
    posts = list_visible_posts(db, current_user.id, edition_id)
    if posts is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Edition not found")
    edition = db.get(Edition, edition_id)
    return EditionWithPosts.build(edition, posts)
