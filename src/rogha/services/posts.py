"""Post lifecycle: draft creation and optimistic-concurrency updates.

Authors move a post between DRAFT and SUBMITTED; only the weekly
publication job moves it on to PUBLISHED or ARCHIVED. Every write is a
compare-and-swap on ``Post.version``. A stale version is reported as a
conflict result, never as an exception, and the caller must re-fetch.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from fastapi import status
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from rogha.core.errors import InvalidRequestError
from rogha.db.time import utcnow
from rogha.models import TERMINAL_STATUSES, AudienceType, Post, PostStatus
from rogha.services.circles import is_joined_member
from rogha.services.editions import resolve_edition
from rogha.services.notifications import (
    SubmissionNotifier,
    dispatch_submission,
    get_notifier,
    record_submission,
)

logger = logging.getLogger(__name__)

__all__ = [
    "EDITABLE_FIELDS",
    "UpdateStatus",
    "PostUpdateResult",
    "validate_audience",
    "create_post",
    "get_post",
    "list_posts_by_author",
    "update_post",
]

EDITABLE_FIELDS = frozenset({"title", "content", "status", "audience_type", "circle_id"})
_AUTHOR_TARGETS = frozenset({PostStatus.DRAFT, PostStatus.SUBMITTED})


class UpdateStatus(str, enum.Enum):
    OK = "ok"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class PostUpdateResult:
    """Outcome of :func:`update_post`.

    ``version`` and ``updated_at`` are only set when ``status`` is OK.
    ``notified`` lists recipients newly notified by this call.
    """

    status: UpdateStatus
    version: int | None = None
    updated_at: datetime | None = None
    notified: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.status == UpdateStatus.OK


_CONFLICT = PostUpdateResult(UpdateStatus.CONFLICT)
_NOT_FOUND = PostUpdateResult(UpdateStatus.NOT_FOUND)


def validate_audience(
    db: Session,
    author_id: str,
    audience_type: AudienceType,
    circle_id: str | None,
) -> tuple[AudienceType, str | None]:
    """Return the normalised ``(audience_type, circle_id)`` pair.

    CIRCLE requires a circle the author has joined; every other audience
    drops the circle.

    Raises:
        InvalidRequestError: On a CIRCLE audience without a usable circle.
    """
    if audience_type != AudienceType.CIRCLE:
        return audience_type, None
    if circle_id is None:
        raise InvalidRequestError(
            "post.CIRCLE_REQUIRED",
            "A circle audience needs a circle.",
        )
    if not is_joined_member(db, circle_id, author_id):
        raise InvalidRequestError(
            "post.CIRCLE_NOT_MEMBER",
            "You can only share with circles you belong to.",
        )
    return audience_type, circle_id


def create_post(
    db: Session,
    author_id: str,
    *,
    title: str | None = None,
    content: dict[str, Any] | None = None,
    audience_type: AudienceType = AudienceType.FRIENDS,
    circle_id: str | None = None,
) -> Post:
    """Create a DRAFT at version 1 with no edition."""
    audience_type, circle_id = validate_audience(db, author_id, audience_type, circle_id)
    post = Post(
        author_id=author_id,
        title=title,
        content=content,
        status=PostStatus.DRAFT,
        audience_type=audience_type,
        circle_id=circle_id,
        version=1,
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    logger.info("posts.create id=%s author=%s", post.id, author_id)
    return post


def get_post(db: Session, post_id: str) -> Post | None:
    return db.get(Post, post_id)


def list_posts_by_author(db: Session, author_id: str) -> Sequence[Post]:
    """Return an author's posts, most recently updated first."""
    return db.scalars(
        select(Post)
        .where(Post.author_id == author_id)
        .order_by(Post.updated_at.desc(), Post.created_at.asc(), Post.id.asc())
    ).all()


def _target_status(raw: Any) -> PostStatus:
    try:
        return PostStatus(raw)
    except ValueError as err:
        raise InvalidRequestError("post.INVALID_STATUS", f"Unknown status {raw!r}.") from err


def _audience(raw: Any) -> AudienceType:
    try:
        return AudienceType(raw)
    except ValueError as err:
        raise InvalidRequestError("post.INVALID_AUDIENCE", f"Unknown audience {raw!r}.") from err


def update_post(
    db: Session,
    post_id: str,
    author_id: str,
    fields: Mapping[str, Any],
    expected_version: int,
    *,
    now: datetime | None = None,
    notifier: SubmissionNotifier | None = None,
) -> PostUpdateResult:
    """Apply an editorial change if the caller still holds the current version.

    Args:
        db: Database session; committed on success.
        post_id: Post to update.
        author_id: Calling user; anyone but the author gets NOT_FOUND.
        fields: Subset of :data:`EDITABLE_FIELDS` to change.
        expected_version: Version the caller last read.
        now: Clock override; decides the submission week.
        notifier: Submission collaborator; defaults to :func:`get_notifier`.

    Returns:
        OK with the new version and timestamp, CONFLICT on a stale version,
        or NOT_FOUND for missing or foreign posts.

    Raises:
        InvalidRequestError: Rejected before any write for locked posts,
            disallowed transitions or invalid audiences.
    """
    now = now or utcnow()
    post = db.get(Post, post_id)
    if post is None or post.author_id != author_id:
        return _NOT_FOUND
    if post.version != expected_version:
        return _CONFLICT

    current = post.status
    if current in TERMINAL_STATUSES:
        raise InvalidRequestError(
            "post.LOCKED",
            f"{current.value.capitalize()} posts can no longer be edited.",
            status_code=status.HTTP_409_CONFLICT,
        )

    unknown = set(fields) - EDITABLE_FIELDS
    if unknown:
        raise InvalidRequestError(
            "post.UNKNOWN_FIELD",
            f"Cannot update {', '.join(sorted(unknown))}.",
        )

    target = _target_status(fields.get("status", current))
    if target not in _AUTHOR_TARGETS:
        raise InvalidRequestError(
            "post.INVALID_TRANSITION",
            f"Cannot move a post from {current.value} to {target.value}.",
        )
    if current == PostStatus.SUBMITTED and target == PostStatus.SUBMITTED and set(fields) - {"status"}:
        raise InvalidRequestError(
            "post.SUBMITTED_READ_ONLY",
            "Unsubmit the post before editing it.",
            status_code=status.HTTP_409_CONFLICT,
        )

    values: dict[str, Any] = {key: fields[key] for key in ("title", "content") if key in fields}
    if "audience_type" in fields or "circle_id" in fields:
        audience = _audience(fields.get("audience_type", post.audience_type))
        circle_id = fields.get(
            "circle_id",
            post.circle_id if audience == AudienceType.CIRCLE else None,
        )
        values["audience_type"], values["circle_id"] = validate_audience(
            db, author_id, audience, circle_id
        )

    submitting = current == PostStatus.DRAFT and target == PostStatus.SUBMITTED
    if target != current:
        values["status"] = target
    if submitting:
        values["edition_id"] = resolve_edition(db, now).id

    result = db.execute(
        update(Post)
        .where(
            Post.id == post_id,
            Post.author_id == author_id,
            Post.version == expected_version,
            Post.status == current,
        )
        .values(version=Post.version + 1, updated_at=now, **values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        logger.debug("posts.update conflict id=%s expected_version=%d", post_id, expected_version)
        return _CONFLICT

    fresh: list[str] = []
    if submitting:
        db.refresh(post)
        fresh = record_submission(db, post)
    db.commit()

    new_version = expected_version + 1
    if target != current:
        logger.info(
            "posts.transition id=%s %s->%s version=%d",
            post_id,
            current.value,
            target.value,
            new_version,
        )
    if submitting:
        dispatch_submission(notifier or get_notifier(), post_id, fresh)
    return PostUpdateResult(
        UpdateStatus.OK,
        version=new_version,
        updated_at=now,
        notified=tuple(fresh),
    )
