"""Weekly publication job.

``publish_edition`` is safe to run any number of times, from the scheduler
and from operators, including concurrently. Only the first run for a week
stamps ``published_at`` and archives leftover drafts. Every run promotes
whatever is still SUBMITTED, so a late submission or a crashed run catches
up on the next invocation.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import update
from sqlalchemy.orm import Session

from rogha.db.time import utcnow
from rogha.models import Post, PostStatus
from rogha.services.editions import get_edition_for_week
from rogha.services.weeks import week_start

logger = logging.getLogger(__name__)

__all__ = ["PublishSkipReason", "PublishResult", "publish_edition"]


class PublishSkipReason(str, enum.Enum):
    NO_EDITION = "NO_EDITION"
    ALREADY_PUBLISHED = "ALREADY_PUBLISHED"


@dataclass(frozen=True)
class PublishResult:
    """Outcome of one publication run.

    ``published`` is True only for the run that stamped the edition.
    """

    published: bool
    week_start: datetime
    reason: PublishSkipReason | None = None
    edition_id: str | None = None
    posts_published: int = 0
    posts_archived: int = 0


def _transition(db: Session, edition_id: str, source: PostStatus, target: PostStatus, now: datetime) -> int:
    result = db.execute(
        update(Post)
        .where(Post.edition_id == edition_id, Post.status == source)
        .values(status=target, version=Post.version + 1, updated_at=now)
        .execution_options(synchronize_session=False)
    )
    return int(result.rowcount or 0)


def _promote_submitted(db: Session, edition_id: str, now: datetime) -> int:
    return _transition(db, edition_id, PostStatus.SUBMITTED, PostStatus.PUBLISHED, now)


def _archive_drafts(db: Session, edition_id: str, now: datetime) -> int:
    return _transition(db, edition_id, PostStatus.DRAFT, PostStatus.ARCHIVED, now)


def publish_edition(db: Session, target_week: datetime, *, now: datetime | None = None) -> PublishResult:
    """Publish the edition of the week containing ``target_week``.

    The edition row is locked for the duration of one transaction, which
    either commits the stamp and both bulk transitions or none of them.

    Args:
        db: Database session; committed or rolled back here.
        target_week: Any instant in the week to publish.
        now: Clock override for the ``published_at`` stamp.

    Raises:
        sqlalchemy.exc.SQLAlchemyError: On store failure, after rollback.
            Retrying is always safe.
    """
    now = now or utcnow()
    key = week_start(target_week)
    try:
        edition = get_edition_for_week(db, key, for_update=True)
        if edition is None:
            db.rollback()
            logger.info("publish.skip week_start=%s reason=NO_EDITION", key.isoformat())
            return PublishResult(
                published=False,
                week_start=key,
                reason=PublishSkipReason.NO_EDITION,
            )

        edition_id = edition.id
        if edition.published_at is not None:
            promoted = _promote_submitted(db, edition_id, now)
            db.commit()
            logger.info(
                "publish.rerun edition=%s week_start=%s promoted=%d",
                edition_id,
                key.isoformat(),
                promoted,
            )
            return PublishResult(
                published=False,
                week_start=key,
                reason=PublishSkipReason.ALREADY_PUBLISHED,
                edition_id=edition_id,
                posts_published=promoted,
            )

        edition.published_at = now
        db.flush()
        promoted = _promote_submitted(db, edition_id, now)
        archived = _archive_drafts(db, edition_id, now)
        db.commit()
    except Exception:
        db.rollback()
        logger.error("publish.failed week_start=%s", key.isoformat(), exc_info=True)
        raise

    logger.info(
        "publish.done edition=%s week_start=%s promoted=%d archived=%d",
        edition_id,
        key.isoformat(),
        promoted,
        archived,
    )
    return PublishResult(
        published=True,
        week_start=key,
        edition_id=edition_id,
        posts_published=promoted,
        posts_archived=archived,
    )
