"""Edition registry: one lazily created row per week key."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rogha.models import Edition
from rogha.services.weeks import edition_title, week_start

logger = logging.getLogger(__name__)

__all__ = ["get_edition_for_week", "resolve_edition", "published_editions"]


def get_edition_for_week(db: Session, start: datetime, *, for_update: bool = False) -> Edition | None:
    """Return the edition keyed by the week containing ``start``, if any."""
    stmt = select(Edition).where(Edition.week_start == week_start(start))
    if for_update:
        stmt = stmt.with_for_update()
    return db.scalars(stmt).first()


def resolve_edition(db: Session, instant: datetime) -> Edition:
    """Find or create the edition for the week containing ``instant``.

    Runs inside the caller's transaction. Two requests racing to create the
    same week converge on one row through the unique ``week_start`` key.
    """
    key = week_start(instant)
    edition = get_edition_for_week(db, key)
    if edition is not None:
        return edition

    try:
        with db.begin_nested():
            edition = Edition(week_start=key, title=edition_title(key))
            db.add(edition)
    except IntegrityError:
        edition = get_edition_for_week(db, key)
        if edition is None:
            raise
        logger.debug("editions.resolve lost create race week_start=%s", key.isoformat())
    else:
        logger.info("editions.create id=%s week_start=%s", edition.id, key.isoformat())
    return edition


def published_editions(db: Session) -> Sequence[Edition]:
    """Return stamped editions, newest week first."""
    return db.scalars(
        select(Edition)
        .where(Edition.published_at.is_not(None))
        .order_by(Edition.week_start.desc())
    ).all()
