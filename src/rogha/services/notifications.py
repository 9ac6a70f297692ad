"""Submission notifications: recipient resolution, de-duplication and fan-out.

The notification/e-mail collaborator is reached through
:class:`SubmissionNotifier`. This module decides *who* hears about a
submission and guarantees each recipient is recorded at most once per post;
delivery mechanics belong to the collaborator. The stored rows double as
each user's in-app inbox.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from rogha.core.settings import settings
from rogha.models import AudienceType, Notification, NotificationType, Post
from rogha.services.circles import joined_member_ids
from rogha.services.friendships import accepted_friend_ids

logger = logging.getLogger(__name__)

INBOX_LIMIT = 20


class SubmissionNotifier(Protocol):
    """Out-of-band delivery of "a friend submitted a post" notices."""

    def notify_submission(self, post_id: str, recipient_ids: Sequence[str]) -> None:
        ...


class LoggingSubmissionNotifier:
    """Default collaborator: records the fan-out in the application log.

    Recipients are handed over in batches of ``NOTIFICATION_BATCH_SIZE`` so a
    delivery backend plugged in here never receives an unbounded list.
    """

    def __init__(self, batch_size: int | None = None) -> None:
        self.batch_size = batch_size or settings.notification_batch_size

    def notify_submission(self, post_id: str, recipient_ids: Sequence[str]) -> None:
        for offset in range(0, len(recipient_ids), self.batch_size):
            batch = recipient_ids[offset:offset + self.batch_size]
            logger.info(
                "notifications.submit post=%s batch=%d recipients=%s",
                post_id,
                offset // self.batch_size,
                ",".join(batch),
            )


_notifier: SubmissionNotifier = LoggingSubmissionNotifier()


def get_notifier() -> SubmissionNotifier:
    """Return the process-wide notifier."""
    return _notifier


def submission_recipients(db: Session, post: Post) -> list[str]:
    """Return who should hear about ``post`` being submitted.

    FRIENDS posts notify accepted friends, CIRCLE posts notify joined members
    of the circle, ALL_USERS posts notify nobody. The author is never a
    recipient.
    """
    if post.audience_type == AudienceType.FRIENDS:
        recipients = accepted_friend_ids(db, post.author_id)
    elif post.audience_type == AudienceType.CIRCLE and post.circle_id is not None:
        recipients = joined_member_ids(db, post.circle_id)
    else:
        recipients = set()
    recipients.discard(post.author_id)
    return sorted(recipients)


def record_submission(db: Session, post: Post) -> list[str]:
    """Create SUBMIT notification rows for recipients not yet notified.

    Runs inside the caller's transaction and returns only the newly added
    recipients, so re-running it for the same post never notifies anyone
    twice.
    """
    recipients = submission_recipients(db, post)
    if not recipients:
        return []

    already = set(
        db.scalars(
            select(Notification.user_id).where(
                Notification.type == NotificationType.SUBMIT,
                Notification.post_id == post.id,
                Notification.user_id.in_(recipients),
            )
        )
    )
    fresh = [user_id for user_id in recipients if user_id not in already]
    db.add_all(
        Notification(
            user_id=user_id,
            creator_id=post.author_id,
            type=NotificationType.SUBMIT,
            post_id=post.id,
        )
        for user_id in fresh
    )
    db.flush()
    return fresh


def dispatch_submission(notifier: SubmissionNotifier, post_id: str, recipient_ids: Sequence[str]) -> None:
    """Hand committed recipients to the collaborator.

    The status transition is already committed; a delivery failure is logged
    and does not undo it.
    """
    if not recipient_ids:
        return
    try:
        notifier.notify_submission(post_id, list(recipient_ids))
    except Exception:
        logger.error(
            "notifications.submit delivery failed post=%s recipients=%d",
            post_id,
            len(recipient_ids),
            exc_info=True,
        )


def list_notifications(db: Session, user_id: str, limit: int = INBOX_LIMIT) -> Sequence[Notification]:
    """Return the user's newest notifications, read or not."""
    return db.scalars(
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(limit)
    ).all()


def unread_count(db: Session, user_id: str) -> int:
    return db.scalar(
        select(func.count())
        .select_from(Notification)
        .where(Notification.user_id == user_id, Notification.read.is_(False))
    ) or 0


def mark_all_read(db: Session, user_id: str) -> int:
    """Mark every unread notification of the user as read; return how many."""
    result = db.execute(
        update(Notification)
        .where(Notification.user_id == user_id, Notification.read.is_(False))
        .values(read=True)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    marked = int(result.rowcount or 0)
    logger.info("notifications.read user=%s marked=%d", user_id, marked)
    return marked
