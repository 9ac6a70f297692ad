"""Friendship graph: canonical pairs, requests and accepted-friend lookups."""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable
from datetime import datetime

from fastapi import status
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rogha.core.errors import ForbiddenActionError, InvalidRequestError, NotFoundError
from rogha.db.time import utcnow
from rogha.models import Friendship, FriendshipStatus

logger = logging.getLogger(__name__)

__all__ = [
    "FriendState",
    "FriendBox",
    "canonical_pair",
    "perspective_state",
    "get_friendship",
    "are_friends",
    "accepted_friend_ids",
    "list_friendships",
    "request_friendship",
    "accept_friendship",
    "decline_friendship",
    "unfriend",
]


class FriendState(str, enum.Enum):
    """A friendship as seen from one of its two users."""

    NONE = "NONE"
    PENDING_OUTGOING = "PENDING_OUTGOING"
    PENDING_INCOMING = "PENDING_INCOMING"
    ACCEPTED = "ACCEPTED"


class FriendBox(str, enum.Enum):
    ACCEPTED = "accepted"
    INCOMING = "incoming"
    OUTGOING = "outgoing"


_BOX_STATES = {
    FriendBox.ACCEPTED: FriendState.ACCEPTED,
    FriendBox.INCOMING: FriendState.PENDING_INCOMING,
    FriendBox.OUTGOING: FriendState.PENDING_OUTGOING,
}


def canonical_pair(me_id: str, other_id: str) -> tuple[str, str]:
    """Return ``(low, high)`` for an unordered pair of distinct user ids.

    Raises:
        InvalidRequestError: If both ids are the same user.
    """
    if me_id == other_id:
        raise InvalidRequestError(
            "friends.SELF_NOT_ALLOWED",
            "You cannot friend yourself.",
            status_code=status.HTTP_409_CONFLICT,
        )
    return (me_id, other_id) if me_id < other_id else (other_id, me_id)


def perspective_state(row: Friendship | None, me_id: str) -> FriendState:
    """Return the state of ``row`` from the point of view of ``me_id``."""
    if row is None:
        return FriendState.NONE
    if row.status == FriendshipStatus.ACCEPTED:
        return FriendState.ACCEPTED
    if row.requester_id == me_id:
        return FriendState.PENDING_OUTGOING
    return FriendState.PENDING_INCOMING


def get_friendship(db: Session, me_id: str, other_id: str) -> Friendship | None:
    """Return the edge between two users regardless of argument order."""
    a_id, b_id = canonical_pair(me_id, other_id)
    return db.get(Friendship, (a_id, b_id))


def are_friends(db: Session, user_id: str, other_id: str) -> bool:
    """Return True if an ACCEPTED edge joins the two users."""
    if user_id == other_id:
        return False
    row = get_friendship(db, user_id, other_id)
    return row is not None and row.status == FriendshipStatus.ACCEPTED


def accepted_friend_ids(db: Session, user_id: str) -> set[str]:
    """Return the ids of every accepted friend of ``user_id``."""
    rows = db.scalars(
        select(Friendship).where(
            Friendship.status == FriendshipStatus.ACCEPTED,
            or_(Friendship.a_id == user_id, Friendship.b_id == user_id),
        )
    )
    return {row.other_id(user_id) for row in rows}


def list_friendships(
    db: Session,
    user_id: str,
    box: FriendBox = FriendBox.ACCEPTED,
    limit: int = 50,
) -> list[tuple[Friendship, FriendState]]:
    """Return the caller's edges in one box, newest first."""
    wanted = _BOX_STATES[box]
    rows: Iterable[Friendship] = db.scalars(
        select(Friendship)
        .where(or_(Friendship.a_id == user_id, Friendship.b_id == user_id))
        .order_by(Friendship.created_at.desc())
    )
    matches: list[tuple[Friendship, FriendState]] = []
    for row in rows:
        state = perspective_state(row, user_id)
        if state == wanted:
            matches.append((row, state))
            if len(matches) >= limit:
                break
    return matches


def request_friendship(db: Session, requester_id: str, target_id: str) -> FriendState:
    """Create a PENDING edge from ``requester_id`` to ``target_id``.

    A repeated request by the same requester is a no-op. Requests against an
    accepted edge, or against an incoming request, are rejected.
    """
    a_id, b_id = canonical_pair(requester_id, target_id)
    existing = db.get(Friendship, (a_id, b_id))

    if existing is None:
        db.add(
            Friendship(
                a_id=a_id,
                b_id=b_id,
                requester_id=requester_id,
                status=FriendshipStatus.PENDING,
            )
        )
        try:
            db.commit()
        except IntegrityError:
            # A concurrent request created the edge first; report on it instead.
            db.rollback()
            existing = db.get(Friendship, (a_id, b_id))
            if existing is None:
                raise
        else:
            logger.info(
                "friends.request me=%s target=%s outcome=%s",
                requester_id,
                target_id,
                FriendState.PENDING_OUTGOING.value,
            )
            return FriendState.PENDING_OUTGOING

    state = perspective_state(existing, requester_id)
    if state == FriendState.ACCEPTED:
        raise InvalidRequestError(
            "friends.ALREADY_FRIENDS",
            "You are already friends.",
            status_code=status.HTTP_409_CONFLICT,
        )
    if state == FriendState.PENDING_INCOMING:
        raise InvalidRequestError(
            "friends.OPPOSITE_PENDING_EXISTS",
            "Incoming request already exists.",
            status_code=status.HTTP_409_CONFLICT,
        )
    logger.debug("friends.request already pending me=%s target=%s", requester_id, target_id)
    return state


def _pending_incoming(db: Session, me_id: str, other_id: str, verb: str) -> Friendship:
    row = get_friendship(db, me_id, other_id)
    if row is None or row.status != FriendshipStatus.PENDING:
        raise NotFoundError("friends.NO_PENDING", f"No incoming request to {verb}.")
    if row.requester_id == me_id:
        raise ForbiddenActionError(
            f"friends.ONLY_ADDRESSEE_CAN_{verb.upper()}",
            f"Only the recipient can {verb}.",
        )
    return row


def accept_friendship(
    db: Session,
    me_id: str,
    other_id: str,
    now: datetime | None = None,
) -> FriendState:
    """Accept the pending request ``other_id`` sent to ``me_id``."""
    row = _pending_incoming(db, me_id, other_id, "accept")
    row.status = FriendshipStatus.ACCEPTED
    row.accepted_at = now or utcnow()
    db.commit()
    logger.info("friends.accept me=%s other=%s", me_id, other_id)
    return FriendState.ACCEPTED


def decline_friendship(db: Session, me_id: str, other_id: str) -> FriendState:
    """Decline, and delete, the pending request ``other_id`` sent to ``me_id``."""
    row = _pending_incoming(db, me_id, other_id, "decline")
    db.delete(row)
    db.commit()
    logger.info("friends.decline me=%s other=%s", me_id, other_id)
    return FriendState.NONE


def unfriend(db: Session, me_id: str, other_id: str) -> FriendState:
    """Remove an accepted edge; either party may do so.

    Pending requests must be declined instead.
    """
    row = get_friendship(db, me_id, other_id)
    if row is None:
        return FriendState.NONE
    if row.status == FriendshipStatus.PENDING:
        raise ForbiddenActionError(
            "friends.CANNOT_UNFRIEND_PENDING",
            "Cannot unfriend while request is pending.",
        )
    db.delete(row)
    db.commit()
    logger.info("friends.unfriend me=%s other=%s", me_id, other_id)
    return FriendState.NONE
