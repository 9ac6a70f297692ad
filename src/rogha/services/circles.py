"""Circle membership: creation, adding friends, leaving and lookups."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from rogha.core.errors import ForbiddenActionError, NotFoundError
from rogha.db.time import utcnow
from rogha.models import Circle, CircleMembership, MembershipStatus
from rogha.services.friendships import are_friends

logger = logging.getLogger(__name__)

__all__ = [
    "create_circle",
    "list_circles_for_user",
    "get_circle_for_member",
    "get_membership",
    "is_joined_member",
    "joined_circle_ids",
    "joined_member_ids",
    "add_member",
    "remove_member",
    "leave_circle",
]


def create_circle(
    db: Session,
    creator_id: str,
    name: str,
    description: str | None = None,
) -> Circle:
    """Create a circle with its creator as the first JOINED member."""
    circle = Circle(name=name, description=description)
    circle.members.append(
        CircleMembership(user_id=creator_id, status=MembershipStatus.JOINED)
    )
    db.add(circle)
    db.commit()
    db.refresh(circle)
    logger.info("circles.create circle=%s creator=%s", circle.id, creator_id)
    return circle


def list_circles_for_user(db: Session, user_id: str) -> Sequence[Circle]:
    """Return circles the user has currently joined, most recent first."""
    return db.scalars(
        select(Circle)
        .join(CircleMembership, CircleMembership.circle_id == Circle.id)
        .where(
            CircleMembership.user_id == user_id,
            CircleMembership.status == MembershipStatus.JOINED,
        )
        .options(selectinload(Circle.members))
        .order_by(CircleMembership.joined_at.desc())
    ).all()


def get_membership(db: Session, circle_id: str, user_id: str) -> CircleMembership | None:
    return db.get(CircleMembership, (circle_id, user_id))


def is_joined_member(db: Session, circle_id: str, user_id: str) -> bool:
    membership = get_membership(db, circle_id, user_id)
    return membership is not None and membership.status == MembershipStatus.JOINED


def joined_circle_ids(db: Session, user_id: str) -> set[str]:
    """Return the ids of every circle the user has currently joined."""
    return set(
        db.scalars(
            select(CircleMembership.circle_id).where(
                CircleMembership.user_id == user_id,
                CircleMembership.status == MembershipStatus.JOINED,
            )
        )
    )


def joined_member_ids(db: Session, circle_id: str) -> set[str]:
    return set(
        db.scalars(
            select(CircleMembership.user_id).where(
                CircleMembership.circle_id == circle_id,
                CircleMembership.status == MembershipStatus.JOINED,
            )
        )
    )


def _require_joined(db: Session, circle_id: str, user_id: str) -> None:
    if db.get(Circle, circle_id) is None:
        raise NotFoundError("circles.NOT_FOUND", "Circle not found.")
    if not is_joined_member(db, circle_id, user_id):
        raise ForbiddenActionError(
            "circles.NOT_A_MEMBER",
            "You are not a member of this circle.",
        )


def get_circle_for_member(db: Session, circle_id: str, user_id: str) -> Circle:
    """Return a circle with its members; only JOINED members may look."""
    _require_joined(db, circle_id, user_id)
    return db.get(Circle, circle_id)


def add_member(db: Session, circle_id: str, adder_id: str, friend_id: str) -> CircleMembership:
    """Add (or re-join) an accepted friend of ``adder_id`` to the circle."""
    _require_joined(db, circle_id, adder_id)
    if not are_friends(db, adder_id, friend_id):
        raise ForbiddenActionError(
            "circles.ONLY_FRIENDS",
            "You can only add friends to circles.",
        )

    membership = get_membership(db, circle_id, friend_id)
    if membership is None:
        membership = CircleMembership(
            circle_id=circle_id,
            user_id=friend_id,
            status=MembershipStatus.JOINED,
        )
        db.add(membership)
    else:
        membership.status = MembershipStatus.JOINED
        membership.joined_at = utcnow()
    db.commit()
    logger.info("circles.add circle=%s adder=%s member=%s", circle_id, adder_id, friend_id)
    return membership


def remove_member(db: Session, circle_id: str, remover_id: str, member_id: str) -> None:
    """Delete a member's row; only current members may remove others."""
    _require_joined(db, circle_id, remover_id)
    membership = get_membership(db, circle_id, member_id)
    if membership is None:
        raise NotFoundError("circles.MEMBER_NOT_FOUND", "That user is not in this circle.")
    db.delete(membership)
    db.commit()
    logger.info("circles.remove circle=%s remover=%s member=%s", circle_id, remover_id, member_id)


def leave_circle(db: Session, circle_id: str, user_id: str) -> None:
    """Mark the caller's membership LEFT; a friend may re-add them later."""
    membership = get_membership(db, circle_id, user_id)
    if membership is None:
        raise NotFoundError("circles.MEMBER_NOT_FOUND", "You are not in this circle.")
    membership.status = MembershipStatus.LEFT
    db.commit()
    logger.info("circles.leave circle=%s user=%s", circle_id, user_id)
