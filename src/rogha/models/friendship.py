"""SQLAlchemy model for the symmetric friendship graph."""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Enum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from rogha.db.session import Base
from rogha.db.time import utcnow


class FriendshipStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"


class Friendship(Base):
    """One edge per unordered pair of users.

    The pair is stored canonically with ``a_id < b_id`` so existence checks do
    not depend on who asked first; ``requester_id`` keeps the direction.
    """

    __tablename__ = "friendship"
    __table_args__ = (
        CheckConstraint("a_id < b_id", name="ck_friendship_canonical_pair"),
    )

    a_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("app_user.id", ondelete="CASCADE"),
        primary_key=True,
    )
    b_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("app_user.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    requester_id: Mapped[str] = mapped_column(String(36), nullable=False)
    status: Mapped[FriendshipStatus] = mapped_column(
        Enum(FriendshipStatus, name="friendship_status"),
        nullable=False,
        default=FriendshipStatus.PENDING,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    # Null until the addressee accepts.
    accepted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def other_id(self, me_id: str) -> str:
        """Return the id of the user on the other end of the edge."""
        if self.a_id == me_id:
            return self.b_id
        if self.b_id == me_id:
            return self.a_id
        raise ValueError("user is not part of this friendship")
