"""SQLAlchemy models for named circles and their membership rows."""

from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rogha.db.session import Base
from rogha.db.time import utcnow


class MembershipStatus(str, enum.Enum):
    JOINED = "JOINED"
    LEFT = "LEFT"


class Circle(Base):
    """Named group of friends used to scope a post's audience."""

    __tablename__ = "circle"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    members: Mapped[list[CircleMembership]] = relationship(
        "CircleMembership",
        back_populates="circle",
        cascade="all, delete-orphan",
    )


class CircleMembership(Base):
    """Join table row; LEFT rows are kept so a member can be re-added."""

    __tablename__ = "circle_membership"

    circle_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("circle.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("app_user.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    status: Mapped[MembershipStatus] = mapped_column(
        Enum(MembershipStatus, name="membership_status"),
        nullable=False,
        default=MembershipStatus.JOINED,
    )
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    circle: Mapped[Circle] = relationship("Circle", back_populates="members")
