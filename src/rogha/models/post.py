"""SQLAlchemy model for posts and their lifecycle attributes."""

from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, CheckConstraint, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from rogha.db.session import Base
from rogha.db.time import utcnow


class PostStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class AudienceType(str, enum.Enum):
    ALL_USERS = "ALL_USERS"
    FRIENDS = "FRIENDS"
    CIRCLE = "CIRCLE"


# No editorial change of any kind is accepted in these states.
TERMINAL_STATUSES = frozenset({PostStatus.PUBLISHED, PostStatus.ARCHIVED})


class Post(Base):
    """Authored content released through a weekly edition.

    ``version`` is the optimistic-concurrency counter; every successful write
    increments it by exactly one.
    """

    __tablename__ = "post"
    __table_args__ = (
        CheckConstraint(
            "(audience_type = 'CIRCLE' AND circle_id IS NOT NULL)"
            " OR (audience_type <> 'CIRCLE' AND circle_id IS NULL)",
            name="ck_post_circle_audience",
        ),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    author_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("app_user.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    content: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    status: Mapped[PostStatus] = mapped_column(
        Enum(PostStatus, name="post_status"),
        nullable=False,
        default=PostStatus.DRAFT,
    )
    audience_type: Mapped[AudienceType] = mapped_column(
        Enum(AudienceType, name="audience_type"),
        nullable=False,
        default=AudienceType.FRIENDS,
    )
    circle_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("circle.id"),
        nullable=True,
    )
    # Null until the first DRAFT -> SUBMITTED transition.
    edition_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("edition.id"),
        nullable=True,
        index=True,
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
