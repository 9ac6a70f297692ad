"""initial schema

Revision ID: 5b1f0c2a9d3e
Revises:
Create Date: 2026-10-19 09:12:44.318402

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5b1f0c2a9d3e"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

post_status = sa.Enum("DRAFT", "SUBMITTED", "PUBLISHED", "ARCHIVED", name="post_status")
audience_type = sa.Enum("ALL_USERS", "FRIENDS", "CIRCLE", name="audience_type")
friendship_status = sa.Enum("PENDING", "ACCEPTED", name="friendship_status")
membership_status = sa.Enum("JOINED", "LEFT", name="membership_status")
notification_type = sa.Enum("SUBMIT", name="notification_type")


def upgrade() -> None:
    """Create users, the friendship graph, circles, editions, posts and notifications."""
    op.create_table(
        "app_user",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("display_name", sa.Text(), nullable=True),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_table(
        "friendship",
        sa.Column("a_id", sa.String(length=36), nullable=False),
        sa.Column("b_id", sa.String(length=36), nullable=False),
        sa.Column("requester_id", sa.String(length=36), nullable=False),
        sa.Column("status", friendship_status, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("accepted_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("a_id < b_id", name="ck_friendship_canonical_pair"),
        sa.ForeignKeyConstraint(["a_id"], ["app_user.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["b_id"], ["app_user.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("a_id", "b_id"),
    )
    op.create_index(op.f("ix_friendship_b_id"), "friendship", ["b_id"], unique=False)

    op.create_table(
        "circle",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "circle_membership",
        sa.Column("circle_id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("status", membership_status, nullable=False),
        sa.Column("joined_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["circle_id"], ["circle.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["app_user.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("circle_id", "user_id"),
    )
    op.create_index(
        op.f("ix_circle_membership_user_id"), "circle_membership", ["user_id"], unique=False
    )

    op.create_table(
        "edition",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("week_start", sa.DateTime(timezone=True), nullable=False),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("week_start"),
    )
    op.create_table(
        "post",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("author_id", sa.String(length=36), nullable=False),
        sa.Column("title", sa.Text(), nullable=True),
        sa.Column("content", sa.JSON(), nullable=True),
        sa.Column("status", post_status, nullable=False),
        sa.Column("audience_type", audience_type, nullable=False),
        sa.Column("circle_id", sa.String(length=36), nullable=True),
        sa.Column("edition_id", sa.String(length=36), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "(audience_type = 'CIRCLE' AND circle_id IS NOT NULL)"
            " OR (audience_type <> 'CIRCLE' AND circle_id IS NULL)",
            name="ck_post_circle_audience",
        ),
        sa.ForeignKeyConstraint(["author_id"], ["app_user.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["circle_id"], ["circle.id"]),
        sa.ForeignKeyConstraint(["edition_id"], ["edition.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_post_author_id"), "post", ["author_id"], unique=False)
    op.create_index(op.f("ix_post_edition_id"), "post", ["edition_id"], unique=False)

    op.create_table(
        "notification",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("creator_id", sa.String(length=36), nullable=False),
        sa.Column("type", notification_type, nullable=False),
        sa.Column("post_id", sa.String(length=36), nullable=False),
        sa.Column("read", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["creator_id"], ["app_user.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["post_id"], ["post.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["app_user.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("type", "post_id", "user_id", name="uq_notification_post_recipient"),
    )
    op.create_index(op.f("ix_notification_user_id"), "notification", ["user_id"], unique=False)


def downgrade() -> None:
    """Drop every table created by :func:`upgrade`."""
    op.drop_index(op.f("ix_notification_user_id"), table_name="notification")
    op.drop_table("notification")
    op.drop_index(op.f("ix_post_edition_id"), table_name="post")
    op.drop_index(op.f("ix_post_author_id"), table_name="post")
    op.drop_table("post")
    op.drop_table("edition")
    op.drop_index(op.f("ix_circle_membership_user_id"), table_name="circle_membership")
    op.drop_table("circle_membership")
    op.drop_table("circle")
    op.drop_index(op.f("ix_friendship_b_id"), table_name="friendship")
    op.drop_table("friendship")
    op.drop_table("app_user")

    bind = op.get_bind()
    for enum_type in (
        notification_type,
        post_status,
        audience_type,
        membership_status,
        friendship_status,
    ):
        enum_type.drop(bind, checkfirst=True)
