"""Read-visibility rules for posts and editions.

Rules, in order:

1. Authors always see their own posts, whatever the status.
2. Everyone else sees PUBLISHED posts only.
3. A PUBLISHED post is then gated by its audience: ALL_USERS is open to any
   authenticated viewer, FRIENDS needs an ACCEPTED friendship with the
   author, CIRCLE needs a JOINED membership in the post's circle.

Relationships are read at request time. Revoking a friendship hides the
author's posts from then on; accepting one reveals older posts too.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from functools import cached_property

from sqlalchemy import select
from sqlalchemy.orm import Session

from rogha.models import AudienceType, Edition, Post, PostStatus
from rogha.services.circles import is_joined_member, joined_circle_ids
from rogha.services.editions import published_editions
from rogha.services.friendships import accepted_friend_ids, are_friends

__all__ = [
    "can_view",
    "can_view_post",
    "filter_visible",
    "list_visible_posts",
    "list_published_editions",
    "EDITION_ORDER",
]

# Most recently updated first; ties fall back to creation order.
EDITION_ORDER = (Post.updated_at.desc(), Post.created_at.asc(), Post.id.asc())


def can_view(db: Session, viewer_id: str, post: Post) -> bool:
    """Return True if ``viewer_id`` may read ``post`` right now."""
    if post.author_id == viewer_id:
        return True
    if post.status != PostStatus.PUBLISHED:
        return False
    if post.audience_type == AudienceType.ALL_USERS:
        return True
    if post.audience_type == AudienceType.FRIENDS:
        return are_friends(db, viewer_id, post.author_id)
    if post.audience_type == AudienceType.CIRCLE:
        return post.circle_id is not None and is_joined_member(db, post.circle_id, viewer_id)
    return False


def can_view_post(db: Session, viewer_id: str, post_id: str) -> bool:
    """Like :func:`can_view` but by id; missing posts are not viewable."""
    post = db.get(Post, post_id)
    return post is not None and can_view(db, viewer_id, post)


class _ViewerScope:
    """Relationship sets of one viewer, loaded at most once per listing."""

    def __init__(self, db: Session, viewer_id: str) -> None:
        self.db = db
        self.viewer_id = viewer_id

    @cached_property
    def friend_ids(self) -> set[str]:
        return accepted_friend_ids(self.db, self.viewer_id)

    @cached_property
    def circle_ids(self) -> set[str]:
        return joined_circle_ids(self.db, self.viewer_id)

    def allows(self, post: Post) -> bool:
        if post.author_id == self.viewer_id:
            return True
        if post.status != PostStatus.PUBLISHED:
            return False
        if post.audience_type == AudienceType.ALL_USERS:
            return True
        if post.audience_type == AudienceType.FRIENDS:
            return post.author_id in self.friend_ids
        if post.audience_type == AudienceType.CIRCLE:
            return post.circle_id in self.circle_ids
        return False


def filter_visible(db: Session, viewer_id: str, posts: Iterable[Post]) -> list[Post]:
    """Return the posts ``viewer_id`` may read, preserving input order."""
    scope = _ViewerScope(db, viewer_id)
    return [post for post in posts if scope.allows(post)]


def _edition_posts(db: Session, edition_id: str) -> Sequence[Post]:
    return db.scalars(
        select(Post).where(Post.edition_id == edition_id).order_by(*EDITION_ORDER)
    ).all()


def list_visible_posts(db: Session, viewer_id: str, edition_id: str) -> list[Post] | None:
    """Return the edition's posts visible to the viewer, or None if no such edition."""
    if db.get(Edition, edition_id) is None:
        return None
    return filter_visible(db, viewer_id, _edition_posts(db, edition_id))


def list_published_editions(db: Session, viewer_id: str) -> list[tuple[Edition, list[Post]]]:
    """Return every published edition, newest first, with its visible posts."""
    scope = _ViewerScope(db, viewer_id)
    return [
        (edition, [post for post in _edition_posts(db, edition.id) if scope.allows(post)])
        for edition in published_editions(db)
    ]
