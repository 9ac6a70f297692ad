"""Tests for read visibility of posts and editions."""

from datetime import UTC, datetime

from sqlalchemy import update

from conftest import PUBLISH_NOW, SUBMIT_NOW
from rogha.models import AudienceType, Post
from rogha.services import circles as circle_service
from rogha.services import friendships as friend_service
from rogha.services.publication import publish_edition
from rogha.services.visibility import (
    can_view,
    can_view_post,
    list_published_editions,
    list_visible_posts,
)


def _publish(db_session) -> str:
    result = publish_edition(db_session, SUBMIT_NOW, now=PUBLISH_NOW)
    return result.edition_id


def test_author_sees_own_unpublished_post(db_session, alice, bob, befriend, make_post) -> None:
    befriend(alice, bob)
    post = make_post(alice, submit=True)
    assert can_view(db_session, alice.id, post)
    assert not can_view(db_session, bob.id, post)


def test_friends_post_visible_to_friends_only(db_session, alice, bob, carol, befriend, make_post) -> None:
    befriend(alice, bob)
    post = make_post(alice, submit=True)
    _publish(db_session)
    db_session.refresh(post)

    assert can_view(db_session, bob.id, post)
    assert not can_view(db_session, carol.id, post)


def test_all_users_post_visible_to_everyone(db_session, alice, carol, make_post) -> None:
    post = make_post(alice, audience_type=AudienceType.ALL_USERS, submit=True)
    _publish(db_session)
    assert can_view_post(db_session, carol.id, post.id)
    assert not can_view_post(db_session, carol.id, "missing")


def test_unfriending_hides_published_posts(db_session, alice, bob, befriend, make_post) -> None:
    befriend(alice, bob)
    post = make_post(alice, submit=True)
    edition_id = _publish(db_session)
    assert [p.id for p in list_visible_posts(db_session, bob.id, edition_id)] == [post.id]

    friend_service.unfriend(db_session, bob.id, alice.id)
    assert list_visible_posts(db_session, bob.id, edition_id) == []


def test_late_friendship_reveals_older_posts(db_session, alice, bob, make_post) -> None:
    post = make_post(alice, submit=True)
    edition_id = _publish(db_session)
    assert list_visible_posts(db_session, bob.id, edition_id) == []

    friend_service.request_friendship(db_session, bob.id, alice.id)
    friend_service.accept_friendship(db_session, alice.id, bob.id)
    assert [p.id for p in list_visible_posts(db_session, bob.id, edition_id)] == [post.id]


def test_circle_post_follows_membership(db_session, alice, bob, carol, befriend, make_post) -> None:
    befriend(alice, bob)
    befriend(alice, carol)
    circle = circle_service.create_circle(db_session, alice.id, "Choir")
    circle_service.add_member(db_session, circle.id, alice.id, bob.id)
    post = make_post(alice, audience_type=AudienceType.CIRCLE, circle_id=circle.id, submit=True)
    _publish(db_session)
    db_session.refresh(post)

    # Carol is a friend but not in the circle.
    assert can_view(db_session, bob.id, post)
    assert not can_view(db_session, carol.id, post)

    circle_service.leave_circle(db_session, circle.id, bob.id)
    assert not can_view(db_session, bob.id, post)


def test_unknown_edition(db_session, alice) -> None:
    assert list_visible_posts(db_session, alice.id, "missing") is None


def test_edition_order_newest_update_first_then_creation(db_session, alice, bob, befriend, make_post) -> None:
    befriend(alice, bob)
    first = make_post(alice, title="first", submit=True)
    second = make_post(alice, title="second", submit=True)
    third = make_post(alice, title="third", submit=True)
    edition_id = _publish(db_session)

    db_session.execute(update(Post).where(Post.id == first.id).values(
        updated_at=datetime(2026, 3, 9, 8, 0, tzinfo=UTC),
        created_at=datetime(2026, 3, 3, 1, 0, tzinfo=UTC),
    ))
    db_session.execute(update(Post).where(Post.id == second.id).values(
        updated_at=datetime(2026, 3, 9, 9, 0, tzinfo=UTC),
        created_at=datetime(2026, 3, 3, 2, 0, tzinfo=UTC),
    ))
    db_session.execute(update(Post).where(Post.id == third.id).values(
        updated_at=datetime(2026, 3, 9, 8, 0, tzinfo=UTC),
        created_at=datetime(2026, 3, 3, 3, 0, tzinfo=UTC),
    ))
    db_session.commit()

    ordered = [p.title for p in list_visible_posts(db_session, bob.id, edition_id)]
    assert ordered == ["second", "first", "third"]


def test_published_editions_newest_week_first(db_session, alice, bob, befriend, make_post) -> None:
    befriend(alice, bob)
    make_post(alice, title="march", submit=True)
    make_post(alice, title="april", submit=True, now=datetime(2026, 4, 8, 18, 0, tzinfo=UTC))
    make_post(alice, title="unpublished week", submit=True, now=datetime(2026, 5, 6, 18, 0, tzinfo=UTC))
    publish_edition(db_session, SUBMIT_NOW, now=PUBLISH_NOW)
    publish_edition(db_session, datetime(2026, 4, 8, 18, 0, tzinfo=UTC))

    listing = list_published_editions(db_session, bob.id)
    assert [edition.title for edition, _ in listing] == ["Week of 2026-04-06", "Week of 2026-03-02"]
    assert [[p.title for p in posts] for _, posts in listing] == [["april"], ["march"]]


def _friends_post_seen_by(db_session, make_user, befriend, make_post, author_id, viewer_id) -> bool:
    author = make_user("Author", user_id=author_id)
    viewer = make_user("Viewer", user_id=viewer_id)
    befriend(viewer, author)
    post = make_post(author, submit=True)
    _publish(db_session)
    db_session.refresh(post)
    return can_view(db_session, viewer.id, post)


def test_friend_sees_post_when_viewer_id_sorts_first(db_session, make_user, befriend, make_post) -> None:
    assert _friends_post_seen_by(
        db_session, make_user, befriend, make_post, author_id="zzzz-author", viewer_id="aaaa-viewer"
    )


def test_friend_sees_post_when_author_id_sorts_first(db_session, make_user, befriend, make_post) -> None:
    assert _friends_post_seen_by(
        db_session, make_user, befriend, make_post, author_id="aaaa-author", viewer_id="zzzz-viewer"
    )
