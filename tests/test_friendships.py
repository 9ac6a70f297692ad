"""Tests for the friendship graph service."""

import pytest
from sqlalchemy import select

from rogha.core.errors import ForbiddenActionError, InvalidRequestError, NotFoundError
from rogha.models import Friendship, FriendshipStatus
from rogha.services import friendships as friend_service
from rogha.services.friendships import FriendBox, FriendState


def test_request_creates_single_canonical_edge(db_session, alice, bob) -> None:
    state = friend_service.request_friendship(db_session, alice.id, bob.id)
    assert state == FriendState.PENDING_OUTGOING

    rows = db_session.scalars(select(Friendship)).all()
    assert len(rows) == 1
    assert rows[0].a_id < rows[0].b_id
    assert rows[0].requester_id == alice.id
    assert friend_service.perspective_state(rows[0], bob.id) == FriendState.PENDING_INCOMING


def test_repeated_request_is_noop(db_session, alice, bob) -> None:
    friend_service.request_friendship(db_session, alice.id, bob.id)
    assert friend_service.request_friendship(db_session, alice.id, bob.id) == FriendState.PENDING_OUTGOING
    assert len(db_session.scalars(select(Friendship)).all()) == 1


def test_request_against_incoming_is_rejected(db_session, alice, bob) -> None:
    friend_service.request_friendship(db_session, alice.id, bob.id)
    with pytest.raises(InvalidRequestError) as exc:
        friend_service.request_friendship(db_session, bob.id, alice.id)
    assert exc.value.code == "friends.OPPOSITE_PENDING_EXISTS"


def test_self_request_is_rejected(db_session, alice) -> None:
    with pytest.raises(InvalidRequestError) as exc:
        friend_service.request_friendship(db_session, alice.id, alice.id)
    assert exc.value.code == "friends.SELF_NOT_ALLOWED"


def test_accept_by_addressee(db_session, alice, bob) -> None:
    friend_service.request_friendship(db_session, alice.id, bob.id)
    assert friend_service.accept_friendship(db_session, bob.id, alice.id) == FriendState.ACCEPTED

    row = friend_service.get_friendship(db_session, alice.id, bob.id)
    assert row.status == FriendshipStatus.ACCEPTED
    assert row.accepted_at is not None
    assert friend_service.are_friends(db_session, alice.id, bob.id)
    assert friend_service.are_friends(db_session, bob.id, alice.id)
    assert friend_service.accepted_friend_ids(db_session, alice.id) == {bob.id}

    with pytest.raises(InvalidRequestError) as exc:
        friend_service.request_friendship(db_session, alice.id, bob.id)
    assert exc.value.code == "friends.ALREADY_FRIENDS"


def test_requester_cannot_accept_own_request(db_session, alice, bob) -> None:
    friend_service.request_friendship(db_session, alice.id, bob.id)
    with pytest.raises(ForbiddenActionError) as exc:
        friend_service.accept_friendship(db_session, alice.id, bob.id)
    assert exc.value.code == "friends.ONLY_ADDRESSEE_CAN_ACCEPT"


def test_accept_without_request(db_session, alice, bob) -> None:
    with pytest.raises(NotFoundError):
        friend_service.accept_friendship(db_session, bob.id, alice.id)


def test_decline_removes_edge(db_session, alice, bob) -> None:
    friend_service.request_friendship(db_session, alice.id, bob.id)
    assert friend_service.decline_friendship(db_session, bob.id, alice.id) == FriendState.NONE
    assert friend_service.get_friendship(db_session, alice.id, bob.id) is None


def test_unfriend_either_side(db_session, alice, bob, befriend) -> None:
    befriend(alice, bob)
    assert friend_service.unfriend(db_session, bob.id, alice.id) == FriendState.NONE
    assert not friend_service.are_friends(db_session, alice.id, bob.id)
    # Nothing left to remove.
    assert friend_service.unfriend(db_session, alice.id, bob.id) == FriendState.NONE


def test_cannot_unfriend_pending(db_session, alice, bob) -> None:
    friend_service.request_friendship(db_session, alice.id, bob.id)
    with pytest.raises(ForbiddenActionError):
        friend_service.unfriend(db_session, alice.id, bob.id)


def test_list_boxes(db_session, alice, bob, carol, befriend) -> None:
    befriend(alice, bob)
    friend_service.request_friendship(db_session, carol.id, alice.id)

    accepted = friend_service.list_friendships(db_session, alice.id, FriendBox.ACCEPTED)
    incoming = friend_service.list_friendships(db_session, alice.id, FriendBox.INCOMING)
    outgoing = friend_service.list_friendships(db_session, carol.id, FriendBox.OUTGOING)

    assert [row.other_id(alice.id) for row, _ in accepted] == [bob.id]
    assert [(row.other_id(alice.id), state) for row, state in incoming] == [
        (carol.id, FriendState.PENDING_INCOMING)
    ]
    assert [row.other_id(carol.id) for row, _ in outgoing] == [alice.id]
