"""Friendship endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, Response, status
from sqlalchemy import select

from rogha.api.v1.dependencies import CurrentUserDep, SessionDep
from rogha.core.errors import NotFoundError
from rogha.models import User
from rogha.schemas.friendship import (
    FriendItem,
    FriendListResponse,
    FriendRequestCreate,
    FriendStateResponse,
)
from rogha.schemas.user import UserSummary
from rogha.services import friendships as friend_service
from rogha.services.friendships import FriendBox, FriendState

router = APIRouter(prefix="/friends", tags=["friends"])


@router.get("/", response_model=FriendListResponse)
async def list_friends(
    current_user: CurrentUserDep,
    db: SessionDep,
    box: FriendBox = FriendBox.ACCEPTED,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
) -> FriendListResponse:
    """List accepted friends, or incoming or outgoing requests."""
    edges = friend_service.list_friendships(db, current_user.id, box, limit)
    items = []
    for row, state in edges:
        other = db.get(User, row.other_id(current_user.id))
        if other is None:
            continue
        items.append(
            FriendItem(
                state=state,
                created_at=row.created_at,
                accepted_at=row.accepted_at,
                user=UserSummary.model_validate(other),
            )
        )
    return FriendListResponse(items=items)


@router.post("/request", response_model=FriendStateResponse, status_code=status.HTTP_201_CREATED)
async def send_request(
    request_data: FriendRequestCreate,
    response: Response,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> FriendStateResponse:
    """Send a friend request to a registered user by e-mail.

    A repeated request is answered with 200 and the unchanged state.
    """
    target = db.scalar(select(User).where(User.email == request_data.email.strip().lower()))
    if target is None:
        raise NotFoundError("common.USER_NOT_FOUND", "No user with that e-mail.")
    already = friend_service.get_friendship(db, current_user.id, target.id) is not None
    state = friend_service.request_friendship(db, current_user.id, target.id)
    if already and state == FriendState.PENDING_OUTGOING:
        response.status_code = status.HTTP_200_OK
    return FriendStateResponse(state=state)


@router.post("/{user_id}/accept", response_model=FriendStateResponse)
async def accept_request(user_id: str, current_user: CurrentUserDep, db: SessionDep) -> FriendStateResponse:
    """Accept the pending request sent by ``user_id``."""
    return FriendStateResponse(state=friend_service.accept_friendship(db, current_user.id, user_id))


@router.post("/{user_id}/decline", response_model=FriendStateResponse)
async def decline_request(user_id: str, current_user: CurrentUserDep, db: SessionDep) -> FriendStateResponse:
    """Decline the pending request sent by ``user_id``."""
    return FriendStateResponse(state=friend_service.decline_friendship(db, current_user.id, user_id))


@router.delete("/{user_id}", response_model=FriendStateResponse)
async def remove_friend(user_id: str, current_user: CurrentUserDep, db: SessionDep) -> FriendStateResponse:
    """Unfriend ``user_id``."""
    return FriendStateResponse(state=friend_service.unfriend(db, current_user.id, user_id))
