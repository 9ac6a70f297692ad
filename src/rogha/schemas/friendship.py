"""Friendship-related Pydantic schemas."""

from pydantic import BaseModel, Field

from rogha.services.friendships import FriendState

from .common import UTCDateTime
from .user import UserSummary


class FriendRequestCreate(BaseModel):
    """Send a request to the user registered under ``email``."""

    email: str = Field(..., min_length=3, max_length=320)


class FriendStateResponse(BaseModel):
    """The friendship state from the caller's point of view."""

    state: FriendState


class FriendItem(BaseModel):
    state: FriendState
    created_at: UTCDateTime
    accepted_at: UTCDateTime | None
    user: UserSummary


class FriendListResponse(BaseModel):
    items: list[FriendItem]
