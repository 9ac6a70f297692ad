"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .circle import CircleCreate, CircleMemberAdd, CircleMemberResponse, CircleResponse
from .common import ErrorResponse
from .edition import EditionResponse, EditionWithPosts, PublishRequest, PublishResponse
from .friendship import FriendItem, FriendListResponse, FriendRequestCreate, FriendStateResponse
from .notification import MarkReadResponse, NotificationInbox, NotificationResponse, UnreadCountResponse
from .post import PostCreate, PostResponse, PostUpdate, PostUpdateResponse
from .user import UserSummary

__all__ = [
    "CircleCreate", "CircleMemberAdd", "CircleMemberResponse", "CircleResponse",
    "ErrorResponse",
    "EditionResponse", "EditionWithPosts", "PublishRequest", "PublishResponse",
    "FriendItem", "FriendListResponse", "FriendRequestCreate", "FriendStateResponse",
    "MarkReadResponse", "NotificationInbox", "NotificationResponse", "UnreadCountResponse",
    "PostCreate", "PostResponse", "PostUpdate", "PostUpdateResponse",
    "UserSummary",
]
