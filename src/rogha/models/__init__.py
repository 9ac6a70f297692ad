"""SQLAlchemy models for the Rogha application."""

from .circle import Circle, CircleMembership, MembershipStatus
from .edition import Edition
from .friendship import Friendship, FriendshipStatus
from .notification import Notification, NotificationType
from .post import TERMINAL_STATUSES, AudienceType, Post, PostStatus
from .user import User

__all__ = [
    "Circle", "CircleMembership", "MembershipStatus",
    "Edition",
    "Friendship", "FriendshipStatus",
    "Notification", "NotificationType",
    "Post", "PostStatus", "AudienceType", "TERMINAL_STATUSES",
    "User",
]
