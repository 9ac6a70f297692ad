"""API endpoint modules for version 1."""

from .circles import router as circles_router
from .cron import router as cron_router
from .editions import router as editions_router
from .friends import router as friends_router
from .notifications import router as notifications_router
from .posts import router as posts_router

__all__ = [
    "circles_router",
    "cron_router",
    "editions_router",
    "friends_router",
    "notifications_router",
    "posts_router",
]
