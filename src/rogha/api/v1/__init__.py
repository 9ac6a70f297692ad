"""Version 1 API endpoints."""

from .endpoints import (
    circles_router,
    cron_router,
    editions_router,
    friends_router,
    notifications_router,
    posts_router,
)

__all__ = [
    "circles_router",
    "cron_router",
    "editions_router",
    "friends_router",
    "notifications_router",
    "posts_router",
]
