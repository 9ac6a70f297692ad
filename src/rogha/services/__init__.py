"""Business logic services for the Rogha application."""

from .notifications import LoggingSubmissionNotifier, SubmissionNotifier, get_notifier
from .posts import PostUpdateResult, UpdateStatus, update_post
from .publication import PublishResult, PublishSkipReason, publish_edition
from .visibility import can_view, can_view_post, filter_visible, list_visible_posts
from .weeks import week_start

__all__ = [
    "LoggingSubmissionNotifier", "SubmissionNotifier", "get_notifier",
    "PostUpdateResult", "UpdateStatus", "update_post",
    "PublishResult", "PublishSkipReason", "publish_edition",
    "can_view", "can_view_post", "filter_visible", "list_visible_posts",
    "week_start",
]
