"""Notification inbox endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from rogha.api.v1.dependencies import CurrentUserDep, SessionDep
from rogha.schemas.notification import (
    MarkReadResponse,
    NotificationInbox,
    NotificationResponse,
    UnreadCountResponse,
)
from rogha.services import notifications as notification_service

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=NotificationInbox)
async def list_notifications(current_user: CurrentUserDep, db: SessionDep) -> NotificationInbox:
    """Return the caller's newest notifications and their unread total."""
    rows = notification_service.list_notifications(db, current_user.id)
    return NotificationInbox(
        items=[NotificationResponse.model_validate(row) for row in rows],
        unread=notification_service.unread_count(db, current_user.id),
    )


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(current_user: CurrentUserDep, db: SessionDep) -> UnreadCountResponse:
    return UnreadCountResponse(unread=notification_service.unread_count(db, current_user.id))


@router.post("/read", response_model=MarkReadResponse)
async def mark_read(current_user: CurrentUserDep, db: SessionDep) -> MarkReadResponse:
    """Mark everything in the caller's inbox as read."""
    return MarkReadResponse(marked=notification_service.mark_all_read(db, current_user.id))
