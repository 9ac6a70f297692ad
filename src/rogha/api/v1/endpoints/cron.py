"""Scheduler trigger for the weekly publication job."""

from __future__ import annotations

import logging
import secrets
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials

from rogha.api.v1.dependencies import SessionDep, optional_bearer_scheme, resolve_caller_id
from rogha.core.settings import settings
from rogha.schemas.edition import PublishRequest, PublishResponse

from .editions import run_publication

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cron", tags=["cron"])
BearerDep = Annotated[HTTPAuthorizationCredentials | None, Depends(optional_bearer_scheme)]


def _is_cron_secret(credentials: HTTPAuthorizationCredentials | None) -> bool:
    if credentials is None or not settings.cron_secret:
        return False
    return secrets.compare_digest(credentials.credentials, settings.cron_secret)


@router.get("/publish-weekly", response_model=PublishResponse)
async def scheduled_publish(credentials: BearerDep, db: SessionDep) -> PublishResponse:
    """Publish last week's edition; the scheduler authenticates with ``CRON_SECRET``."""
    if not _is_cron_secret(credentials):
        logger.warning("cron.publish unauthorized has_secret=%s", bool(settings.cron_secret))
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return run_publication(db, None, trigger="cron-bearer")


@router.post("/publish-weekly", response_model=PublishResponse)
async def manual_publish(
    credentials: BearerDep,
    db: SessionDep,
    payload: PublishRequest | None = None,
) -> PublishResponse:
    """Publish with either the scheduler secret or an operator's token.

    An explicit ``week_iso`` overrides the default of last week.
    """
    if _is_cron_secret(credentials):
        mode = "cron-bearer"
    else:
        user = resolve_caller_id(credentials.credentials, db) if credentials else None
        if user is None:
            logger.warning("cron.publish unauthorized manual trigger")
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
        if not settings.is_admin_email(user.email):
            logger.warning("cron.publish forbidden user=%s", user.id)
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        mode = "admin"
    week_iso = payload.week_iso if payload else None
    return run_publication(db, week_iso, trigger=mode)
