"""Shared Pydantic types for API payloads."""
from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field

from rogha.db.time import as_utc

# Some backends hand timestamps back without tzinfo; everything we store is UTC.
UTCDateTime = Annotated[datetime, AfterValidator(as_utc)]


class ErrorResponse(BaseModel):
    """Body returned for rejected requests."""

    code: str = Field(..., description="Stable machine-readable reason code")
    detail: str = Field(..., description="Human-readable explanation")
