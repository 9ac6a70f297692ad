"""Circle-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field

from rogha.models import MembershipStatus

from .common import UTCDateTime


class CircleCreate(BaseModel):
    """Schema for creating a circle."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)


class CircleMemberAdd(BaseModel):
    user_id: str


class CircleMemberResponse(BaseModel):
    user_id: str
    status: MembershipStatus
    joined_at: UTCDateTime

    model_config = ConfigDict(from_attributes=True)


class CircleResponse(BaseModel):
    """Schema for circle information returned by the API."""

    id: str
    name: str
    description: str | None
    created_at: UTCDateTime
    members: list[CircleMemberResponse]

    model_config = ConfigDict(from_attributes=True)
