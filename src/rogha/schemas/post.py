"""Post-related Pydantic schemas."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from rogha.models import AudienceType, PostStatus

from .common import UTCDateTime


class PostCreate(BaseModel):
    """Schema for creating a new draft."""

    title: str | None = Field(None, max_length=300)
    content: dict[str, Any] | None = Field(None, description="Serialized editor state")
    audience_type: AudienceType = AudienceType.FRIENDS
    circle_id: str | None = None


class PostUpdate(BaseModel):
    """Partial update guarded by the version the client last loaded.

    Only fields explicitly present in the request are applied.
    """

    expected_version: int = Field(..., ge=1, description="Version the client last read")
    title: str | None = Field(None, max_length=300)
    content: dict[str, Any] | None = None
    status: PostStatus | None = None
    audience_type: AudienceType | None = None
    circle_id: str | None = None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude={"expected_version"})


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: str
    author_id: str
    title: str | None
    content: dict[str, Any] | None
    status: PostStatus
    audience_type: AudienceType
    circle_id: str | None
    edition_id: str | None
    version: int
    created_at: UTCDateTime
    updated_at: UTCDateTime

    model_config = ConfigDict(from_attributes=True)


class PostUpdateResponse(BaseModel):
    """Successful compare-and-swap: the caller's new version."""

    status: Literal["ok"] = "ok"
    version: int
    updated_at: UTCDateTime
