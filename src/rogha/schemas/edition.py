"""Edition-related Pydantic schemas."""

from collections.abc import Iterable
from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from rogha.models import AudienceType, Edition, Post
from rogha.services.publication import PublishResult
from rogha.services.weeks import planned_publish_at

from .common import UTCDateTime
from .post import PostResponse


class EditionResponse(BaseModel):
    """Schema for edition metadata."""

    id: str
    title: str
    week_start: UTCDateTime
    published_at: UTCDateTime | None
    planned_publish_at: UTCDateTime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_edition(cls, edition: Edition) -> "EditionResponse":
        return cls(
            id=edition.id,
            title=edition.title,
            week_start=edition.week_start,
            published_at=edition.published_at,
            planned_publish_at=planned_publish_at(edition.week_start),
        )


class EditionWithPosts(EditionResponse):
    """An edition with the posts the caller may read.

    ``sections`` groups post ids by audience for presentation; ``posts``
    keeps the edition order.
    """

    posts: list[PostResponse] = Field(default_factory=list)
    sections: dict[AudienceType, list[str]] = Field(default_factory=dict)

    @classmethod
    def build(cls, edition: Edition, posts: Iterable[Post]) -> "EditionWithPosts":
        posts = list(posts)
        sections: dict[AudienceType, list[str]] = {}
        for post in posts:
            sections.setdefault(post.audience_type, []).append(post.id)
        base = EditionResponse.from_edition(edition)
        return cls(
            **base.model_dump(),
            posts=[PostResponse.model_validate(post) for post in posts],
            sections=sections,
        )


class PublishRequest(BaseModel):
    """Optional operator override of the week to publish."""

    week_iso: date | None = Field(
        None,
        description="Any date (YYYY-MM-DD) in the target week, in the edition timezone",
    )


class PublishResponse(BaseModel):
    """Outcome of a publication run."""

    ok: bool = True
    published: bool
    reason: str | None = None
    edition_id: str | None = None
    posts_published: int
    posts_archived: int = 0
    week_start: UTCDateTime

    @classmethod
    def from_result(cls, result: PublishResult) -> "PublishResponse":
        return cls(
            published=result.published,
            reason=result.reason.value if result.reason else None,
            edition_id=result.edition_id,
            posts_published=result.posts_published,
            posts_archived=result.posts_archived,
            week_start=result.week_start,
        )
