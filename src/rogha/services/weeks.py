"""Week-key computation for editions.

Every edition is keyed by the Monday 00:00 of its week in the edition
timezone, represented as an absolute UTC instant. All helpers take the
instant explicitly so callers (and tests) control the clock.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from rogha.core.settings import settings
from rogha.db.time import as_utc, utcnow


def _zone(tz: str | None) -> ZoneInfo:
    return ZoneInfo(tz or settings.edition_timezone)


def week_start(instant: datetime | None = None, tz: str | None = None) -> datetime:
    """Return the canonical week key for ``instant`` (default: now).

    Naive instants are interpreted as UTC. Any two instants in the same local
    calendar week map to the identical value, so the result is safe to use as
    a unique lookup key. Applying the function to its own output is a no-op.
    """
    zone = _zone(tz)
    local = as_utc(instant or utcnow()).astimezone(zone)
    monday = local.date() - timedelta(days=local.weekday())
    return datetime.combine(monday, time.min, tzinfo=zone).astimezone(UTC)


def week_label(start: datetime, tz: str | None = None) -> str:
    """Return the local ``YYYY-MM-DD`` date of a week key."""
    return as_utc(start).astimezone(_zone(tz)).date().isoformat()


def edition_title(start: datetime, tz: str | None = None) -> str:
    return f"Week of {week_label(start, tz)}"


def planned_publish_at(start: datetime) -> datetime:
    """Return when the scheduler is expected to publish the given week."""
    planned = as_utc(start) + timedelta(days=7)
    return planned.replace(hour=settings.publish_hour_utc, minute=0, second=0, microsecond=0)


def local_date_instant(day: date, tz: str | None = None) -> datetime:
    """Return local noon of ``day`` as UTC, for operator-supplied week dates."""
    return datetime.combine(day, time(12), tzinfo=_zone(tz)).astimezone(UTC)


def default_publish_target(now: datetime | None = None) -> datetime:
    """Return the instant whose week a scheduled run should publish.

    The trigger fires early on Monday, so "yesterday" lands in the week that
    just ended.
    """
    return as_utc(now or utcnow()) - timedelta(days=1)
