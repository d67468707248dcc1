"""Helpers for the canonical instant representation used for stored dates.

Every date that reaches the database is an aware ``datetime`` in UTC. Month
windows for listing and the ``YYYY-MM`` key used by statistics are both
computed against that representation, never against a display timezone.
"""

import calendar
from datetime import UTC, date, datetime, time

from src.exceptions import InvalidInputError


def to_canonical_instant(value: str | date | datetime) -> datetime:
    """Convert an ISO 8601 string, date or datetime to an aware UTC datetime.

    Naive values are taken to already be in UTC. Date-only values resolve to
    midnight UTC.
    """
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise InvalidInputError("Date must not be empty")
        try:
            value = datetime.fromisoformat(text)
        except ValueError as e:
            raise InvalidInputError(f"Invalid date: {value!r}") from e

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=UTC)

    raise InvalidInputError(f"Invalid date: {value!r}")


def month_bounds(instant: datetime) -> tuple[datetime, datetime]:
    """Return the inclusive first and last instant of the UTC month containing ``instant``."""
    instant = to_canonical_instant(instant)
    last_day = calendar.monthrange(instant.year, instant.month)[1]
    start = datetime(instant.year, instant.month, 1, tzinfo=UTC)
    end = datetime.combine(date(instant.year, instant.month, last_day), time.max, tzinfo=UTC)
    return start, end


def year_month_key(instant: datetime) -> str:
    """Format the ``YYYY-MM`` grouping key for an instant."""
    return to_canonical_instant(instant).strftime("%Y-%m")
