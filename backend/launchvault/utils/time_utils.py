"""
Time Utilities

Functions:
- to_iso_utc(value): Render a date or timestamp as ISO-8601 UTC, "Z" suffixed
"""

from datetime import datetime, timezone


def to_iso_utc(value: str | datetime) -> str:
    """Return ISO-8601 UTC with millisecond precision and a Z suffix.

    Accepts "2018-05-01", "2018-05-01 12:00:00", "2018-05-01T12:00:00.123456"
    and offset-qualified forms. Naive values are taken as UTC.

    Raises:
        ValueError: if the string is not an ISO-8601 date or date-time, or
            its UTC equivalent falls outside years 1 to 9999.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        parsed = parsed.astimezone(timezone.utc)
    except OverflowError as e:
        raise ValueError(f"date out of range in UTC: {value!r}") from e
    return parsed.isoformat(timespec="milliseconds").replace("+00:00", "Z")
