"""
Datetime utilities.

UTC for anything stored or compared; local wall-clock only for the
human-readable log timestamp.
"""

import re
from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def wall_clock(moment: datetime | None = None) -> str:
    """
    Return ``HH:MM:SS`` in the local timezone (log entry timestamps).

    Args:
        moment: Aware datetime to format; defaults to now.

    Returns:
        Local time of day as a string
    """
    moment = moment or utc_now()
    return moment.astimezone().strftime("%H:%M:%S")


def from_rfc3339(value: str) -> datetime:
    """
    Parse an RFC 3339 timestamp as returned by Google REST APIs.

    Accepts the trailing ``Z`` and up to nanosecond precision (truncated
    to microseconds).

    Args:
        value: e.g. ``2024-05-01T10:00:00.123456789Z``

    Returns:
        UTC-aware datetime
    """
    text = value.replace("Z", "+00:00")
    if "." in text:
        head, _, tail = text.partition(".")
        digits = re.match(r"\d*", tail).group()
        offset = tail[len(digits):]
        text = f"{head}.{digits[:6].ljust(6, '0')}{offset}"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)
