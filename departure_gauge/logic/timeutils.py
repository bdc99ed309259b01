"""Duration and timestamp helpers shared by the scoring engine."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
import math
import re

logger = logging.getLogger(__name__)

_FRACTION_RE = re.compile(r"\.(\d+)")


def utc_now() -> datetime:
    """Return the current instant as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def resolve_now(now: datetime | None) -> datetime:
    if now is None:
        return utc_now()
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def truncate_to_minute(now: datetime) -> datetime:
    return now.replace(second=0, microsecond=0)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (12.5 -> 13, -0.5 -> 0)."""
    return int(math.floor(value + 0.5))


def parse_duration_to_minutes(duration: str | None) -> int:
    """Parse a provider duration such as ``"1234s"`` into whole minutes."""
    if not duration:
        return 0
    if not isinstance(duration, str):
        logger.warning("Unparsable duration received: %r", duration)
        return 0
    try:
        seconds = float(duration.strip().rstrip("s"))
    except ValueError:
        seconds = math.nan
    if not math.isfinite(seconds) or seconds < 0:
        logger.warning("Unparsable duration received: %r", duration)
        return 0
    return round_half_up(seconds / 60.0)


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an RFC 3339 timestamp into an aware datetime, or None if invalid."""
    if not value:
        return None
    if not isinstance(value, str):
        logger.warning("Invalid timestamp received: %r", value)
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    # Providers may send nanoseconds; datetime only holds microseconds.
    text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        logger.warning("Invalid timestamp received: %r", value)
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def minutes_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 60.0


def whole_minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, truncated toward zero."""
    return int(minutes_between(start, end))


def wait_minutes(departure: datetime, now: datetime) -> int:
    """Minutes until departure, rounded, never negative."""
    return max(0, round_half_up(minutes_between(now, departure)))


def format_duration(minutes: int) -> str:
    if minutes < 60:
        return f"{minutes} min"
    hours, mins = divmod(minutes, 60)
    if mins == 0:
        return f"{hours} hr"
    return f"{hours} hr {mins} min"


def format_clock(dt: datetime | None) -> str:
    """Format an instant as a local 12-hour clock time, e.g. ``3:05 PM``."""
    if dt is None:
        return "Invalid time"
    value = dt.astimezone().strftime("%I:%M %p")
    return value[1:] if value.startswith("0") else value


__all__ = [
    "utc_now",
    "resolve_now",
    "truncate_to_minute",
    "round_half_up",
    "parse_duration_to_minutes",
    "parse_timestamp",
    "minutes_between",
    "whole_minutes_between",
    "wait_minutes",
    "format_duration",
    "format_clock",
]
