"""Shared helpers for working with the configured display timezone."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..config import get_settings
from ..logging_config import logger

UTC = timezone.utc


def resolve_display_timezone(name: Optional[str] = None, *, default: str = "UTC") -> ZoneInfo:
    """Resolve the configured timezone to a ZoneInfo, falling back to default on error."""

    tz_name = (name or get_settings().display_timezone or default).strip()
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(
            "unknown timezone; defaulting to %s",
            default,
            extra={"timezone": tz_name},
        )
    return ZoneInfo(default)


def now_in_display_timezone(name: Optional[str] = None) -> datetime:
    """Return the current aware time in the display timezone."""

    return datetime.now(resolve_display_timezone(name))


def to_utc_isoformat(dt: datetime) -> str:
    """Format *dt* like a browser's ``toISOString``; naive values are taken as UTC."""

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


__all__ = [
    "UTC",
    "now_in_display_timezone",
    "resolve_display_timezone",
    "to_utc_isoformat",
]
