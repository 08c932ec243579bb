from .formatting import format_cost, nano_to_usd
from .responses import error_response, feed_error_response
from .timezones import (
    UTC,
    now_in_display_timezone,
    resolve_display_timezone,
    to_utc_isoformat,
)

__all__ = [
    "error_response",
    "feed_error_response",
    "format_cost",
    "nano_to_usd",
    "UTC",
    "now_in_display_timezone",
    "resolve_display_timezone",
    "to_utc_isoformat",
]
