"""Service layer components."""

from .feed import LogFeed, LogFilters, get_log_feed


__all__ = [
    "LogFeed",
    "LogFilters",
    "get_log_feed",
]
