"""Live request log feed."""

from .cache import EMPTY_CACHE, Cache
from .controller import LogFeed, get_log_feed
from .fetcher import HeadPoller, WindowFetcher
from .filters import (
    LogFilters,
    TimeRangePreset,
    apply_preset,
    build_filters,
    detect_fixed_preset,
    filter_key,
    parse_datetime_input,
    resolve_time_input,
)
from .merge import merge_head, merge_page
from .state import (
    FeedState,
    FilterChanged,
    HeadWindowArrived,
    InteractionClosed,
    InteractionOpened,
    PageWindowArrived,
    PendingBuffer,
    reduce,
)

__all__ = [
    "Cache",
    "EMPTY_CACHE",
    "FeedState",
    "FilterChanged",
    "HeadPoller",
    "HeadWindowArrived",
    "InteractionClosed",
    "InteractionOpened",
    "LogFeed",
    "LogFilters",
    "PageWindowArrived",
    "PendingBuffer",
    "TimeRangePreset",
    "WindowFetcher",
    "apply_preset",
    "build_filters",
    "detect_fixed_preset",
    "filter_key",
    "get_log_feed",
    "merge_head",
    "merge_page",
    "parse_datetime_input",
    "reduce",
    "resolve_time_input",
]
