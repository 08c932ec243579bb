from .feed import FeedErrorInfo, FeedSnapshot, FeedSummary, FilterUpdateRequest, GateResponse
from .logs import LogEntry, LogWindow
from .meta import HealthResponse, RootResponse

__all__ = [
    "FeedErrorInfo",
    "FeedSnapshot",
    "FeedSummary",
    "FilterUpdateRequest",
    "GateResponse",
    "HealthResponse",
    "LogEntry",
    "LogWindow",
    "RootResponse",
]
