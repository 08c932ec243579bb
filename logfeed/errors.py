"""Error types surfaced by the log feed."""

from __future__ import annotations

from typing import Optional


class LogFeedError(RuntimeError):
    """Base class for failures the feed reports to the renderer."""

    kind = "error"


class GatewayNetworkError(LogFeedError):
    """Raised when the gateway could not be reached or timed out."""

    kind = "network"


class GatewayServerError(LogFeedError):
    """Raised when the gateway answers with a non-success response."""

    kind = "server"

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class FilterValidationError(LogFeedError, ValueError):
    """Raised when a filter set cannot be sent to the gateway."""

    kind = "validation"


__all__ = [
    "FilterValidationError",
    "GatewayNetworkError",
    "GatewayServerError",
    "LogFeedError",
]
