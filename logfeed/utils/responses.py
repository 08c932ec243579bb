"""JSON envelopes for failed feed requests."""

from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse

from ..errors import GatewayServerError, LogFeedError


def error_response(message: str, *, status_code: int, detail: Optional[Any] = None) -> JSONResponse:
    """Build the ``{ok: false, error}`` body every failed request returns."""
    payload: Dict[str, Any] = {"ok": False, "error": message}
    if detail:
        payload["detail"] = detail
    return JSONResponse(payload, status_code=status_code)


def feed_error_response(exc: LogFeedError, *, status_code: int) -> JSONResponse:
    """Envelope for a LogFeedError, tagged with its kind.

    Gateway server errors also carry the upstream status so the renderer
    can tell an auth failure from an outage.
    """
    detail: Dict[str, Any] = {"kind": exc.kind}
    if isinstance(exc, GatewayServerError) and exc.status_code is not None:
        detail["upstream_status"] = exc.status_code
    return error_response(str(exc), status_code=status_code, detail=detail)
