from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Dict, Optional

import httpx
from pydantic import ValidationError

from ..config import get_settings
from ..errors import GatewayNetworkError, GatewayServerError
from ..logging_config import logger
from ..models.logs import LogWindow

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..services.feed.filters import LogFilters

REQUEST_LOGS_PATH = "/request-logs"


def _error_detail(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text.strip() or "Request failed"

    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict):
        return error.get("message") or error.get("code") or "Request failed"
    if isinstance(error, str) and error:
        return error
    return "Request failed"


class GatewayLogsClient:
    """Client for the gateway dashboard's request log listing."""

    def __init__(
        self,
        base_url: str,
        *,
        token: Optional[str] = None,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = (token or "").strip() or None
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._headers(),
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def list_request_logs(
        self,
        *,
        limit: int,
        offset: int = 0,
        filters: Optional["LogFilters"] = None,
    ) -> LogWindow:
        """Fetch one window of request logs, newest first."""
        params: Dict[str, Any] = {"limit": limit, "offset": max(offset, 0)}
        if filters is not None:
            params.update(filters.query_params())

        client = await self._get_client()
        try:
            response = await client.get(REQUEST_LOGS_PATH, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            detail = _error_detail(exc.response)
            logger.debug(
                "gateway returned error",
                extra={"status_code": exc.response.status_code, "detail": detail},
            )
            raise GatewayServerError(detail, status_code=exc.response.status_code) from exc
        except httpx.TimeoutException as exc:
            raise GatewayNetworkError(f"Request timed out after {self.timeout:g}s") from exc
        except httpx.HTTPError as exc:
            raise GatewayNetworkError(f"Request failed: {exc}") from exc

        try:
            return LogWindow.model_validate(response.json())
        except (json.JSONDecodeError, ValidationError) as exc:
            raise GatewayServerError(
                "Malformed request log response",
                status_code=response.status_code,
            ) from exc

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None


_gateway_client: Optional[GatewayLogsClient] = None


def get_gateway_client() -> GatewayLogsClient:
    """Get the singleton gateway client built from settings."""
    global _gateway_client

    if _gateway_client is None:
        settings = get_settings()
        if not settings.gateway_token:
            logger.warning("Gateway token not configured: requests are sent without Authorization")
        _gateway_client = GatewayLogsClient(
            settings.gateway_base_url,
            token=settings.gateway_token,
            timeout=settings.gateway_timeout_seconds,
        )
    return _gateway_client


__all__ = ["GatewayLogsClient", "REQUEST_LOGS_PATH", "get_gateway_client"]
