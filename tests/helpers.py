"""Builders and an in-memory gateway shared by the test modules."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional, Union

import httpx

from logfeed.gateway_client import GatewayLogsClient
from logfeed.models import LogEntry, LogWindow

GATEWAY_URL = "http://gateway.test/api/dashboard"


def entry(entry_id: str, **fields: Any) -> LogEntry:
    fields.setdefault("created_at", "2024-05-01T12:00:00Z")
    fields.setdefault("status", "success")
    return LogEntry(id=entry_id, **fields)


def window(*entries: Union[str, LogEntry], total: Optional[int] = None, aggregate: str = "0") -> LogWindow:
    items = tuple(item if isinstance(item, LogEntry) else entry(item) for item in entries)
    return LogWindow(
        items=items,
        total=len(items) if total is None else total,
        aggregate=aggregate,
    )


def ids(items) -> List[str]:
    return [item.id for item in items]


def make_rows(count: int, *, prefix: str = "log", status: str = "success") -> List[Dict[str, Any]]:
    """Newest-first rows ``prefix-count`` down to ``prefix-1``."""
    return [
        {
            "id": f"{prefix}-{index}",
            "created_at": f"2024-05-01T12:{index // 60:02d}:{index % 60:02d}Z",
            "status": status,
            "model": "gpt-4o-mini",
            "charge_nano_usd": "1000",
        }
        for index in range(count, 0, -1)
    ]


class FakeGateway:
    """Serves the dashboard's request-log listing from an in-memory list."""

    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None, *, total_charge: str = "0") -> None:
        self.rows: List[Dict[str, Any]] = list(rows or [])
        self.total_charge = total_charge
        self.requests: List[httpx.Request] = []
        self.error: Union[httpx.Response, Exception, None] = None
        self.hold = asyncio.Event()
        self.held_requests = 0
        self.request_started = asyncio.Event()

    def prepend(self, *rows: Dict[str, Any]) -> None:
        self.rows[:0] = list(rows)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.held_requests > 0:
            self.held_requests -= 1
            self.request_started.set()
            await self.hold.wait()
        if isinstance(self.error, Exception):
            raise self.error
        if self.error is not None:
            return self.error

        params = request.url.params
        limit = int(params.get("limit", "50"))
        offset = int(params.get("offset", "0"))
        status = params.get("status")
        matching = [row for row in self.rows if not status or row.get("status") == status]
        return httpx.Response(
            200,
            json={
                "data": matching[offset : offset + limit],
                "total": len(matching),
                "total_charge": self.total_charge,
                "limit": limit,
                "offset": offset,
            },
        )

    def client(self, **kwargs: Any) -> GatewayLogsClient:
        kwargs.setdefault("token", "secret-token")
        return GatewayLogsClient(GATEWAY_URL, transport=httpx.MockTransport(self.handler), **kwargs)
