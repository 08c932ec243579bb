"""Request drivers feeding windows into the log feed."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Awaitable, Callable, Optional, Set, Tuple

from ...errors import LogFeedError
from ...logging_config import logger
from .filters import LogFilters, filter_key
from .state import FeedMessage, HeadWindowArrived, PageWindowArrived

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ...gateway_client import GatewayLogsClient


HEAD = "head"
PAGE = "page"

DEFAULT_POLL_INTERVAL_SECONDS = 2.0


class WindowFetcher:
    """Fetch head and page windows and turn each result into a feed message.

    Each request is tagged with the filter key and the feed generation it
    was issued under, so the reducer can drop it if the filters moved on.
    Failures never produce a message. They go to ``on_error`` with the
    failing source and tag, and the cache keeps its last good value.
    """

    def __init__(
        self,
        client: "GatewayLogsClient",
        *,
        page_size: int,
        dispatch: Callable[[FeedMessage], object],
        on_error: Callable[[LogFeedError, str, str, int], None],
        on_success: Optional[Callable[[str, str, int], None]] = None,
    ) -> None:
        self._client = client
        self._page_size = page_size
        self._dispatch = dispatch
        self._on_error = on_error
        self._on_success = on_success
        self._in_flight: Set[Tuple[str, int, str, int]] = set()

    async def fetch_page(self, filters: LogFilters, offset: int, *, generation: int = 0) -> bool:
        """Fetch older history at *offset*. Returns False if nothing was delivered."""
        return await self._fetch(filters, offset, PAGE, generation)

    async def fetch_head(self, filters: LogFilters, *, generation: int = 0) -> bool:
        """Re-poll the newest page. Returns False if nothing was delivered."""
        return await self._fetch(filters, 0, HEAD, generation)

    async def _fetch(self, filters: LogFilters, offset: int, source: str, generation: int) -> bool:
        key = filter_key(filters)
        slot = (key, generation, source, offset)
        if slot in self._in_flight:
            logger.debug("log window fetch already in flight", extra={"source": source, "offset": offset})
            return False

        self._in_flight.add(slot)
        try:
            window = await self._client.list_request_logs(
                limit=self._page_size,
                offset=offset,
                filters=filters,
            )
        except LogFeedError as exc:
            logger.warning(
                "Log window fetch failed",
                extra={"source": source, "offset": offset, "error": str(exc)},
            )
            self._on_error(exc, source, key, generation)
            return False
        finally:
            self._in_flight.discard(slot)

        if source == HEAD:
            self._dispatch(HeadWindowArrived(filter_key=key, window=window, generation=generation))
        else:
            self._dispatch(
                PageWindowArrived(filter_key=key, offset=offset, window=window, generation=generation)
            )
        if self._on_success is not None:
            self._on_success(source, key, generation)
        return True


class HeadPoller:
    """Re-fetch the head of the feed on a fixed interval."""

    def __init__(
        self,
        refresh: Callable[[], Awaitable[object]],
        poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        *,
        is_paused: Optional[Callable[[], bool]] = None,
    ) -> None:
        self._refresh = refresh
        self._poll_interval = poll_interval_seconds
        self._is_paused = is_paused
        self._task: Optional[asyncio.Task[None]] = None
        self._running = False
        self._lock = asyncio.Lock()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        async with self._lock:
            if self._task and not self._task.done():
                return
            loop = asyncio.get_running_loop()
            self._running = True
            self._task = loop.create_task(self._run(), name="log-feed-head-poller")
            logger.info("Head poller started", extra={"interval_seconds": self._poll_interval})

    async def stop(self) -> None:
        async with self._lock:
            self._running = False
            if self._task:
                self._task.cancel()
                try:
                    await self._task
                except asyncio.CancelledError:
                    pass
                finally:
                    self._task = None
                logger.info("Head poller stopped")

    async def _run(self) -> None:
        while self._running:
            try:
                await self.poll_once()
            except asyncio.CancelledError:
                raise
            except Exception as exc:  # pragma: no cover
                logger.exception("Head poll failed", extra={"error": str(exc)})
            await asyncio.sleep(self._poll_interval)

    async def poll_once(self) -> bool:
        if self._is_paused is not None and self._is_paused():
            logger.debug("Head poll skipped while interaction is open")
            return False
        return bool(await self._refresh())


__all__ = ["DEFAULT_POLL_INTERVAL_SECONDS", "HEAD", "HeadPoller", "PAGE", "WindowFetcher"]
