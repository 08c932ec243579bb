"""Live request log feed: owns the feed state and wires fetchers into it."""

from __future__ import annotations

from typing import Callable, List, Optional

from ...config import get_settings
from ...errors import LogFeedError
from ...gateway_client import GatewayLogsClient, get_gateway_client
from ...logging_config import logger
from ...models.feed import FeedErrorInfo, FeedSnapshot, FeedSummary
from ...utils.formatting import format_cost
from ...utils.timezones import now_in_display_timezone
from .cache import Cache
from .fetcher import HeadPoller, WindowFetcher
from .filters import LogFilters, TimeRangePreset, detect_fixed_preset, filter_key
from .state import (
    FeedMessage,
    FeedState,
    FilterChanged,
    InteractionClosed,
    InteractionOpened,
    reduce,
)

Listener = Callable[[FeedState], None]


class LogFeed:
    """Single consistent, newest-first view over the gateway's request logs.

    All state changes go through :meth:`dispatch`, which runs the reducer
    synchronously, so two windows landing close together are still applied
    one after the other.
    """

    def __init__(
        self,
        client: GatewayLogsClient,
        *,
        page_size: int = 100,
        poll_interval_seconds: float = 2.0,
        pause_head_poll_while_interacting: bool = True,
        filters: Optional[LogFilters] = None,
    ) -> None:
        self._filters = filters or LogFilters()
        self._state = FeedState(filter_key=filter_key(self._filters))
        self._preset: Optional[TimeRangePreset] = None
        self._last_error: Optional[FeedErrorInfo] = None
        self._listeners: List[Listener] = []
        self._pause_head_poll = pause_head_poll_while_interacting
        self._fetcher = WindowFetcher(
            client,
            page_size=page_size,
            dispatch=self.dispatch,
            on_error=self._record_error,
            on_success=self._clear_error,
        )
        self._poller = HeadPoller(
            self.refresh,
            poll_interval_seconds,
            is_paused=self._head_poll_paused,
        )

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------
    @property
    def state(self) -> FeedState:
        return self._state

    @property
    def cache(self) -> Cache:
        return self._state.cache

    @property
    def filters(self) -> LogFilters:
        return self._filters

    @property
    def last_error(self) -> Optional[FeedErrorInfo]:
        return self._last_error

    @property
    def poller(self) -> HeadPoller:
        return self._poller

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* with each new state; returns an unsubscribe callback."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def dispatch(self, message: FeedMessage) -> FeedState:
        previous = self._state
        self._state = reduce(previous, message)
        if self._state is not previous:
            for listener in list(self._listeners):
                listener(self._state)
        return self._state

    # ------------------------------------------------------------------
    # Renderer callbacks
    # ------------------------------------------------------------------
    async def change_filters(self, filters: LogFilters, *, preset: Optional[TimeRangePreset] = None) -> bool:
        """Switch to *filters*, discarding everything loaded for the old set."""
        key = filter_key(filters)
        if key == self._state.filter_key:
            if preset is not None:
                self._preset = preset
            return False

        self._filters = filters
        self._preset = preset
        self._last_error = None
        self.dispatch(FilterChanged(filter_key=key))
        logger.info("Log feed filters changed", extra={"filter_key": key})
        await self._fetcher.fetch_head(filters, generation=self._state.generation)
        return True

    async def reach_end(self) -> bool:
        """Load the next page of older entries if the server has more."""
        cache = self._state.cache
        if not cache.has_more:
            return False
        return await self._fetcher.fetch_page(
            self._filters,
            len(cache.items),
            generation=self._state.generation,
        )

    async def refresh(self) -> bool:
        return await self._fetcher.fetch_head(self._filters, generation=self._state.generation)

    def open_interaction(self) -> int:
        return self.dispatch(InteractionOpened()).gate_count

    def close_interaction(self) -> int:
        return self.dispatch(InteractionClosed()).gate_count

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    async def start(self) -> None:
        await self._poller.start()

    async def stop(self) -> None:
        await self._poller.stop()

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------
    def snapshot(self) -> FeedSnapshot:
        state = self._state
        cache = state.cache
        return FeedSnapshot(
            filter_key=state.filter_key,
            filters=self._filters.query_params(),
            items=list(cache.items),
            total=cache.total,
            aggregate=str(cache.aggregate),
            has_more=cache.has_more,
            offset=state.offset,
            gate_count=state.gate_count,
            pending_head=state.pending.head is not None,
            pending_page=state.pending.page is not None,
            last_error=self._last_error,
            time_range_preset=self._time_range_preset(),
            summary=FeedSummary(
                first=0 if cache.total == 0 else 1,
                last=min(len(cache.items), cache.total),
                total=cache.total,
                total_cost=format_cost(cache.aggregate, full_precision=True),
            ),
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _time_range_preset(self) -> Optional[str]:
        if self._preset is not None:
            return self._preset.value
        filters = self._filters
        detected = detect_fixed_preset(filters.time_from, filters.time_to, now_in_display_timezone())
        return detected.value if detected else None

    def _head_poll_paused(self) -> bool:
        return self._pause_head_poll and self._state.gate_open

    def _is_current(self, key: str, generation: int) -> bool:
        return key == self._state.filter_key and generation == self._state.generation

    def _record_error(self, exc: LogFeedError, source: str, key: str, generation: int) -> None:
        if not self._is_current(key, generation):
            return
        self._last_error = FeedErrorInfo(kind=exc.kind, message=str(exc), source=source)

    def _clear_error(self, source: str, key: str, generation: int) -> None:
        if not self._is_current(key, generation):
            return
        if self._last_error is not None and self._last_error.source == source:
            self._last_error = None


_feed_instance: Optional[LogFeed] = None


def get_log_feed() -> LogFeed:
    global _feed_instance
    if _feed_instance is None:
        settings = get_settings()
        _feed_instance = LogFeed(
            get_gateway_client(),
            page_size=settings.page_size,
            poll_interval_seconds=settings.head_poll_interval_seconds,
            pause_head_poll_while_interacting=settings.pause_head_poll_while_interacting,
        )
    return _feed_instance


__all__ = ["LogFeed", "get_log_feed"]
