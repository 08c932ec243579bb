"""Feed state machine: one reducer consuming filter, window and gate messages."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional, Union

from ...models.logs import LogWindow
from .cache import EMPTY_CACHE, Cache
from .merge import merge_head, merge_page


@dataclass(frozen=True)
class PendingBuffer:
    """Latest held-back window of each kind while the interaction gate is open."""

    head: Optional[LogWindow] = None
    page: Optional[LogWindow] = None
    page_offset: int = 0

    @property
    def is_empty(self) -> bool:
        return self.head is None and self.page is None


EMPTY_BUFFER = PendingBuffer()


@dataclass(frozen=True)
class FeedState:
    """Everything the feed knows for the active filter set.

    ``offset`` is the offset of the last page window applied. It stays
    ``None`` while only the head has been shown, in which case a new head
    simply replaces the list.

    ``generation`` goes up on every filter change, so windows requested
    before a switch away and back to the same filters are still dropped.
    """

    filter_key: str = ""
    cache: Cache = EMPTY_CACHE
    pending: PendingBuffer = field(default=EMPTY_BUFFER)
    gate_count: int = 0
    offset: Optional[int] = None
    generation: int = 0

    @property
    def gate_open(self) -> bool:
        return self.gate_count > 0


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FilterChanged:
    filter_key: str


@dataclass(frozen=True)
class PageWindowArrived:
    filter_key: str
    offset: int
    window: LogWindow
    generation: int = 0


@dataclass(frozen=True)
class HeadWindowArrived:
    filter_key: str
    window: LogWindow
    generation: int = 0


@dataclass(frozen=True)
class InteractionOpened:
    pass


@dataclass(frozen=True)
class InteractionClosed:
    pass


FeedMessage = Union[FilterChanged, PageWindowArrived, HeadWindowArrived, InteractionOpened, InteractionClosed]


# ---------------------------------------------------------------------------
# Reducer
# ---------------------------------------------------------------------------


def _apply_head(state: FeedState, window: LogWindow) -> FeedState:
    cache = merge_head(state.cache, window, replace_items=state.offset is None)
    if cache is state.cache:
        return state
    return replace(state, cache=cache)


def _apply_page(state: FeedState, window: LogWindow, offset: int) -> FeedState:
    cache = merge_page(state.cache, window, replace_items=offset == 0)
    if cache is state.cache and state.offset == offset:
        return state
    return replace(state, cache=cache, offset=offset)


def _flush(state: FeedState) -> FeedState:
    pending = state.pending
    if pending.is_empty:
        return state
    state = replace(state, pending=EMPTY_BUFFER)
    if pending.head is not None:
        state = _apply_head(state, pending.head)
    if pending.page is not None:
        state = _apply_page(state, pending.page, pending.page_offset)
    return state


def _superseded(state: FeedState, message: Union[PageWindowArrived, HeadWindowArrived]) -> bool:
    return message.filter_key != state.filter_key or message.generation != state.generation


def reduce(state: FeedState, message: FeedMessage) -> FeedState:
    """Return the state that follows *state* once *message* is applied.

    Windows tagged with a filter key or generation other than the active
    one belong to a superseded fetch and are dropped. While the gate is
    open, windows are parked in the pending buffer and applied head-first
    when it closes.
    """
    if isinstance(message, FilterChanged):
        if message.filter_key == state.filter_key:
            return state
        return FeedState(
            filter_key=message.filter_key,
            gate_count=state.gate_count,
            generation=state.generation + 1,
        )

    if isinstance(message, InteractionOpened):
        return replace(state, gate_count=state.gate_count + 1)

    if isinstance(message, InteractionClosed):
        if state.gate_count == 0:
            return state
        state = replace(state, gate_count=state.gate_count - 1)
        return state if state.gate_open else _flush(state)

    if isinstance(message, HeadWindowArrived):
        if _superseded(state, message):
            return state
        if state.gate_open:
            return replace(state, pending=replace(state.pending, head=message.window))
        return _apply_head(state, message.window)

    if isinstance(message, PageWindowArrived):
        if _superseded(state, message):
            return state
        if state.gate_open:
            pending = replace(state.pending, page=message.window, page_offset=message.offset)
            return replace(state, pending=pending)
        return _apply_page(state, message.window, message.offset)

    raise TypeError(f"unsupported feed message: {message!r}")


__all__ = [
    "EMPTY_BUFFER",
    "FeedMessage",
    "FeedState",
    "FilterChanged",
    "HeadWindowArrived",
    "InteractionClosed",
    "InteractionOpened",
    "PageWindowArrived",
    "PendingBuffer",
    "reduce",
]
