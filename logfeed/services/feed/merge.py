"""Pure merge rules folding a fetched window into the feed cache.

Two kinds of window reach the cache:

* page windows, fetched at ``offset = len(cache.items)`` when the viewer
  scrolls to the end. They carry older history and are appended.
* head windows, re-polled at offset 0 on a timer. They carry the newest
  entries and replace the top of the list, updating changed rows in place.

Both rules keep ids unique and never let the list grow past the total the
server reported with the window. Neither touches I/O or clocks, so the
reducer can apply them atomically.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Tuple

from ...models.logs import LogEntry, LogWindow
from .cache import Cache


def _unique(entries: Iterable[LogEntry]) -> Tuple[LogEntry, ...]:
    seen = set()
    kept = []
    for entry in entries:
        if entry.id in seen:
            continue
        seen.add(entry.id)
        kept.append(entry)
    return tuple(kept)


def _settle(cache: Cache, items: Tuple[LogEntry, ...], window: LogWindow) -> Cache:
    """Build the merged cache, reusing *cache* when nothing changed."""
    items = items[: window.total]
    if items == cache.items:
        items = cache.items
    if items is cache.items and window.total == cache.total and window.aggregate == cache.aggregate:
        return cache
    return replace(cache, items=items, total=window.total, aggregate=window.aggregate)


def merge_page(cache: Cache, window: LogWindow, *, replace_items: bool = False) -> Cache:
    """Append the unseen entries of an older page to the end of the cache.

    The first page for a filter (empty cache, or *replace_items* for a page
    requested at offset 0) becomes the list as-is.
    """
    if replace_items or not cache.items:
        return _settle(cache, _unique(window.items), window)

    present = {entry.id for entry in cache.items}
    appended = tuple(entry for entry in _unique(window.items) if entry.id not in present)
    if not appended:
        return _settle(cache, cache.items, window)
    return _settle(cache, cache.items + appended, window)


def merge_head(cache: Cache, window: LogWindow, *, replace_items: bool = False) -> Cache:
    """Lay a freshly polled head over the cache.

    With an empty cache, or *replace_items* while only the first page is
    loaded, the head becomes the list. Otherwise the head goes on top and
    the existing entries it does not mention follow in their current order.
    Entries present in both are taken from the head, so status changes
    between polls show up in place.
    """
    head = _unique(window.items)
    if replace_items or not cache.items:
        return _settle(cache, head, window)

    head_ids = {entry.id for entry in head}
    tail = tuple(entry for entry in cache.items if entry.id not in head_ids)
    return _settle(cache, head + tail, window)


__all__ = ["merge_head", "merge_page"]
