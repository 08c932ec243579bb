from __future__ import annotations

from typing import Optional, Tuple

from fastapi import APIRouter, Depends

from ..config import Settings, get_settings
from ..errors import FilterValidationError
from ..models import FeedSnapshot, FilterUpdateRequest, GateResponse
from ..services.feed import (
    LogFeed,
    LogFilters,
    TimeRangePreset,
    apply_preset,
    build_filters,
    get_log_feed,
    resolve_time_input,
)
from ..utils.timezones import now_in_display_timezone, resolve_display_timezone

router = APIRouter(prefix="/feed", tags=["feed"])


def _filters_from_request(
    payload: FilterUpdateRequest,
    settings: Settings,
) -> Tuple[LogFilters, Optional[TimeRangePreset]]:
    preset = None
    if payload.preset:
        try:
            preset = TimeRangePreset(payload.preset)
        except ValueError as exc:
            raise FilterValidationError(f"Unknown time range preset {payload.preset!r}") from exc
        time_from, time_to = apply_preset(preset, now_in_display_timezone(settings.display_timezone))
    else:
        tz = resolve_display_timezone(settings.display_timezone)
        time_from = resolve_time_input(payload.time_from, tz=tz)
        time_to = resolve_time_input(payload.time_to, tz=tz, end_of_day=True)

    filters = build_filters(
        status=payload.status,
        model=payload.model,
        api_key_id=payload.api_key_id,
        username=payload.username,
        search=payload.search,
        time_from=time_from,
        time_to=time_to,
    )
    return filters, preset


def _gate_response(feed: LogFeed) -> GateResponse:
    state = feed.state
    return GateResponse(
        gate_count=state.gate_count,
        pending_head=state.pending.head is not None,
        pending_page=state.pending.page is not None,
    )


@router.get("", response_model=FeedSnapshot)
# Return the current cache for the log table
def get_feed(feed: LogFeed = Depends(get_log_feed)) -> FeedSnapshot:
    return feed.snapshot()


@router.put("/filters", response_model=FeedSnapshot)
# Replace the active filter set; the cache restarts empty and loads the new head
async def update_filters(
    payload: FilterUpdateRequest,
    feed: LogFeed = Depends(get_log_feed),
    settings: Settings = Depends(get_settings),
) -> FeedSnapshot:
    filters, preset = _filters_from_request(payload, settings)
    await feed.change_filters(filters, preset=preset)
    return feed.snapshot()


@router.post("/end-reached", response_model=FeedSnapshot)
# The table scrolled to its last row: load the next page of older entries
async def end_reached(feed: LogFeed = Depends(get_log_feed)) -> FeedSnapshot:
    await feed.reach_end()
    return feed.snapshot()


@router.post("/refresh", response_model=FeedSnapshot)
async def refresh(feed: LogFeed = Depends(get_log_feed)) -> FeedSnapshot:
    await feed.refresh()
    return feed.snapshot()


@router.post("/interactions/open", response_model=GateResponse)
def open_interaction(feed: LogFeed = Depends(get_log_feed)) -> GateResponse:
    feed.open_interaction()
    return _gate_response(feed)


@router.post("/interactions/close", response_model=GateResponse)
# Closing the last open tooltip applies any windows held back meanwhile
def close_interaction(feed: LogFeed = Depends(get_log_feed)) -> GateResponse:
    feed.close_interaction()
    return _gate_response(feed)


__all__ = ["router"]
