from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .logs import LogEntry


class FeedErrorInfo(BaseModel):
    kind: str
    message: str
    source: str


class FeedSummary(BaseModel):
    """Numbers behind the "showing first–last of total" line."""

    first: int = 0
    last: int = 0
    total: int = 0
    total_cost: str = "-"


class FeedSnapshot(BaseModel):
    filter_key: str
    filters: Dict[str, str] = Field(default_factory=dict)
    items: List[LogEntry] = Field(default_factory=list)
    total: int = 0
    aggregate: str = "0"
    has_more: bool = False
    offset: Optional[int] = None
    gate_count: int = 0
    pending_head: bool = False
    pending_page: bool = False
    last_error: Optional[FeedErrorInfo] = None
    time_range_preset: Optional[str] = None
    summary: FeedSummary = Field(default_factory=FeedSummary)


class FilterUpdateRequest(BaseModel):
    """Filter bar contents as typed by the viewer."""

    model_config = ConfigDict(extra="ignore")

    status: Optional[str] = None
    model: Optional[str] = None
    api_key_id: Optional[str] = None
    username: Optional[str] = None
    search: Optional[str] = None
    time_from: Optional[str] = None
    time_to: Optional[str] = None
    preset: Optional[str] = None


class GateResponse(BaseModel):
    ok: bool = True
    gate_count: int
    pending_head: bool = False
    pending_page: bool = False
