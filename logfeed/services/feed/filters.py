"""Active filter set for the request log feed and its stable identity."""

from __future__ import annotations

import json
import re
from datetime import datetime, timedelta, tzinfo
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from ...errors import FilterValidationError
from ...utils.timezones import UTC, to_utc_isoformat


STATUS_VALUES = ("pending", "success", "error")

_TEXT_FIELDS = ("status", "model", "api_key_id", "username", "search")
_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DATE_TIME = re.compile(r"^\d{4}-\d{2}-\d{2}\s+\d{2}:\d{2}:\d{2}$")
_PRESET_TOLERANCE = timedelta(seconds=1)


class LogFilters(BaseModel):
    """Filters forwarded to the gateway. Unset fields are omitted from queries."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    status: Optional[str] = None
    model: Optional[str] = None
    api_key_id: Optional[str] = None
    username: Optional[str] = None
    search: Optional[str] = None
    time_from: Optional[datetime] = None
    time_to: Optional[datetime] = None

    @field_validator(*_TEXT_FIELDS, mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("status")
    @classmethod
    def _check_status(cls, value: Optional[str]) -> Optional[str]:
        if value is None or value == "all":
            return None
        if value not in STATUS_VALUES:
            raise ValueError(f"unknown status {value!r}; expected one of {', '.join(STATUS_VALUES)}")
        return value

    @field_validator("time_from", "time_to")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @model_validator(mode="after")
    def _check_range(self) -> "LogFilters":
        if self.time_from and self.time_to and self.time_from > self.time_to:
            raise ValueError("time_from must not be later than time_to")
        return self

    def query_params(self) -> Dict[str, str]:
        params: Dict[str, str] = {}
        for name in _TEXT_FIELDS:
            value = getattr(self, name)
            if value:
                params[name] = value
        if self.time_from:
            params["time_from"] = to_utc_isoformat(self.time_from)
        if self.time_to:
            params["time_to"] = to_utc_isoformat(self.time_to)
        return params


def build_filters(**fields: Any) -> LogFilters:
    """Validate *fields* into a LogFilters, raising FilterValidationError on bad input."""
    try:
        return LogFilters(**fields)
    except ValidationError as exc:
        messages = "; ".join(error.get("msg", "invalid value") for error in exc.errors())
        raise FilterValidationError(f"Invalid filters: {messages}") from exc


def filter_key(filters: LogFilters) -> str:
    """Deterministic identity of a filter set; any change means a new feed."""
    return json.dumps(filters.query_params(), sort_keys=True, separators=(",", ":"))


# ---------------------------------------------------------------------------
# Time range helpers
# ---------------------------------------------------------------------------


class TimeRangePreset(str, Enum):
    LAST_HOUR = "1h"
    LAST_DAY = "24h"
    LAST_WEEK = "7d"
    LAST_30_DAYS = "30d"
    TODAY = "today"
    YESTERDAY = "yesterday"
    THIS_MONTH = "this_month"
    LAST_MONTH = "last_month"


def _start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def _start_of_month(moment: datetime) -> datetime:
    return _start_of_day(moment).replace(day=1)


def apply_preset(preset: TimeRangePreset | str, now: datetime) -> Tuple[datetime, Optional[datetime]]:
    """Return ``(time_from, time_to)`` for *preset*, relative to the aware *now*.

    Day and month boundaries follow the timezone of *now*. Rolling presets
    leave ``time_to`` open.
    """
    preset = TimeRangePreset(preset)
    if preset is TimeRangePreset.LAST_HOUR:
        return now - relativedelta(hours=1), None
    if preset is TimeRangePreset.LAST_DAY:
        return now - relativedelta(hours=24), None
    if preset is TimeRangePreset.LAST_WEEK:
        return now - relativedelta(days=7), None
    if preset is TimeRangePreset.LAST_30_DAYS:
        return now - relativedelta(days=30), None
    if preset is TimeRangePreset.TODAY:
        return _start_of_day(now), None
    if preset is TimeRangePreset.YESTERDAY:
        today = _start_of_day(now)
        return today - relativedelta(days=1), today
    if preset is TimeRangePreset.THIS_MONTH:
        return _start_of_month(now), None
    this_month = _start_of_month(now)
    return this_month - relativedelta(months=1), this_month


def parse_datetime_input(text: str, *, tz: tzinfo = UTC, end_of_day: bool = False) -> Optional[datetime]:
    """Parse ``YYYY-MM-DD`` or ``YYYY-MM-DD HH:MM:SS`` typed into the range picker.

    A bare date means the start of that day, or its last millisecond when
    *end_of_day* is set. Anything else yields ``None``.
    """
    value = (text or "").strip()
    if not value:
        return None
    try:
        if _DATE_ONLY.match(value):
            parsed = datetime.strptime(value, "%Y-%m-%d")
            if end_of_day:
                parsed = parsed.replace(hour=23, minute=59, second=59, microsecond=999000)
        elif _DATE_TIME.match(value):
            date_part, time_part = value.split()
            parsed = datetime.strptime(f"{date_part} {time_part}", "%Y-%m-%d %H:%M:%S")
        else:
            return None
    except ValueError:
        return None
    return parsed.replace(tzinfo=tz)


def resolve_time_input(text: Optional[str], *, tz: tzinfo = UTC, end_of_day: bool = False) -> Optional[datetime]:
    """Accept the picker's input format or a full ISO-8601 timestamp."""
    value = (text or "").strip()
    if not value:
        return None
    parsed = parse_datetime_input(value, tz=tz, end_of_day=end_of_day)
    if parsed is not None:
        return parsed
    try:
        parsed = date_parser.isoparse(value)
    except (ValueError, OverflowError) as exc:
        raise FilterValidationError(f"Invalid time value {value!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed


def detect_fixed_preset(
    time_from: Optional[datetime],
    time_to: Optional[datetime],
    now: datetime,
) -> Optional[TimeRangePreset]:
    """Recognise a calendar-anchored preset from an explicit range."""
    if time_from is None:
        return None

    def close(a: datetime, b: datetime) -> bool:
        return abs(a - b) < _PRESET_TOLERANCE

    today = _start_of_day(now)
    this_month = _start_of_month(now)
    if time_to is None:
        if close(time_from, today):
            return TimeRangePreset.TODAY
        if close(time_from, this_month):
            return TimeRangePreset.THIS_MONTH
        return None
    if close(time_from, today - relativedelta(days=1)) and close(time_to, today):
        return TimeRangePreset.YESTERDAY
    if close(time_from, this_month - relativedelta(months=1)) and close(time_to, this_month):
        return TimeRangePreset.LAST_MONTH
    return None


__all__ = [
    "LogFilters",
    "STATUS_VALUES",
    "TimeRangePreset",
    "apply_preset",
    "build_filters",
    "detect_fixed_preset",
    "filter_key",
    "parse_datetime_input",
    "resolve_time_input",
]
