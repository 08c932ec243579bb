from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class LogEntry(BaseModel):
    """One request log row as returned by the gateway dashboard API."""

    model_config = ConfigDict(extra="allow", frozen=True)

    id: str = Field(..., min_length=1)
    created_at: Optional[str] = None
    model: Optional[str] = None
    status: Optional[str] = None
    charge_nano_usd: Optional[str] = None
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    cached_tokens: Optional[int] = None
    reasoning_tokens: Optional[int] = None
    duration_ms: Optional[int] = None
    ttfb_ms: Optional[int] = None
    username: Optional[str] = None
    api_key_name: Optional[str] = None
    provider_name: Optional[str] = None
    error_message: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("charge_nano_usd", mode="before")
    @classmethod
    def _coerce_charge(cls, value: Any) -> Any:
        if isinstance(value, (int, float)):
            return str(value)
        return value

    def as_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class LogWindow(BaseModel):
    """Result of one list-logs fetch: a page of entries plus server totals."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    items: Tuple[LogEntry, ...] = Field(
        default=(),
        validation_alias=AliasChoices("items", "data"),
    )
    total: int = Field(default=0, ge=0)
    aggregate: Decimal = Field(
        default=Decimal(0),
        validation_alias=AliasChoices("aggregate", "total_charge", "total_charge_nano_usd"),
    )

    @field_validator("aggregate", mode="before")
    @classmethod
    def _coerce_aggregate(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return Decimal(0)
        return value

    @property
    def ids(self) -> Tuple[str, ...]:
        return tuple(entry.id for entry in self.items)


__all__ = ["LogEntry", "LogWindow"]
