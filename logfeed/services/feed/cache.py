from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Tuple

from ...models.logs import LogEntry


@dataclass(frozen=True)
class Cache:
    """Newest-first list of log entries plus the server's totals."""

    items: Tuple[LogEntry, ...] = ()
    total: int = 0
    aggregate: Decimal = field(default_factory=lambda: Decimal(0))

    @property
    def has_more(self) -> bool:
        return len(self.items) < self.total


EMPTY_CACHE = Cache()


__all__ = ["Cache", "EMPTY_CACHE"]
