from __future__ import annotations
from typing import Protocol
import datetime as _dt


class IClock(Protocol):
    """Provides current time for deterministic testing."""

    def now(self) -> _dt.datetime:
        ...


def epoch_millis(moment: _dt.datetime) -> str:
    """Timestamp field value for signed calls (epoch milliseconds)."""
    return str(int(moment.timestamp() * 1000))
