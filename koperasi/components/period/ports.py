"""
Period component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol


class ClockPort(Protocol):
    """Clock interface."""

    def now(self) -> datetime:
        """Return current time in the caller's local clock."""
        ...

    def now_utc(self) -> datetime:
        """Return current time as an aware UTC datetime, for measuring durations."""
        ...
