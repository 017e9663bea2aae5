"""
Period component models.

A period key identifies one reporting period of the performa survey, either
monthly ("YYYY-MM") or yearly ("YYYY").
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Cadence(str, Enum):
    """Survey cadence chosen per deployment."""

    MONTHLY = "monthly"
    YEARLY = "yearly"


# --- Error Types ---


class InvalidPeriodError(ValueError):
    """Raised when a period cannot be formatted or parsed."""

    def __init__(self, value: object, reason: str) -> None:
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid period {value!r}: {reason}")


# --- Period Key ---


@dataclass(frozen=True, order=True)
class PeriodKey:
    """Parsed reporting period."""

    year: int
    month: int | None = None

    @property
    def cadence(self) -> Cadence:
        return Cadence.YEARLY if self.month is None else Cadence.MONTHLY

    def __str__(self) -> str:
        if self.month is None:
            return f"{self.year:04d}"
        return f"{self.year:04d}-{self.month:02d}"


MONTH_NAMES_ID = (
    "Januari",
    "Februari",
    "Maret",
    "April",
    "Mei",
    "Juni",
    "Juli",
    "Agustus",
    "September",
    "Oktober",
    "November",
    "Desember",
)
