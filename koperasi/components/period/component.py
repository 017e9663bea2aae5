"""
Period component - reporting period keys.

Formats, parses and derives period identifiers for the performa survey.

Invariants:
- Monthly keys are "YYYY-MM" with the month zero-padded and in 1..12
- Yearly keys are "YYYY"
- Years are four digits and never zero
"""

from __future__ import annotations

import re

from .models import MONTH_NAMES_ID, Cadence, InvalidPeriodError, PeriodKey
from .ports import ClockPort

_MONTHLY_RE = re.compile(r"([0-9]{4})-([0-9]{2})")
_YEARLY_RE = re.compile(r"([0-9]{4})")
_DATE_PREFIX_RE = re.compile(r"([0-9]{4})(?:-([0-9]{2}))?(?:-[0-9]{2}(?:[T ].*)?)?")


def _check_year(value: object, year: int) -> None:
    if not 1 <= year <= 9999:
        raise InvalidPeriodError(value, "year must be between 0001 and 9999")


def _check_month(value: object, month: int | None) -> int:
    if month is None:
        raise InvalidPeriodError(value, "monthly periods require a month")
    if not 1 <= month <= 12:
        raise InvalidPeriodError(value, "month must be between 1 and 12")
    return month


def _as_cadence(cadence: Cadence | str) -> Cadence:
    try:
        return Cadence(cadence)
    except ValueError as e:
        raise InvalidPeriodError(cadence, "unknown cadence") from e


def make_period(year: int, month: int | None = None, *, cadence: Cadence | str) -> PeriodKey:
    """
    Build a validated PeriodKey.

    For yearly cadence the month is ignored.
    """
    cadence = _as_cadence(cadence)
    _check_year((year, month), year)
    if cadence is Cadence.YEARLY:
        return PeriodKey(year=year)
    return PeriodKey(year=year, month=_check_month((year, month), month))


def format_period(year: int, month: int | None = None, *, cadence: Cadence | str) -> str:
    """
    Format a period as "YYYY-MM" (monthly) or "YYYY" (yearly).

    Raises:
        InvalidPeriodError: month missing or outside 1..12 for monthly cadence,
            or year outside 1..9999.
    """
    return str(make_period(year, month, cadence=cadence))


def parse_period(raw: str, cadence: Cadence | str) -> PeriodKey:
    """
    Parse a period string for the given cadence.

    Raises:
        InvalidPeriodError: wrong shape, non-numeric parts or out-of-range values.
    """
    cadence = _as_cadence(cadence)
    if not isinstance(raw, str):
        raise InvalidPeriodError(raw, "period must be a string")

    if cadence is Cadence.MONTHLY:
        match = _MONTHLY_RE.fullmatch(raw)
        if match is None:
            raise InvalidPeriodError(raw, "expected YYYY-MM")
        year, month = int(match.group(1)), int(match.group(2))
        _check_year(raw, year)
        return PeriodKey(year=year, month=_check_month(raw, month))

    match = _YEARLY_RE.fullmatch(raw)
    if match is None:
        raise InvalidPeriodError(raw, "expected YYYY")
    year = int(match.group(1))
    _check_year(raw, year)
    return PeriodKey(year=year)


def current_period(cadence: Cadence | str, clock: ClockPort) -> PeriodKey:
    """Period key for "now" according to the clock."""
    now = clock.now()
    return make_period(now.year, now.month, cadence=cadence)


def available_periods(
    cadence: Cadence | str,
    clock: ClockPort,
    years_back: int = 2,
) -> list[PeriodKey]:
    """
    Periods selectable in a period picker, newest first.

    Covers the current year and `years_back` previous years. Months after the
    current month are skipped.
    """
    cadence = _as_cadence(cadence)
    now = clock.now()
    periods: list[PeriodKey] = []

    for year in range(now.year, now.year - years_back - 1, -1):
        if cadence is Cadence.YEARLY:
            periods.append(PeriodKey(year=year))
            continue
        for month in range(12, 0, -1):
            if year == now.year and month > now.month:
                continue
            periods.append(PeriodKey(year=year, month=month))

    return periods


def period_label(key: PeriodKey) -> str:
    """Human-readable Indonesian label, e.g. "Mei 2024"."""
    if key.month is None:
        return f"{key.year:04d}"
    return f"{MONTH_NAMES_ID[key.month - 1]} {key.year:04d}"


def coerce_period(raw: object, cadence: Cadence | str) -> PeriodKey | None:
    """
    Best-effort period key from a backend value.

    Accepts period keys as well as dates and timestamps ("2024-05-01",
    "2024-05-01T00:00:00Z"). Returns None when nothing usable is found.
    """
    if not isinstance(raw, str):
        return None
    match = _DATE_PREFIX_RE.fullmatch(raw.strip())
    if match is None:
        return None
    month = int(match.group(2)) if match.group(2) else None
    try:
        return make_period(int(match.group(1)), month, cadence=cadence)
    except InvalidPeriodError:
        return None
