"""
Period component - reporting period keys.
"""

from .component import (
    available_periods,
    coerce_period,
    current_period,
    format_period,
    make_period,
    parse_period,
    period_label,
)
from .models import MONTH_NAMES_ID, Cadence, InvalidPeriodError, PeriodKey
from .ports import ClockPort

__all__ = [
    # Entry points
    "available_periods",
    "coerce_period",
    "current_period",
    "format_period",
    "make_period",
    "parse_period",
    "period_label",
    # Models
    "Cadence",
    "InvalidPeriodError",
    "MONTH_NAMES_ID",
    "PeriodKey",
    # Ports
    "ClockPort",
]
