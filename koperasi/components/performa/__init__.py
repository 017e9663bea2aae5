"""
Performa component - period record reconciliation.
"""

from .component import (
    PerformaReconciler,
    record_from_raw,
    summary_from_raw,
    validate_indicators,
)
from .models import (
    GENERIC_FAILURE_MESSAGE,
    ApiEnvelope,
    InvalidIndicatorError,
    MissingParentError,
    NotFoundError,
    Pagination,
    PerformaError,
    PerformaIndicators,
    PerformaRecord,
    PeriodSummary,
    RemoteFailureError,
)
from .ports import HttpClientPort, ViewCachePort

__all__ = [
    # Entry points
    "PerformaReconciler",
    "record_from_raw",
    "summary_from_raw",
    "validate_indicators",
    # Models
    "ApiEnvelope",
    "Pagination",
    "PerformaIndicators",
    "PerformaRecord",
    "PeriodSummary",
    # Errors
    "GENERIC_FAILURE_MESSAGE",
    "InvalidIndicatorError",
    "MissingParentError",
    "NotFoundError",
    "PerformaError",
    "RemoteFailureError",
    # Ports
    "HttpClientPort",
    "ViewCachePort",
]
