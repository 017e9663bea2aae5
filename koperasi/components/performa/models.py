"""
Performa component models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from koperasi.components.survey import PerformaBisnis, PerformaOrganisasi

# --- Envelope ---


@dataclass(frozen=True)
class Pagination:
    current_page: int
    per_page: int
    total: int
    last_page: int


@dataclass(frozen=True)
class ApiEnvelope:
    """Response envelope shared by every backend endpoint."""

    success: bool
    message: str = ""
    data: Any = None
    pagination: Pagination | None = None
    errors: dict[str, list[str]] = field(default_factory=dict)


# --- Performa Models ---


@dataclass(frozen=True)
class PerformaIndicators:
    """Externally computed indices stored with a period."""

    cdi: float | None = None
    bdi: float | None = None
    odi: float | None = None
    kuadrant: int | None = None


@dataclass(frozen=True)
class PerformaRecord:
    """One survey snapshot for an organisation and period."""

    id: int
    organization_id: int | str | None
    periode: str
    cdi: float | None = None
    bdi: float | None = None
    odi: float | None = None
    kuadrant: int | None = None
    created_at: str | None = None
    updated_at: str | None = None
    performa_bisnis: PerformaBisnis | None = None
    performa_organisasi: PerformaOrganisasi | None = None

    @property
    def indicators(self) -> PerformaIndicators:
        return PerformaIndicators(
            cdi=self.cdi, bdi=self.bdi, odi=self.odi, kuadrant=self.kuadrant
        )


@dataclass(frozen=True)
class PeriodSummary:
    """Period list entry for quick display."""

    periode: str
    id: int | None = None
    cdi: float | None = None
    bdi: float | None = None
    odi: float | None = None
    kuadrant: int | None = None
    has_data: bool = False


# --- Error Types ---


GENERIC_FAILURE_MESSAGE = "Terjadi kesalahan pada server"


class PerformaError(Exception):
    """Base performa error."""

    pass


class NotFoundError(PerformaError):
    """Backend has no record at the requested path."""

    def __init__(self, path: str, backend_message: str | None = None) -> None:
        self.path = path
        self.backend_message = backend_message
        super().__init__(backend_message or f"Not found: {path}")


class MissingParentError(PerformaError):
    """Sub-form save attempted before the performa record was resolved."""

    def __init__(self, sub_form: str) -> None:
        self.sub_form = sub_form
        super().__init__(
            f"Cannot save performa {sub_form}: performa id not resolved for this period"
        )


class InvalidIndicatorError(PerformaError, ValueError):
    """Indicator values rejected before sending."""

    def __init__(self, field_name: str, reason: str) -> None:
        self.field = field_name
        self.reason = reason
        super().__init__(f"Invalid indicator '{field_name}': {reason}")


class RemoteFailureError(PerformaError):
    """Backend or transport failure."""

    def __init__(
        self,
        backend_message: str | None = None,
        *,
        fallback: str = GENERIC_FAILURE_MESSAGE,
        status_code: int | None = None,
    ) -> None:
        self.backend_message = backend_message or None
        self.fallback = fallback
        self.status_code = status_code
        super().__init__(self.message)

    @property
    def message(self) -> str:
        """User-facing message, preferring the backend's own text."""
        return self.backend_message or self.fallback
