"""
Performa component - period record reconciliation.

Keeps at most one performa record per (organisation, period) and routes
sub-form saves to the record's bisnis and organisasi sub-resources.

Invariants:
- get_or_create creates only after the backend reports the period missing
- Sub-form saves require a resolved performa id
- Every write invalidates the cached period list and the period's record
- Remote failures are never retried here
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Mapping
from typing import Any

from koperasi.components.period import (
    Cadence,
    ClockPort,
    InvalidPeriodError,
    PeriodKey,
    coerce_period,
    current_period,
    parse_period,
)
from koperasi.components.progress import ProgressReport, progress_report
from koperasi.components.survey import (
    PerformaBisnis,
    PerformaOrganisasi,
    bisnis_payload,
    first_present,
    normalize_bisnis,
    normalize_organisasi,
    opt_bool,
    opt_int,
    opt_number,
    organisasi_payload,
)

from .models import (
    ApiEnvelope,
    InvalidIndicatorError,
    MissingParentError,
    NotFoundError,
    PerformaIndicators,
    PerformaRecord,
    PeriodSummary,
    RemoteFailureError,
)
from .ports import HttpClientPort, ViewCachePort

logger = logging.getLogger(__name__)

OrgId = int | str
PeriodArg = PeriodKey | str

# Fallback messages when the backend gives none.
MSG_LOAD_FAILED = "Gagal memuat data performa"
MSG_CREATE_FAILED = "Gagal membuat performa"
MSG_SAVE_FAILED = "Gagal menyimpan performa"
MSG_SAVE_BISNIS_FAILED = "Gagal menyimpan performa bisnis"
MSG_SAVE_ORGANISASI_FAILED = "Gagal menyimpan performa organisasi"
MSG_DELETE_FAILED = "Gagal menghapus performa"


# --- Record Conversion ---


def _looks_not_found(envelope: ApiEnvelope) -> bool:
    return "not found" in (envelope.message or "").lower()


def validate_indicators(indicators: PerformaIndicators) -> None:
    """
    Reject indicator values the backend would refuse.

    Raises:
        InvalidIndicatorError: kuadrant outside 1..4.
    """
    kuadrant = indicators.kuadrant
    if kuadrant is not None and (isinstance(kuadrant, bool) or kuadrant not in (1, 2, 3, 4)):
        raise InvalidIndicatorError("kuadrant", "must be 1, 2, 3 or 4")


def record_from_raw(
    raw: Mapping[str, Any],
    cadence: Cadence,
    requested: PeriodKey | None = None,
) -> PerformaRecord:
    """
    Build a PerformaRecord from a backend record.

    Raises:
        RemoteFailureError: record has no usable id.
    """
    record_id = opt_int(raw.get("id"))
    if record_id is None:
        raise RemoteFailureError(None, fallback="Data performa dari server tidak valid")

    periode_raw = raw.get("periode")
    key = coerce_period(periode_raw, cadence) or requested
    if key is not None:
        periode = str(key)
    else:
        periode = periode_raw if isinstance(periode_raw, str) else ""

    bisnis_raw = first_present(raw, ("performa_bisnis", "performaBisnis"))
    organisasi_raw = first_present(raw, ("performa_organisasi", "performaOrganisasi"))

    return PerformaRecord(
        id=record_id,
        organization_id=first_present(raw, ("koperasi_id", "koperasiId", "organization_id")),
        periode=periode,
        cdi=opt_number(raw.get("cdi")),
        bdi=opt_number(raw.get("bdi")),
        odi=opt_number(raw.get("odi")),
        kuadrant=opt_int(raw.get("kuadrant")),
        created_at=raw.get("created_at"),
        updated_at=raw.get("updated_at"),
        performa_bisnis=normalize_bisnis(bisnis_raw) if bisnis_raw is not None else None,
        performa_organisasi=(
            normalize_organisasi(organisasi_raw) if organisasi_raw is not None else None
        ),
    )


def summary_from_raw(raw: Mapping[str, Any], cadence: Cadence) -> PeriodSummary | None:
    """Build a PeriodSummary, or None when the entry has no recognisable period."""
    periode_raw = first_present(raw, ("periode", "month_year", "year"))
    key = coerce_period(
        str(periode_raw) if isinstance(periode_raw, int) else periode_raw, cadence
    )
    if key is None:
        return None

    summary_id = opt_int(raw.get("id"))
    has_data = opt_bool(raw.get("has_data"))
    return PeriodSummary(
        periode=str(key),
        id=summary_id,
        cdi=opt_number(raw.get("cdi")),
        bdi=opt_number(raw.get("bdi")),
        odi=opt_number(raw.get("odi")),
        kuadrant=opt_int(raw.get("kuadrant")),
        has_data=has_data if has_data is not None else summary_id is not None,
    )


# --- Reconciler ---


class PerformaReconciler:
    """
    Get-or-create and sub-form routing for performa records.

    Args:
        http: Backend HTTP collaborator.
        cadence: Deployment-wide period cadence.
        cache: Optional read cache for period lists and records.
        clock: Optional clock, used when callers omit the period.
        organizations_path: Collection path of organisations on the backend.
    """

    def __init__(
        self,
        http: HttpClientPort,
        *,
        cadence: Cadence | str = Cadence.MONTHLY,
        cache: ViewCachePort | None = None,
        clock: ClockPort | None = None,
        organizations_path: str = "/organizations",
    ) -> None:
        self._http = http
        self._cadence = Cadence(cadence)
        self._cache = cache
        self._clock = clock
        self._base = "/" + organizations_path.strip("/")
        self._resolved: dict[tuple[str, str], int] = {}
        self._periods_by_id: dict[tuple[str, int], str] = {}

    @property
    def cadence(self) -> Cadence:
        return self._cadence

    # --- Paths ---

    def _org_path(self, org_id: OrgId) -> str:
        return f"{self._base}/{org_id}/performa"

    def _periods_path(self, org_id: OrgId) -> str:
        return f"{self._org_path(org_id)}/periods"

    def _record_path(self, org_id: OrgId, key: PeriodKey) -> str:
        return f"{self._org_path(org_id)}/{key}"

    def _sub_path(self, org_id: OrgId, performa_id: int, sub_form: str) -> str:
        return f"{self._org_path(org_id)}/{performa_id}/{sub_form}"

    # --- Helpers ---

    def _key(self, period: PeriodArg | None) -> PeriodKey:
        if period is None:
            if self._clock is None:
                raise InvalidPeriodError(None, "no period given and no clock configured")
            return current_period(self._cadence, self._clock)
        if isinstance(period, PeriodKey):
            if period.cadence is not self._cadence:
                raise InvalidPeriodError(str(period), f"expected {self._cadence.value} period")
            return period
        return parse_period(period, self._cadence)

    def _remember(self, org_id: OrgId, record: PerformaRecord) -> None:
        self._resolved[(str(org_id), record.periode)] = record.id
        self._periods_by_id[(str(org_id), record.id)] = record.periode

    def _forget(self, org_id: OrgId, performa_id: int) -> str | None:
        periode = self._periods_by_id.pop((str(org_id), performa_id), None)
        if periode is not None:
            self._resolved.pop((str(org_id), periode), None)
        return periode

    def _invalidate(self, org_id: OrgId, periode: str | None) -> None:
        if self._cache is None:
            return
        self._cache.invalidate(self._periods_path(org_id))
        if periode is not None:
            self._cache.invalidate(f"{self._org_path(org_id)}/{periode}")
        else:
            self._cache.invalidate_prefix(f"{self._org_path(org_id)}/")
        logger.info("Invalidated performa views for org %s (period %s)", org_id, periode)

    async def _call(self, request: Awaitable[ApiEnvelope], fallback: str) -> ApiEnvelope:
        """Await a write request, keeping the most specific failure message."""
        try:
            return await request
        except NotFoundError as e:
            raise RemoteFailureError(e.backend_message, fallback=fallback, status_code=404) from e
        except RemoteFailureError as e:
            if e.backend_message is not None:
                raise
            raise RemoteFailureError(None, fallback=fallback, status_code=e.status_code) from e

    @staticmethod
    def _ensure_success(envelope: ApiEnvelope, fallback: str) -> None:
        if not envelope.success:
            raise RemoteFailureError(envelope.message, fallback=fallback)

    def performa_id_for(self, org_id: OrgId, period: PeriodArg) -> int | None:
        """Performa id resolved earlier for this organisation and period, if any."""
        return self._resolved.get((str(org_id), str(self._key(period))))

    # --- Reads ---

    async def list_periods(self, org_id: OrgId) -> list[PeriodSummary]:
        """Periods that have performa data, newest first as sent by the backend."""
        path = self._periods_path(org_id)
        if self._cache is not None:
            cached = self._cache.get(path)
            if cached is not None:
                return cached

        try:
            envelope = await self._http.get(path)
        except NotFoundError:
            return []

        if not envelope.success or not isinstance(envelope.data, list):
            return []

        summaries = [
            summary
            for item in envelope.data
            if isinstance(item, Mapping)
            and (summary := summary_from_raw(item, self._cadence)) is not None
        ]
        if self._cache is not None:
            self._cache.set(path, summaries)
        return summaries

    async def get(self, org_id: OrgId, period: PeriodArg | None = None) -> PerformaRecord | None:
        """Record for the period, or None when the backend has none."""
        key = self._key(period)
        path = self._record_path(org_id, key)
        if self._cache is not None:
            cached = self._cache.get(path)
            if cached is not None:
                return cached

        try:
            envelope = await self._http.get(path)
        except NotFoundError:
            return None

        if not envelope.success or not isinstance(envelope.data, Mapping):
            return None

        record = record_from_raw(envelope.data, self._cadence, key)
        self._remember(org_id, record)
        if self._cache is not None:
            self._cache.set(path, record)
        return record

    async def get_or_create(self, org_id: OrgId, period: PeriodArg | None = None) -> PerformaRecord:
        """
        Fetch the record for the period, creating it if the backend has none.

        Raises:
            InvalidPeriodError: malformed period.
            RemoteFailureError: fetch failed for any reason other than not found,
                or the create call failed.
        """
        key = self._key(period)
        path = self._record_path(org_id, key)

        try:
            envelope = await self._http.get(path)
        except NotFoundError:
            logger.info("No performa for org %s period %s, creating", org_id, key)
            return await self._create(org_id, key)

        if envelope.success and isinstance(envelope.data, Mapping):
            record = record_from_raw(envelope.data, self._cadence, key)
            self._remember(org_id, record)
            return record

        if _looks_not_found(envelope):
            logger.info("No performa for org %s period %s, creating", org_id, key)
            return await self._create(org_id, key)

        raise RemoteFailureError(envelope.message, fallback=MSG_LOAD_FAILED)

    async def _create(self, org_id: OrgId, key: PeriodKey) -> PerformaRecord:
        envelope = await self._call(
            self._http.post(self._org_path(org_id), {"periode": str(key)}),
            MSG_CREATE_FAILED,
        )
        self._ensure_success(envelope, MSG_CREATE_FAILED)
        if not isinstance(envelope.data, Mapping):
            raise RemoteFailureError(None, fallback=MSG_CREATE_FAILED)

        record = record_from_raw(envelope.data, self._cadence, key)
        self._remember(org_id, record)
        self._invalidate(org_id, record.periode)
        return record

    # --- Writes ---

    async def save_indicators(
        self,
        org_id: OrgId,
        period: PeriodArg | None,
        indicators: PerformaIndicators,
    ) -> PerformaRecord:
        """
        Upsert cdi/bdi/odi/kuadrant for the period.

        The backend creates the record when absent, so no existence check is made.
        """
        validate_indicators(indicators)
        key = self._key(period)
        body = {
            "periode": str(key),
            "cdi": indicators.cdi,
            "bdi": indicators.bdi,
            "odi": indicators.odi,
            "kuadrant": indicators.kuadrant,
        }

        envelope = await self._call(self._http.post(self._org_path(org_id), body), MSG_SAVE_FAILED)
        self._ensure_success(envelope, MSG_SAVE_FAILED)
        self._invalidate(org_id, str(key))

        if isinstance(envelope.data, Mapping):
            record = record_from_raw(envelope.data, self._cadence, key)
            self._remember(org_id, record)
            return record

        record = await self.get(org_id, key)
        if record is None:
            raise RemoteFailureError(None, fallback=MSG_SAVE_FAILED)
        return record

    async def save_bisnis(
        self,
        org_id: OrgId,
        performa_id: int | None,
        data: PerformaBisnis,
    ) -> None:
        """
        Replace the business sub-form of a resolved record.

        Raises:
            MissingParentError: performa_id is None.
            RemoteFailureError: backend rejected the save.
        """
        if performa_id is None:
            raise MissingParentError("bisnis")
        envelope = await self._call(
            self._http.put(self._sub_path(org_id, performa_id, "bisnis"), bisnis_payload(data)),
            MSG_SAVE_BISNIS_FAILED,
        )
        self._ensure_success(envelope, MSG_SAVE_BISNIS_FAILED)
        self._invalidate(org_id, self._periods_by_id.get((str(org_id), performa_id)))

    async def save_organisasi(
        self,
        org_id: OrgId,
        performa_id: int | None,
        data: PerformaOrganisasi,
    ) -> None:
        """
        Replace the organisation sub-form of a resolved record.

        Raises:
            MissingParentError: performa_id is None.
            RemoteFailureError: backend rejected the save.
        """
        if performa_id is None:
            raise MissingParentError("organisasi")
        envelope = await self._call(
            self._http.put(
                self._sub_path(org_id, performa_id, "organisasi"), organisasi_payload(data)
            ),
            MSG_SAVE_ORGANISASI_FAILED,
        )
        self._ensure_success(envelope, MSG_SAVE_ORGANISASI_FAILED)
        self._invalidate(org_id, self._periods_by_id.get((str(org_id), performa_id)))

    async def delete(self, org_id: OrgId, performa_id: int | None) -> None:
        """Delete a performa record."""
        if performa_id is None:
            raise MissingParentError("record")
        envelope = await self._call(
            self._http.delete(f"{self._org_path(org_id)}/{performa_id}"), MSG_DELETE_FAILED
        )
        self._ensure_success(envelope, MSG_DELETE_FAILED)
        self._invalidate(org_id, self._forget(org_id, performa_id))

    # --- Questionnaire ---

    async def _load_sub_form(self, org_id: OrgId, performa_id: int, sub_form: str) -> Any:
        try:
            envelope = await self._http.get(self._sub_path(org_id, performa_id, sub_form))
        except NotFoundError:
            return None
        return envelope.data if envelope.success else None

    async def load_bisnis(self, org_id: OrgId, period: PeriodArg | None = None) -> PerformaBisnis:
        """Business sub-form for the period, creating the record if needed."""
        record = await self.get_or_create(org_id, period)
        return normalize_bisnis(await self._load_sub_form(org_id, record.id, "bisnis"))

    async def load_organisasi(
        self, org_id: OrgId, period: PeriodArg | None = None
    ) -> PerformaOrganisasi:
        """Organisation sub-form for the period, creating the record if needed."""
        record = await self.get_or_create(org_id, period)
        return normalize_organisasi(await self._load_sub_form(org_id, record.id, "organisasi"))

    async def questionnaire_progress(
        self, org_id: OrgId, period: PeriodArg | None = None
    ) -> ProgressReport:
        """Completion percentages of both sub-forms for the period."""
        record = await self.get_or_create(org_id, period)
        try:
            async with asyncio.TaskGroup() as tg:
                organisasi = tg.create_task(self._load_sub_form(org_id, record.id, "organisasi"))
                bisnis = tg.create_task(self._load_sub_form(org_id, record.id, "bisnis"))
        except ExceptionGroup as eg:
            # The sibling load is already cancelled; surface the first failure.
            raise eg.exceptions[0]
        return progress_report(
            normalize_organisasi(organisasi.result()),
            normalize_bisnis(bisnis.result()),
        )
