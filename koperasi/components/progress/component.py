"""
Progress component - questionnaire completion percentages.

Scores the organisation and business sub-forms against a fixed point
schedule. The schedule is shared with stored and displayed progress values,
so it is kept exactly as the legacy questionnaire computed it:

Organisasi (out of 20 points):
- 12 scalar fields, 1 point each when not None (status: when not "");
  a governance flag explicitly set to False counts as answered
- 5 rencana_strategis flags, 1 point each only when True
- 7 prinsip_koperasi ratings, 1 point each when not None

Bisnis (out of 25 points):
- 2 projection flags, 1 point each when not None
- hubungan_lembaga and unit_usaha, 2 points each when non-empty
- 8 keuangan, 8 neraca_aktiva and 5 neraca_passiva fields, 1 point each
  when not None
- masalah_keuangan, 1 point when any flag is True

Nominal points exceed the denominators (24/20 and 28/25), so a complete form
scores above 100. Results are not clamped.
"""

from __future__ import annotations

import math
from dataclasses import astuple

from koperasi.components.survey import PerformaBisnis, PerformaOrganisasi

from .models import (
    BISNIS_TOTAL_POINTS,
    LIST_BLOCK_POINTS,
    ORGANISASI_TOTAL_POINTS,
    ProgressReport,
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return math.floor(value + 0.5)


def _percentage(filled: int, total: int) -> int:
    return round_half_up(filled / total * 100)


def _count_not_none(values: tuple[object, ...]) -> int:
    return sum(1 for v in values if v is not None)


def organisasi_points(form: PerformaOrganisasi) -> int:
    """Filled points of an organisation sub-form."""
    filled = _count_not_none(
        (
            form.jumlah_pengurus,
            form.jumlah_pengawas,
            form.jumlah_karyawan,
            form.total_anggota,
            form.anggota_aktif,
            form.anggota_tidak_aktif,
            form.general_manager,
            form.rapat_tepat_waktu,
            form.rapat_luar_biasa,
            form.pergantian_pengurus,
            form.pergantian_pengawas,
        )
    )
    if form.status != "":
        filled += 1

    filled += sum(1 for v in astuple(form.rencana_strategis) if v is True)
    filled += _count_not_none(astuple(form.prinsip_koperasi))
    return filled


def bisnis_points(form: PerformaBisnis) -> int:
    """Filled points of a business sub-form."""
    filled = _count_not_none((form.proyeksi_rugi_laba, form.proyeksi_arus_kas))

    if len(form.hubungan_lembaga) > 0:
        filled += LIST_BLOCK_POINTS
    if len(form.unit_usaha) > 0:
        filled += LIST_BLOCK_POINTS

    filled += _count_not_none(astuple(form.keuangan))
    filled += _count_not_none(astuple(form.neraca_aktiva))
    filled += _count_not_none(astuple(form.neraca_passiva))

    if any(v is True for v in astuple(form.masalah_keuangan)):
        filled += 1
    return filled


def organisasi_progress(form: PerformaOrganisasi | None) -> int:
    """Completion percentage of the organisation sub-form (0 when missing)."""
    if form is None:
        return 0
    return _percentage(organisasi_points(form), ORGANISASI_TOTAL_POINTS)


def bisnis_progress(form: PerformaBisnis | None) -> int:
    """Completion percentage of the business sub-form (0 when missing)."""
    if form is None:
        return 0
    return _percentage(bisnis_points(form), BISNIS_TOTAL_POINTS)


def total_progress(organisasi: int, bisnis: int) -> int:
    """Mean of both sub-form percentages, rounded half-up."""
    return round_half_up((organisasi + bisnis) / 2)


def progress_report(
    organisasi: PerformaOrganisasi | None,
    bisnis: PerformaBisnis | None,
) -> ProgressReport:
    """Percentages for both sub-forms plus the combined total."""
    org = organisasi_progress(organisasi)
    biz = bisnis_progress(bisnis)
    return ProgressReport(organisasi=org, bisnis=biz, total=total_progress(org, biz))
