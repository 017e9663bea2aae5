"""
Tests for questionnaire progress scoring.

The point schedule matches the legacy questionnaire, including forms that
score above 100.
"""

from __future__ import annotations

import pytest

from koperasi.components.progress import (
    ProgressReport,
    bisnis_points,
    bisnis_progress,
    organisasi_points,
    organisasi_progress,
    progress_report,
    round_half_up,
    total_progress,
)
from koperasi.components.survey import (
    HubunganLembaga,
    Keuangan,
    MasalahKeuangan,
    NeracaAktiva,
    NeracaPassiva,
    PerformaBisnis,
    PerformaOrganisasi,
    PrinsipKoperasi,
    RencanaStrategis,
    UnitUsaha,
    normalize_bisnis,
    normalize_organisasi,
)

# --- Fixtures ---


def _scalars_filled(**overrides) -> PerformaOrganisasi:
    values = dict(
        jumlah_pengurus=5,
        jumlah_pengawas=3,
        jumlah_karyawan=0,
        status="Aktif",
        total_anggota=100,
        anggota_aktif=80,
        anggota_tidak_aktif=20,
        general_manager=True,
        rapat_tepat_waktu=False,
        rapat_luar_biasa=False,
        pergantian_pengurus=True,
        pergantian_pengawas=False,
    )
    values.update(overrides)
    return PerformaOrganisasi(**values)


ALL_RENCANA = RencanaStrategis(True, True, True, True, True)
ALL_PRINSIP = PrinsipKoperasi(1, 2, 3, 4, 5, 1, 2)


def _bisnis_filled(masalah: MasalahKeuangan | None = None) -> PerformaBisnis:
    return PerformaBisnis(
        proyeksi_rugi_laba=True,
        proyeksi_arus_kas=False,
        hubungan_lembaga=[HubunganLembaga("BUMN", 1, 2, 3)],
        unit_usaha=[UnitUsaha("Gudang", 1, 2, 3, 4, 5, 6)],
        keuangan=Keuangan(1, 2, 3, 4, 5, 6, 7, 8),
        neraca_aktiva=NeracaAktiva(1, 2, 3, 4, 5, 6, 7, 8),
        neraca_passiva=NeracaPassiva(1, 2, 3, 4, 5),
        masalah_keuangan=masalah or MasalahKeuangan(),
    )


# --- Rounding ---


class TestRoundHalfUp:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(0.5, 1), (2.5, 3), (60.5, 61), (2.4, 2), (0, 0), (119.99, 120)],
    )
    def test_round_half_up(self, value: float, expected: int) -> None:
        assert round_half_up(value) == expected


# --- Organisasi ---


class TestOrganisasiProgress:
    """Test organisation scoring (denominator 20)."""

    def test_empty_form_is_zero(self) -> None:
        assert organisasi_progress(normalize_organisasi(None)) == 0

    def test_missing_form_is_zero(self) -> None:
        assert organisasi_progress(None) == 0

    def test_scalars_only(self) -> None:
        assert organisasi_points(_scalars_filled()) == 12
        assert organisasi_progress(_scalars_filled()) == 60

    def test_false_governance_flags_count_as_answered(self) -> None:
        form = PerformaOrganisasi(
            general_manager=False,
            rapat_tepat_waktu=False,
            rapat_luar_biasa=False,
            pergantian_pengurus=False,
            pergantian_pengawas=False,
        )
        assert organisasi_progress(form) == 25

    def test_empty_status_not_counted(self) -> None:
        assert organisasi_points(_scalars_filled(status="")) == 11

    def test_rencana_counts_only_true(self) -> None:
        form = PerformaOrganisasi(rencana_strategis=RencanaStrategis(visi=True, misi=True))
        assert organisasi_points(form) == 2

    def test_rencana_all_false_counts_nothing(self) -> None:
        form = PerformaOrganisasi(rencana_strategis=RencanaStrategis())
        assert organisasi_progress(form) == 0

    def test_prinsip_counts_non_null(self) -> None:
        form = PerformaOrganisasi(prinsip_koperasi=PrinsipKoperasi(demokratis=1, ekonomi=5))
        assert organisasi_points(form) == 2
        assert organisasi_progress(form) == 10

    def test_twenty_points_is_one_hundred(self) -> None:
        form = _scalars_filled(
            rencana_strategis=ALL_RENCANA,
            prinsip_koperasi=PrinsipKoperasi(sukarela_terbuka=1, demokratis=2, ekonomi=3),
        )
        assert organisasi_progress(form) == 100

    def test_complete_form_exceeds_one_hundred(self) -> None:
        form = _scalars_filled(rencana_strategis=ALL_RENCANA, prinsip_koperasi=ALL_PRINSIP)
        assert organisasi_points(form) == 24
        assert organisasi_progress(form) == 120

    def test_zero_counts_are_answers(self) -> None:
        form = PerformaOrganisasi(jumlah_pengurus=0, jumlah_pengawas=0)
        assert organisasi_points(form) == 2


# --- Bisnis ---


class TestBisnisProgress:
    """Test business scoring (denominator 25)."""

    def test_empty_form_is_zero(self) -> None:
        assert bisnis_progress(normalize_bisnis(None)) == 0

    def test_missing_form_is_zero(self) -> None:
        assert bisnis_progress(None) == 0

    def test_projection_flags_false_count(self) -> None:
        form = PerformaBisnis(proyeksi_rugi_laba=False, proyeksi_arus_kas=False)
        assert bisnis_points(form) == 2
        assert bisnis_progress(form) == 8

    def test_list_blocks_worth_two_regardless_of_length(self) -> None:
        one = PerformaBisnis(hubungan_lembaga=[HubunganLembaga("BUMN")])
        many = PerformaBisnis(
            hubungan_lembaga=[HubunganLembaga("BUMN"), HubunganLembaga("Daerah")],
            unit_usaha=[UnitUsaha("Gudang")],
        )
        assert bisnis_points(one) == 2
        assert bisnis_points(many) == 4

    def test_masalah_all_false_counts_nothing(self) -> None:
        form = PerformaBisnis(masalah_keuangan=MasalahKeuangan())
        assert bisnis_progress(form) == 0

    def test_masalah_any_true_counts_once(self) -> None:
        form = PerformaBisnis(
            masalah_keuangan=MasalahKeuangan(arus_kas=True, kredit=True, penggelapan=True)
        )
        assert bisnis_points(form) == 1
        assert bisnis_progress(form) == 4

    def test_filled_form_without_masalah(self) -> None:
        form = _bisnis_filled()
        assert bisnis_points(form) == 27
        assert bisnis_progress(form) == 108

    def test_masalah_adds_one_point(self) -> None:
        without = bisnis_progress(_bisnis_filled())
        with_masalah = bisnis_progress(_bisnis_filled(MasalahKeuangan(kredit=True)))
        assert with_masalah - without == 4
        assert with_masalah == 112

    def test_twenty_five_points_is_one_hundred(self) -> None:
        form = _bisnis_filled()
        form.neraca_passiva = NeracaPassiva(hutang_lancar=1, hutang_jangka_panjang=2, modal=3)
        assert bisnis_points(form) == 25
        assert bisnis_progress(form) == 100

    def test_zero_amounts_are_answers(self) -> None:
        form = PerformaBisnis(keuangan=Keuangan(hibah=0))
        assert bisnis_points(form) == 1


# --- Total ---


class TestTotalProgress:
    def test_mean_rounded_half_up(self) -> None:
        assert total_progress(25, 96) == 61

    def test_zero(self) -> None:
        assert total_progress(0, 0) == 0

    def test_report(self) -> None:
        report = progress_report(_scalars_filled(), PerformaBisnis(proyeksi_arus_kas=True))
        assert report == ProgressReport(organisasi=60, bisnis=4, total=32)

    def test_report_missing_forms(self) -> None:
        assert progress_report(None, None) == ProgressReport(0, 0, 0)
