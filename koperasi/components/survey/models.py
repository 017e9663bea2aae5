"""
Survey component models.

Canonical form-data shapes for the two performa sub-forms. Every numeric
answer that has not been entered is None, never zero.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

Number = int | float

OrganisasiStatus = Literal["Aktif", "TidakAktif", "Pembentukan", ""]
RapatFrequency = Literal[
    "satu_minggu",
    "dua_minggu",
    "satu_bulan",
    "dua_bulan",
    "tiga_bulan_lebih",
    "",
]

# --- Option Catalogues ---

STATUS_VALUES: tuple[str, ...] = ("Aktif", "TidakAktif", "Pembentukan")

RAPAT_FREQUENCIES: tuple[str, ...] = (
    "satu_minggu",
    "dua_minggu",
    "satu_bulan",
    "dua_bulan",
    "tiga_bulan_lebih",
)

LEMBAGA_OPTIONS: tuple[str, ...] = (
    "Perbankan Pemerintah",
    "Perbankan Swasta",
    "Keuangan Non-Bank",
    "BUMN",
    "Pemerintah Daerah",
    "Swasta",
    "Masyarakat",
)

# Spellings written by the older performa form; still accepted on input.
LEMBAGA_LEGACY_OPTIONS: tuple[str, ...] = ("keuangan Non-Bank", "Daerah")

UNIT_OPTIONS: tuple[str, ...] = (
    "Gerai Sembako",
    "Klinik Desa",
    "Gerai Obat",
    "Jasa Logistik",
    "Gudang",
    "Simpan Pinjam",
    "Unit Lain",
)

PELATIHAN_OPTIONS: tuple[str, ...] = (
    "Pengurus",
    "Pengawas",
    "GeneralManager",
    "Karyawan",
    "Anggota",
    "NonAnggota",
)


# --- Performa Bisnis ---


@dataclass
class HubunganLembaga:
    """Rated relationship with a partner institution (ratings 1-4)."""

    lembaga: str = ""
    kemudahan: int | None = None
    intensitas: int | None = None
    dampak: int | None = None


@dataclass
class UnitUsaha:
    """One business unit run by the cooperative."""

    unit: str = ""
    volume_usaha: Number | None = None
    investasi: Number | None = None
    model_kerja: Number | None = None
    surplus: Number | None = None
    jumlah_sdm: Number | None = None
    jumlah_anggota: Number | None = None


@dataclass
class Keuangan:
    pinjaman_bank: Number | None = None
    investasi: Number | None = None
    modal_kerja: Number | None = None
    simpanan_anggota: Number | None = None
    hibah: Number | None = None
    omset: Number | None = None
    operasional: Number | None = None
    surplus: Number | None = None


@dataclass
class NeracaAktiva:
    """Balance sheet, assets side."""

    kas: Number | None = None
    piutang: Number | None = None
    aktiva_lancar: Number | None = None
    tanah: Number | None = None
    bangunan: Number | None = None
    kendaraan: Number | None = None
    aktiva_tetap: Number | None = None
    total_aktiva: Number | None = None


@dataclass
class NeracaPassiva:
    """Balance sheet, liabilities and equity side."""

    hutang_lancar: Number | None = None
    hutang_jangka_panjang: Number | None = None
    total_hutang: Number | None = None
    modal: Number | None = None
    total_passiva: Number | None = None


@dataclass
class MasalahKeuangan:
    """Financial problems checklist. Flags are never None."""

    rugi_keseluruhan: bool = False
    rugi_sebagian: bool = False
    arus_kas: bool = False
    piutang: bool = False
    jatuh_tempo: bool = False
    kredit: bool = False
    penggelapan: bool = False


@dataclass
class PerformaBisnis:
    """Business performance sub-form."""

    proyeksi_rugi_laba: bool | None = None
    proyeksi_arus_kas: bool | None = None
    hubungan_lembaga: list[HubunganLembaga] = field(default_factory=list)
    unit_usaha: list[UnitUsaha] = field(default_factory=list)
    keuangan: Keuangan = field(default_factory=Keuangan)
    neraca_aktiva: NeracaAktiva = field(default_factory=NeracaAktiva)
    neraca_passiva: NeracaPassiva = field(default_factory=NeracaPassiva)
    masalah_keuangan: MasalahKeuangan = field(default_factory=MasalahKeuangan)


# --- Performa Organisasi ---


@dataclass
class RencanaStrategis:
    """Strategic planning documents the cooperative has. Flags are never None."""

    visi: bool = False
    misi: bool = False
    rencana_strategis: bool = False
    sasaran_operasional: bool = False
    art: bool = False


@dataclass
class PrinsipKoperasi:
    """Self-assessment of the seven cooperative principles (ratings 1-5)."""

    sukarela_terbuka: int | None = None
    demokratis: int | None = None
    ekonomi: int | None = None
    kemandirian: int | None = None
    pendidikan: int | None = None
    kerja_sama: int | None = None
    kepedulian: int | None = None


@dataclass
class Pelatihan:
    pelatihan: str = ""
    akumulasi: int | None = None


@dataclass
class RapatKoordinasi:
    """Meeting cadence per meeting type."""

    rapat_pengurus: RapatFrequency = ""
    rapat_pengawas: RapatFrequency = ""
    rapat_gabungan: RapatFrequency = ""
    rapat_pengurus_karyawan: RapatFrequency = ""
    rapat_pengurus_anggota: RapatFrequency = ""


@dataclass
class PerformaOrganisasi:
    """Organisation performance sub-form."""

    jumlah_pengurus: int | None = None
    jumlah_pengawas: int | None = None
    jumlah_karyawan: int | None = None
    status: OrganisasiStatus = ""
    total_anggota: int | None = None
    anggota_aktif: int | None = None
    anggota_tidak_aktif: int | None = None
    general_manager: bool | None = None
    rapat_tepat_waktu: bool | None = None
    rapat_luar_biasa: bool | None = None
    pergantian_pengurus: bool | None = None
    pergantian_pengawas: bool | None = None
    rencana_strategis: RencanaStrategis = field(default_factory=RencanaStrategis)
    prinsip_koperasi: PrinsipKoperasi = field(default_factory=PrinsipKoperasi)
    pelatihan: list[Pelatihan] = field(default_factory=list)
    rapat_koordinasi: RapatKoordinasi = field(default_factory=RapatKoordinasi)


# --- Validation Error ---


@dataclass(frozen=True)
class FormValidationError:
    """Survey form validation error."""

    field: str
    code: str
    message: str
