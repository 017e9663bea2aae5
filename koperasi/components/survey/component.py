"""
Survey component - performa sub-form normalisation.

Maps loosely-typed backend survey records into the canonical PerformaBisnis
and PerformaOrganisasi shapes, validates filled forms and serialises them
back into request payloads.

Invariants:
- Normalisation is total: any input, including None, yields a fully-defaulted form
- snake_case keys win over camelCase keys when both are present
- Unanswered numeric fields are None; an explicit 0 is kept
- List blocks are never None and keep backend order
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import asdict
from typing import Any, TypeVar

from .models import (
    LEMBAGA_LEGACY_OPTIONS,
    LEMBAGA_OPTIONS,
    PELATIHAN_OPTIONS,
    RAPAT_FREQUENCIES,
    STATUS_VALUES,
    UNIT_OPTIONS,
    FormValidationError,
    HubunganLembaga,
    Keuangan,
    MasalahKeuangan,
    NeracaAktiva,
    NeracaPassiva,
    Number,
    Pelatihan,
    PerformaBisnis,
    PerformaOrganisasi,
    PrinsipKoperasi,
    RapatKoordinasi,
    RencanaStrategis,
    UnitUsaha,
)

T = TypeVar("T")

_TRUE_STRINGS = frozenset({"true", "1", "yes", "ya"})
_FALSE_STRINGS = frozenset({"false", "0", "no", "tidak"})


# --- Field Coercion ---


def first_present(obj: Any, keys: Sequence[str]) -> Any:
    """
    Return the value of the first key that is present and not None.

    Used for blocks the backend sends as either snake_case or camelCase;
    callers list the snake_case key first.
    """
    if not isinstance(obj, Mapping):
        return None
    for key in keys:
        value = obj.get(key)
        if value is not None:
            return value
    return None


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _as_list(value: Any) -> list[Mapping[str, Any]]:
    if not isinstance(value, list | tuple):
        return []
    return [item for item in value if isinstance(item, Mapping)]


def opt_number(value: Any) -> Number | None:
    """Coerce a backend value to a number, or None if unanswered."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def opt_int(value: Any) -> int | None:
    """Coerce to an integer; fractional values are treated as unanswered."""
    number = opt_number(value)
    if number is None:
        return None
    if isinstance(number, float):
        return int(number) if number.is_integer() else None
    return number


def opt_bool(value: Any) -> bool | None:
    """Coerce to a nullable boolean (accepts 0/1 and common strings)."""
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    return None


def _flag(value: Any) -> bool:
    return opt_bool(value) or False


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _choice(value: Any, allowed: Iterable[str]) -> Any:
    return value if isinstance(value, str) and value in allowed else ""


def _block(raw: Any, snake: str, camel: str) -> Mapping[str, Any]:
    return _as_mapping(first_present(raw, (snake, camel)))


def _items(raw: Any, keys: Sequence[str], build: Callable[[Mapping[str, Any]], T]) -> list[T]:
    return [build(item) for item in _as_list(first_present(raw, keys))]


# --- Bisnis Normalisation ---


def _hubungan_lembaga(src: Mapping[str, Any]) -> HubunganLembaga:
    return HubunganLembaga(
        lembaga=_text(src.get("lembaga")),
        kemudahan=opt_int(src.get("kemudahan")),
        intensitas=opt_int(src.get("intensitas")),
        dampak=opt_int(src.get("dampak")),
    )


def _unit_usaha(src: Mapping[str, Any]) -> UnitUsaha:
    return UnitUsaha(
        unit=_text(src.get("unit")),
        volume_usaha=opt_number(src.get("volume_usaha")),
        investasi=opt_number(src.get("investasi")),
        model_kerja=opt_number(src.get("model_kerja")),
        surplus=opt_number(src.get("surplus")),
        jumlah_sdm=opt_number(src.get("jumlah_sdm")),
        jumlah_anggota=opt_number(src.get("jumlah_anggota")),
    )


def normalize_bisnis(raw: Any) -> PerformaBisnis:
    """
    Normalise a raw business performance record.

    Args:
        raw: Backend record (dict) or None.

    Returns:
        PerformaBisnis with every missing field defaulted.
    """
    src = _as_mapping(raw)

    keuangan = _as_mapping(src.get("keuangan"))
    aktiva = _block(src, "neraca_aktiva", "neracaAktiva")
    passiva = _block(src, "neraca_passiva", "neracaPassiva")
    masalah = _block(src, "masalah_keuangan", "masalahKeuangan")

    return PerformaBisnis(
        proyeksi_rugi_laba=opt_bool(src.get("proyeksi_rugi_laba")),
        proyeksi_arus_kas=opt_bool(src.get("proyeksi_arus_kas")),
        hubungan_lembaga=_items(src, ("hubungan_lembaga", "hubunganLembaga"), _hubungan_lembaga),
        unit_usaha=_items(src, ("unit_usaha", "unitUsaha"), _unit_usaha),
        keuangan=Keuangan(
            pinjaman_bank=opt_number(keuangan.get("pinjaman_bank")),
            investasi=opt_number(keuangan.get("investasi")),
            modal_kerja=opt_number(keuangan.get("modal_kerja")),
            simpanan_anggota=opt_number(keuangan.get("simpanan_anggota")),
            hibah=opt_number(keuangan.get("hibah")),
            omset=opt_number(keuangan.get("omset")),
            operasional=opt_number(keuangan.get("operasional")),
            surplus=opt_number(keuangan.get("surplus")),
        ),
        neraca_aktiva=NeracaAktiva(
            kas=opt_number(aktiva.get("kas")),
            piutang=opt_number(aktiva.get("piutang")),
            aktiva_lancar=opt_number(aktiva.get("aktiva_lancar")),
            tanah=opt_number(aktiva.get("tanah")),
            bangunan=opt_number(aktiva.get("bangunan")),
            kendaraan=opt_number(aktiva.get("kendaraan")),
            aktiva_tetap=opt_number(aktiva.get("aktiva_tetap")),
            total_aktiva=opt_number(aktiva.get("total_aktiva")),
        ),
        neraca_passiva=NeracaPassiva(
            hutang_lancar=opt_number(passiva.get("hutang_lancar")),
            hutang_jangka_panjang=opt_number(passiva.get("hutang_jangka_panjang")),
            total_hutang=opt_number(passiva.get("total_hutang")),
            modal=opt_number(passiva.get("modal")),
            total_passiva=opt_number(passiva.get("total_passiva")),
        ),
        masalah_keuangan=MasalahKeuangan(
            rugi_keseluruhan=_flag(masalah.get("rugi_keseluruhan")),
            rugi_sebagian=_flag(masalah.get("rugi_sebagian")),
            arus_kas=_flag(masalah.get("arus_kas")),
            piutang=_flag(masalah.get("piutang")),
            jatuh_tempo=_flag(masalah.get("jatuh_tempo")),
            kredit=_flag(masalah.get("kredit")),
            penggelapan=_flag(masalah.get("penggelapan")),
        ),
    )


# --- Organisasi Normalisation ---


def _pelatihan(src: Mapping[str, Any]) -> Pelatihan:
    return Pelatihan(
        pelatihan=_text(src.get("pelatihan")),
        akumulasi=opt_int(src.get("akumulasi")),
    )


def normalize_organisasi(raw: Any) -> PerformaOrganisasi:
    """
    Normalise a raw organisation performance record.

    Args:
        raw: Backend record (dict) or None.

    Returns:
        PerformaOrganisasi with every missing field defaulted.
    """
    src = _as_mapping(raw)

    rencana = _block(src, "rencana_strategis", "rencanaStrategis")
    prinsip = _block(src, "prinsip_koperasi", "prinsipKoperasi")
    rapat = _block(src, "rapat_koordinasi", "rapatKoordinasi")

    return PerformaOrganisasi(
        jumlah_pengurus=opt_int(src.get("jumlah_pengurus")),
        jumlah_pengawas=opt_int(src.get("jumlah_pengawas")),
        jumlah_karyawan=opt_int(src.get("jumlah_karyawan")),
        status=_choice(src.get("status"), STATUS_VALUES),
        total_anggota=opt_int(src.get("total_anggota")),
        anggota_aktif=opt_int(src.get("anggota_aktif")),
        anggota_tidak_aktif=opt_int(src.get("anggota_tidak_aktif")),
        general_manager=opt_bool(src.get("general_manager")),
        rapat_tepat_waktu=opt_bool(src.get("rapat_tepat_waktu")),
        rapat_luar_biasa=opt_bool(src.get("rapat_luar_biasa")),
        pergantian_pengurus=opt_bool(src.get("pergantian_pengurus")),
        pergantian_pengawas=opt_bool(src.get("pergantian_pengawas")),
        rencana_strategis=RencanaStrategis(
            visi=_flag(rencana.get("visi")),
            misi=_flag(rencana.get("misi")),
            rencana_strategis=_flag(rencana.get("rencana_strategis")),
            sasaran_operasional=_flag(rencana.get("sasaran_operasional")),
            art=_flag(rencana.get("art")),
        ),
        prinsip_koperasi=PrinsipKoperasi(
            sukarela_terbuka=opt_int(prinsip.get("sukarela_terbuka")),
            demokratis=opt_int(prinsip.get("demokratis")),
            ekonomi=opt_int(prinsip.get("ekonomi")),
            kemandirian=opt_int(prinsip.get("kemandirian")),
            pendidikan=opt_int(prinsip.get("pendidikan")),
            kerja_sama=opt_int(prinsip.get("kerja_sama")),
            kepedulian=opt_int(prinsip.get("kepedulian")),
        ),
        pelatihan=_items(src, ("pelatihan",), _pelatihan),
        rapat_koordinasi=RapatKoordinasi(
            rapat_pengurus=_choice(rapat.get("rapat_pengurus"), RAPAT_FREQUENCIES),
            rapat_pengawas=_choice(rapat.get("rapat_pengawas"), RAPAT_FREQUENCIES),
            rapat_gabungan=_choice(rapat.get("rapat_gabungan"), RAPAT_FREQUENCIES),
            rapat_pengurus_karyawan=_choice(
                rapat.get("rapat_pengurus_karyawan"), RAPAT_FREQUENCIES
            ),
            rapat_pengurus_anggota=_choice(
                rapat.get("rapat_pengurus_anggota"), RAPAT_FREQUENCIES
            ),
        ),
    )


# --- Payloads ---


def bisnis_payload(form: PerformaBisnis) -> dict[str, Any]:
    """Request body for PUT .../performa/{id}/bisnis."""
    return asdict(form)


def organisasi_payload(form: PerformaOrganisasi) -> dict[str, Any]:
    """Request body for PUT .../performa/{id}/organisasi."""
    return asdict(form)


# --- Validation ---


def _check_range(
    errors: list[FormValidationError],
    field_name: str,
    value: Number | None,
    low: int,
    high: int,
) -> None:
    if value is not None and not low <= value <= high:
        errors.append(
            FormValidationError(
                field=field_name,
                code="out_of_range",
                message=f"Field '{field_name}' must be between {low} and {high}",
            )
        )


def _check_non_negative(
    errors: list[FormValidationError],
    field_name: str,
    value: Number | None,
) -> None:
    if value is not None and value < 0:
        errors.append(
            FormValidationError(
                field=field_name,
                code="negative",
                message=f"Field '{field_name}' must not be negative",
            )
        )


def _check_option(
    errors: list[FormValidationError],
    field_name: str,
    value: str,
    allowed: Sequence[str],
    *,
    allow_empty: bool = False,
) -> None:
    if allow_empty and value == "":
        return
    if value not in allowed:
        errors.append(
            FormValidationError(
                field=field_name,
                code="invalid_choice",
                message=f"Field '{field_name}' must be one of: {', '.join(allowed)}",
            )
        )


def validate_bisnis(form: PerformaBisnis) -> list[FormValidationError]:
    """Validate a business sub-form before saving."""
    errors: list[FormValidationError] = []

    for i, hubungan in enumerate(form.hubungan_lembaga):
        prefix = f"hubungan_lembaga[{i}]"
        _check_option(
            errors,
            f"{prefix}.lembaga",
            hubungan.lembaga,
            LEMBAGA_OPTIONS + LEMBAGA_LEGACY_OPTIONS,
        )
        for name in ("kemudahan", "intensitas", "dampak"):
            _check_range(errors, f"{prefix}.{name}", getattr(hubungan, name), 1, 4)

    for i, unit in enumerate(form.unit_usaha):
        prefix = f"unit_usaha[{i}]"
        _check_option(errors, f"{prefix}.unit", unit.unit, UNIT_OPTIONS)
        _check_non_negative(errors, f"{prefix}.jumlah_sdm", unit.jumlah_sdm)
        _check_non_negative(errors, f"{prefix}.jumlah_anggota", unit.jumlah_anggota)

    return errors


def validate_organisasi(form: PerformaOrganisasi) -> list[FormValidationError]:
    """Validate an organisation sub-form before saving."""
    errors: list[FormValidationError] = []

    for name in (
        "jumlah_pengurus",
        "jumlah_pengawas",
        "jumlah_karyawan",
        "total_anggota",
        "anggota_aktif",
        "anggota_tidak_aktif",
    ):
        _check_non_negative(errors, name, getattr(form, name))

    _check_option(errors, "status", form.status, STATUS_VALUES, allow_empty=True)

    for name, value in asdict(form.prinsip_koperasi).items():
        _check_range(errors, f"prinsip_koperasi.{name}", value, 1, 5)

    for i, item in enumerate(form.pelatihan):
        prefix = f"pelatihan[{i}]"
        _check_option(errors, f"{prefix}.pelatihan", item.pelatihan, PELATIHAN_OPTIONS)
        _check_non_negative(errors, f"{prefix}.akumulasi", item.akumulasi)

    for name, value in asdict(form.rapat_koordinasi).items():
        _check_option(
            errors, f"rapat_koordinasi.{name}", value, RAPAT_FREQUENCIES, allow_empty=True
        )

    return errors
