"""
Survey component - performa sub-form normalisation and validation.
"""

from .component import (
    bisnis_payload,
    first_present,
    normalize_bisnis,
    normalize_organisasi,
    opt_bool,
    opt_int,
    opt_number,
    organisasi_payload,
    validate_bisnis,
    validate_organisasi,
)
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
    Pelatihan,
    PerformaBisnis,
    PerformaOrganisasi,
    PrinsipKoperasi,
    RapatKoordinasi,
    RencanaStrategis,
    UnitUsaha,
)

__all__ = [
    # Entry points
    "bisnis_payload",
    "first_present",
    "normalize_bisnis",
    "normalize_organisasi",
    "opt_bool",
    "opt_int",
    "opt_number",
    "organisasi_payload",
    "validate_bisnis",
    "validate_organisasi",
    # Models
    "FormValidationError",
    "HubunganLembaga",
    "Keuangan",
    "MasalahKeuangan",
    "NeracaAktiva",
    "NeracaPassiva",
    "Pelatihan",
    "PerformaBisnis",
    "PerformaOrganisasi",
    "PrinsipKoperasi",
    "RapatKoordinasi",
    "RencanaStrategis",
    "UnitUsaha",
    # Option catalogues
    "LEMBAGA_LEGACY_OPTIONS",
    "LEMBAGA_OPTIONS",
    "PELATIHAN_OPTIONS",
    "RAPAT_FREQUENCIES",
    "STATUS_VALUES",
    "UNIT_OPTIONS",
]
