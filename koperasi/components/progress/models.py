"""
Progress component models.
"""

from __future__ import annotations

from dataclasses import dataclass

ORGANISASI_TOTAL_POINTS = 20
BISNIS_TOTAL_POINTS = 25

# Non-empty list blocks count double.
LIST_BLOCK_POINTS = 2


@dataclass(frozen=True)
class ProgressReport:
    """Questionnaire completion percentages."""

    organisasi: int
    bisnis: int
    total: int
