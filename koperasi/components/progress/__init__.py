"""
Progress component - questionnaire completion percentages.
"""

from .component import (
    bisnis_points,
    bisnis_progress,
    organisasi_points,
    organisasi_progress,
    progress_report,
    round_half_up,
    total_progress,
)
from .models import (
    BISNIS_TOTAL_POINTS,
    LIST_BLOCK_POINTS,
    ORGANISASI_TOTAL_POINTS,
    ProgressReport,
)

__all__ = [
    # Entry points
    "bisnis_points",
    "bisnis_progress",
    "organisasi_points",
    "organisasi_progress",
    "progress_report",
    "round_half_up",
    "total_progress",
    # Models
    "BISNIS_TOTAL_POINTS",
    "LIST_BLOCK_POINTS",
    "ORGANISASI_TOTAL_POINTS",
    "ProgressReport",
]
