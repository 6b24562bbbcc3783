"""Unemployment spell reconstruction (monthly flags, then per-record spell summaries)."""

from .lead import FlagMatrix, build_monthly_flags, sort_panel
from .reconstruct import SpellSummary, reconstruct_record, reconstruct_spells
from .scan import RunLength, first_positive, run_length

__all__ = [
    "FlagMatrix",
    "build_monthly_flags",
    "sort_panel",
    "SpellSummary",
    "reconstruct_record",
    "reconstruct_spells",
    "RunLength",
    "first_positive",
    "run_length",
]
