"""Outcome alignment around employment transitions."""

from .alignment import (
    ALIGNMENT_COLS,
    Lookup,
    align_outcomes,
    exposure_group,
    nearest_earlier,
    nearest_later,
    recompute_outcome_change,
    select_sources,
    transition_pattern,
)

__all__ = [
    "ALIGNMENT_COLS",
    "Lookup",
    "align_outcomes",
    "exposure_group",
    "nearest_earlier",
    "nearest_later",
    "recompute_outcome_change",
    "select_sources",
    "transition_pattern",
]
