"""Wave eligibility and longest-run selection."""

from .eligibility import (
    WaveRun,
    eligible_flags,
    longest_run,
    mark_longest_run,
    mark_waves,
    run_from_flags,
    select_longest_run,
)

__all__ = [
    "WaveRun",
    "eligible_flags",
    "longest_run",
    "mark_longest_run",
    "mark_waves",
    "run_from_flags",
    "select_longest_run",
]
