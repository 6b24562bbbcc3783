# ui_panel/waves/eligibility.py
"""
Wave eligibility and longest-run selection.

A wave is eligible when the person was also interviewed exactly one and two
wave gaps earlier (2 and 4 years on the biennial cadence), so that both
lead-in waves are available to it. Each person keeps only the longest run
of consecutive eligible waves, widened backwards to cover the lead-in waves
of its first member.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from ui_panel.config.models import WaveConfig
from ui_panel.schema import columns as C

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WaveRun:
    """A run of consecutive eligible waves and the years it covers."""

    start_year: int
    end_year: int
    length: int
    span_start: int

    def covers(self, year: int) -> bool:
        return self.span_start <= year <= self.end_year


def eligible_flags(years: Sequence[int], wave_gap_years: int = 2, lead_in_waves: int = 2) -> List[int]:
    """
    Eligibility per wave for one person's year-sorted waves.

    The first ``lead_in_waves`` waves are never eligible.
    """
    flags = []
    for i, year in enumerate(years):
        if i < lead_in_waves:
            flags.append(0)
            continue
        ok = all(years[i - j] == year - j * wave_gap_years for j in range(1, lead_in_waves + 1))
        flags.append(int(ok))
    return flags


def longest_run(flags: Sequence[int], contiguous: Optional[Sequence[bool]] = None) -> Optional[tuple]:
    """
    ``(start, end, length)`` index bounds of the longest run of 1s, or None.

    ``contiguous[i]`` False starts a new run at ``i`` even after a 1. Single
    forward pass; an equally long later run never replaces the first one
    found.
    """
    best = None
    start = None
    for i, flag in enumerate(flags):
        if flag == 1:
            if start is None or (contiguous is not None and not contiguous[i]):
                start = i
            length = i - start + 1
            if best is None or length > best[2]:
                best = (start, i, length)
        else:
            start = None
    return best


def run_from_flags(years: Sequence[int], flags: Sequence[int], config: Optional[WaveConfig] = None) -> Optional[WaveRun]:
    """
    Longest run over precomputed eligibility flags, or None when no flag is set.

    A run also ends where consecutive waves are not exactly one wave gap
    apart, which can happen once rows have been dropped.
    """
    config = config or WaveConfig()
    contiguous = [i > 0 and years[i] - years[i - 1] == config.wave_gap_years for i in range(len(years))]
    best = longest_run(flags, contiguous)
    if best is None:
        return None
    start, end, length = best
    start_year, end_year = int(years[start]), int(years[end])
    return WaveRun(
        start_year=start_year,
        end_year=end_year,
        length=length,
        span_start=start_year - config.lead_in_waves * config.wave_gap_years,
    )


def select_longest_run(years: Sequence[int], config: Optional[WaveConfig] = None) -> Optional[WaveRun]:
    """Longest eligible run for one person, or None when no wave is eligible."""
    config = config or WaveConfig()
    flags = eligible_flags(years, config.wave_gap_years, config.lead_in_waves)
    return run_from_flags(years, flags, config)


def mark_longest_run(df: pd.DataFrame, config: Optional[WaveConfig] = None) -> pd.DataFrame:
    """
    Set ``included`` and ``longest_run_length`` from an existing ``eligible`` column.

    Used directly after rows have been dropped from a panel: eligibility
    keeps its original meaning while the run is re-selected among the rows
    that remain.
    """
    config = config or WaveConfig()
    included = pd.Series(0, index=df.index, dtype="int64")
    run_length = pd.Series(0, index=df.index, dtype="int64")

    n_people = 0
    n_with_run = 0
    for _, person in df.groupby(C.PERSON_ID, sort=False):
        n_people += 1
        person = person.sort_values(C.YEAR, kind="mergesort")
        years = person[C.YEAR].astype(int).tolist()
        run = run_from_flags(years, person[C.ELIGIBLE].astype(int).tolist(), config)
        if run is None:
            continue
        n_with_run += 1
        covered = np.array([run.covers(y) for y in years])
        included.loc[person.index[covered]] = 1
        run_length.loc[person.index] = run.length

    out = df.copy()
    out[C.INCLUDED] = included
    out[C.LONGEST_RUN_LENGTH] = run_length
    logger.info(
        f"Wave selection: {n_with_run} of {n_people} persons have an eligible run; "
        f"{int(included.sum())} waves included"
    )
    return out


def mark_waves(df: pd.DataFrame, config: Optional[WaveConfig] = None) -> pd.DataFrame:
    """
    Add ``eligible``, ``included`` and ``longest_run_length`` to a panel.

    Rows are processed per person in year order; the frame's row order is
    preserved in the result.
    """
    config = config or WaveConfig()
    eligible = pd.Series(0, index=df.index, dtype="int64")
    for _, person in df.groupby(C.PERSON_ID, sort=False):
        person = person.sort_values(C.YEAR, kind="mergesort")
        years = person[C.YEAR].astype(int).tolist()
        eligible.loc[person.index] = eligible_flags(years, config.wave_gap_years, config.lead_in_waves)

    out = df.copy()
    out[C.ELIGIBLE] = eligible
    return mark_longest_run(out, config)
