# ui_panel/outcomes/alignment.py
"""
Outcome alignment around the employment transition.

For every wave the nearest observed outcomes are looked up in the person's
year-sorted wave list (distances are counted in waves, not years):

    outcome_now       own value, else nearest earlier within max_wave_distance
    outcome_next      nearest strictly later within max_wave_distance
    outcome_base_far  nearest value strictly before outcome_now's source wave,
                      at most max_base_distance waves back

The transition pattern over (t-1, t, t+1) then decides which of these is the
"after" value (``outcome_lead``) and which the "before" value
(``outcome_base``). Offsets are signed: negative for earlier waves.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ui_panel.config.models import AlignmentConfig
from ui_panel.schema import ExposureGroup, TransitionPattern
from ui_panel.schema import columns as C

logger = logging.getLogger(__name__)

NOW, NEXT, BASE_FAR = "now", "next", "base_far"

# (t-1, t, t+1) -> (lead source, base source); None matches any value including unknown.
SELECTION_RULES: List[Tuple[Tuple[Optional[int], Optional[int], Optional[int]], Tuple[str, str]]] = [
    ((0, 0, 0), (NEXT, NOW)),
    ((0, 0, 1), (NOW, BASE_FAR)),
    ((0, 1, None), (NEXT, NOW)),
    ((1, None, None), (NOW, BASE_FAR)),
]
# Rules for an unknown previous wave, keyed on the current wave.
UNKNOWN_PREVIOUS_RULES = {0: (NOW, BASE_FAR), 1: (NEXT, NOW)}

PATTERN_NAMES = {
    (0, 0): TransitionPattern.STABLY_EMPLOYED,
    (0, 1): TransitionPattern.NEWLY_UNEMPLOYED,
    (1, 0): TransitionPattern.NEWLY_REEMPLOYED,
    (1, 1): TransitionPattern.STABLY_UNEMPLOYED,
}

EXPOSURE_GROUPS = {
    TransitionPattern.STABLY_EMPLOYED.value: ExposureGroup.CONTINUOUSLY_EMPLOYED.value,
    TransitionPattern.NEWLY_UNEMPLOYED.value: ExposureGroup.RECENTLY_UNEMPLOYED.value,
}

ALIGNMENT_COLS = [
    C.OUTCOME_NOW,
    C.OUTCOME_NOW_OFFSET,
    C.OUTCOME_NEXT,
    C.OUTCOME_NEXT_OFFSET,
    C.OUTCOME_BASE_FAR,
    C.OUTCOME_BASE_FAR_OFFSET,
    C.TRANSITION_PATTERN,
    C.OUTCOME_LEAD,
    C.OUTCOME_LEAD_OFFSET,
    C.OUTCOME_LEAD_YEAR,
    C.OUTCOME_BASE,
    C.OUTCOME_BASE_OFFSET,
    C.OUTCOME_BASE_YEAR,
    C.OUTCOME_LAG1,
    C.OUTCOME_CHANGE,
    C.PREPOST,
]


@dataclass
class Lookup:
    """An outcome found ``offset`` waves away from the current wave."""

    value: Optional[float] = None
    offset: Optional[int] = None


def nearest_earlier(values: np.ndarray, i: int, start: int, max_back: int) -> Lookup:
    """Nearest non-missing value at rows ``i-start`` down to ``i-max_back``."""
    for d in range(start, max_back + 1):
        j = i - d
        if j < 0:
            break
        if not np.isnan(values[j]):
            return Lookup(float(values[j]), -d)
    return Lookup()


def nearest_later(values: np.ndarray, i: int, max_ahead: int) -> Lookup:
    for d in range(1, max_ahead + 1):
        j = i + d
        if j >= len(values):
            break
        if not np.isnan(values[j]):
            return Lookup(float(values[j]), d)
    return Lookup()


def _status(value) -> Optional[int]:
    return None if pd.isna(value) else int(value)


def _matches(rule: Sequence[Optional[int]], key: Sequence[Optional[int]]) -> bool:
    return all(r is None or r == k for r, k in zip(rule, key))


def select_sources(prev: Optional[int], cur: Optional[int], nxt: Optional[int]) -> Optional[Tuple[str, str]]:
    """Lead and base sources for a (t-1, t, t+1) status triple, or None when undefined."""
    if prev is None:
        return UNKNOWN_PREVIOUS_RULES.get(cur)
    for rule, sources in SELECTION_RULES:
        if _matches(rule, (prev, cur, nxt)):
            return sources
    return None


def transition_pattern(prev: Optional[int], cur: Optional[int]) -> TransitionPattern:
    if prev is None or cur is None:
        return TransitionPattern.UNKNOWN
    return PATTERN_NAMES.get((prev, cur), TransitionPattern.UNKNOWN)


def exposure_group(pattern) -> Optional[str]:
    """``CE`` / ``RU`` for stably-employed / newly-unemployed waves, else None."""
    if pattern is None or pd.isna(pattern):
        return None
    return EXPOSURE_GROUPS.get(str(pattern))


def _align_person(
    years: np.ndarray,
    outcome: np.ndarray,
    status: Sequence[Optional[int]],
    config: AlignmentConfig,
    wave_gap_years: int,
) -> List[dict]:
    rows = []
    n = len(years)
    for i in range(n):
        if np.isnan(outcome[i]):
            now = nearest_earlier(outcome, i, 1, config.max_wave_distance)
        else:
            now = Lookup(float(outcome[i]), 0)
        nxt = nearest_later(outcome, i, config.max_wave_distance)
        far_start = 1 if now.offset is None else 1 - now.offset
        base_far = nearest_earlier(outcome, i, far_start, config.max_base_distance)

        has_prev = i > 0 and years[i - 1] == years[i] - wave_gap_years
        has_next = i + 1 < n and years[i + 1] == years[i] + wave_gap_years
        prev_status = status[i - 1] if has_prev else None
        next_status = status[i + 1] if has_next else None
        cur_status = status[i]

        lookups = {NOW: now, NEXT: nxt, BASE_FAR: base_far}
        lead, base = Lookup(), Lookup()
        sources = select_sources(prev_status, cur_status, next_status)
        if sources is not None:
            lead, base = lookups[sources[0]], lookups[sources[1]]
            # A lead carried forward from an earlier wave is not an "after" value.
            if lead.offset is not None and lead.offset < 0:
                lead = Lookup()

        lag1 = float(outcome[i - 1]) if has_prev and not np.isnan(outcome[i - 1]) else None
        pattern = transition_pattern(prev_status, cur_status)
        change = None
        if lead.value is not None and base.value is not None:
            change = lead.value - base.value

        rows.append(
            {
                C.OUTCOME_NOW: now.value,
                C.OUTCOME_NOW_OFFSET: now.offset,
                C.OUTCOME_NEXT: nxt.value,
                C.OUTCOME_NEXT_OFFSET: nxt.offset,
                C.OUTCOME_BASE_FAR: base_far.value,
                C.OUTCOME_BASE_FAR_OFFSET: base_far.offset,
                C.TRANSITION_PATTERN: pattern.value,
                C.OUTCOME_LEAD: lead.value,
                C.OUTCOME_LEAD_OFFSET: lead.offset,
                C.OUTCOME_LEAD_YEAR: None if lead.offset is None else int(years[i + lead.offset]),
                C.OUTCOME_BASE: base.value,
                C.OUTCOME_BASE_OFFSET: base.offset,
                C.OUTCOME_BASE_YEAR: None if base.offset is None else int(years[i + base.offset]),
                C.OUTCOME_LAG1: lag1,
                C.OUTCOME_CHANGE: change,
                C.PREPOST: exposure_group(pattern.value),
            }
        )
    return rows


ALIGNMENT_DTYPES = {
    C.OUTCOME_NOW: "Float64",
    C.OUTCOME_NOW_OFFSET: "Int64",
    C.OUTCOME_NEXT: "Float64",
    C.OUTCOME_NEXT_OFFSET: "Int64",
    C.OUTCOME_BASE_FAR: "Float64",
    C.OUTCOME_BASE_FAR_OFFSET: "Int64",
    C.TRANSITION_PATTERN: "string",
    C.OUTCOME_LEAD: "Float64",
    C.OUTCOME_LEAD_OFFSET: "Int64",
    C.OUTCOME_LEAD_YEAR: "Int64",
    C.OUTCOME_BASE: "Float64",
    C.OUTCOME_BASE_OFFSET: "Int64",
    C.OUTCOME_BASE_YEAR: "Int64",
    C.OUTCOME_LAG1: "Float64",
    C.OUTCOME_CHANGE: "Float64",
    C.PREPOST: "string",
}


def align_outcomes(
    df: pd.DataFrame,
    config: Optional[AlignmentConfig] = None,
    wave_gap_years: int = 2,
) -> pd.DataFrame:
    """
    Add outcome alignment columns to one completed panel.

    Any alignment columns already present are replaced, so the function can
    be re-run after the lead indicator or the outcome changes.
    """
    config = config or AlignmentConfig()
    if config.outcome_column not in df.columns:
        logger.warning(f"Outcome column '{config.outcome_column}' not found; alignment fields will be missing")
        outcome_all = pd.Series(np.nan, index=df.index)
    else:
        outcome_all = pd.to_numeric(df[config.outcome_column], errors="coerce")

    records = {}
    for _, person in df.groupby(C.PERSON_ID, sort=False):
        person = person.sort_values(C.YEAR, kind="mergesort")
        years = person[C.YEAR].to_numpy(dtype="int64")
        outcome = outcome_all.loc[person.index].to_numpy(dtype="float64", na_value=np.nan)
        status = [_status(v) for v in person[C.UNEMPLOYED_12MO_LEAD]]
        for idx, row in zip(person.index, _align_person(years, outcome, status, config, wave_gap_years)):
            records[idx] = row

    aligned = pd.DataFrame.from_dict(records, orient="index", columns=ALIGNMENT_COLS)
    aligned = aligned.reindex(df.index).astype(ALIGNMENT_DTYPES)

    out = df.drop(columns=[c for c in ALIGNMENT_COLS if c in df.columns])
    out = pd.concat([out, aligned], axis=1)

    counts = out[C.TRANSITION_PATTERN].value_counts().to_dict()
    logger.info(
        f"Aligned outcomes for {len(out)} waves: {int(out[C.OUTCOME_LEAD].notna().sum())} with a lead, "
        f"{int(out[C.OUTCOME_BASE].notna().sum())} with a base; patterns {counts}"
    )
    return out


def recompute_outcome_change(df: pd.DataFrame) -> pd.DataFrame:
    """Refresh ``outcome_change`` from the aligned lead and base values."""
    out = df.copy()
    out[C.OUTCOME_CHANGE] = (out[C.OUTCOME_LEAD] - out[C.OUTCOME_BASE]).astype("Float64")
    return out
