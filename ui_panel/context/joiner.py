# ui_panel/context/joiner.py
"""
Joins state UI rules and state macro indicators onto resolved reference periods.

A state/period combination absent from a lookup leaves the joined fields
missing for that record; it is counted and logged, never raised.
"""

import logging
from typing import Dict, Optional, Tuple

import pandas as pd

from ui_panel.schema import columns as C
from ui_panel.sources import StateMacroSource, StateUiRulesSource

logger = logging.getLogger(__name__)

UI_RULE_COLUMNS = {
    "max_duration_weeks": C.STATE_MAX_DURATION,
    "max_weekly_benefit": C.STATE_MAX_BENEFIT,
    "min_base_wage": C.STATE_MIN_BASE_WAGE,
    "min_base_hours": C.STATE_MIN_BASE_HOURS,
    "min_base_weeks": C.STATE_MIN_BASE_WEEKS,
}
MACRO_COLUMNS = {
    "unemployment_rate": C.UNEMPLOYMENT_RATE,
    "gsp_per_capita": C.GSP_PER_CAPITA,
}


def _join(df: pd.DataFrame, keys: pd.DataFrame, fetch, columns: Dict[str, str], label: str) -> pd.DataFrame:
    out = df.copy()
    cache: Dict[Tuple, Optional[dict]] = {}
    values = {dst: [] for dst in columns.values()}
    misses = 0
    for key in keys.itertuples(index=False, name=None):
        if any(pd.isna(k) for k in key):
            rec = None
        else:
            if key not in cache:
                cache[key] = fetch(*key)
            rec = cache[key]
            if rec is None:
                misses += 1
        for src, dst in columns.items():
            v = rec.get(src) if rec else None
            values[dst].append(None if v is None or pd.isna(v) else float(v))
    for dst, vals in values.items():
        out[dst] = pd.array(vals, dtype="Float64")
    if misses:
        logger.warning(f"{label}: {misses} records with no matching state/period row")
    logger.info(f"{label}: joined {len(cache)} distinct state/period keys")
    return out


def join_ui_rules(df: pd.DataFrame, source: StateUiRulesSource) -> pd.DataFrame:
    keys = df[[C.STATE, C.UI_REF_YEAR, C.UI_REF_HALF]]
    return _join(
        df,
        keys,
        lambda state, year, half: source.get(state, (int(year), int(half))),
        UI_RULE_COLUMNS,
        "State UI rules",
    )


def join_macro(df: pd.DataFrame, source: StateMacroSource) -> pd.DataFrame:
    keys = df[[C.STATE, C.MACRO_REF_YEAR, C.MACRO_REF_QUARTER]]
    return _join(
        df,
        keys,
        lambda state, year, quarter: source.get(state, int(year), int(quarter)),
        MACRO_COLUMNS,
        "State macro",
    )


def join_state_context(
    df: pd.DataFrame,
    ui_rules: Optional[StateUiRulesSource] = None,
    macro: Optional[StateMacroSource] = None,
) -> pd.DataFrame:
    """Join whichever sources are given; absent sources leave their columns missing."""
    out = df
    if ui_rules is not None:
        out = join_ui_rules(out, ui_rules)
    else:
        out = out.copy()
        for dst in UI_RULE_COLUMNS.values():
            out[dst] = pd.array([None] * len(out), dtype="Float64")
    if macro is not None:
        out = join_macro(out, macro)
    else:
        for dst in MACRO_COLUMNS.values():
            out[dst] = pd.array([None] * len(out), dtype="Float64")
    return out
