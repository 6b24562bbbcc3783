# ui_panel/spells/lead.py
"""
Step A: month-level unemployment and UI flags from the person's later waves.

A record's own interview reports employment for the two previous calendar
years and the months of the interview year before the interview. Months
after the interview are only seen retrospectively: the next wave (exactly
+2 years) reports the record's ``t0`` and ``t1`` years as its own ``t-2`` and
``t-1``, and the wave after that (exactly +4 years) reports ``t2`` and ``t3``.
When the required wave is missing or not at the exact distance, the
flags are missing.
"""

import logging
from typing import Dict, List, Tuple

import numpy as np
import pandas as pd

from ui_panel.months import (
    Block,
    RETROSPECTIVE_BLOCKS,
    UI_BLOCKS,
    lead_block,
    monthly_columns,
)
from ui_panel.schema import columns as C

logger = logging.getLogger(__name__)

LEAD_SUFFIX = "lead"
UNEMP_PREFIX = "unemp"
# (waves ahead, source block of the later wave)
LEAD_SOURCES = [(1, Block.T_MINUS_2), (1, Block.T_MINUS_1), (2, Block.T_MINUS_2), (2, Block.T_MINUS_1)]
LEAD_BLOCKS = [lead_block(src, k) for k, src in LEAD_SOURCES]  # t0, t1, t2, t3


def lead_columns(prefix: str, block: Block) -> List[str]:
    """Column names of lead flags, e.g. ``unemp_t1_03_lead``."""
    return [f"{c}_{LEAD_SUFFIX}" for c in monthly_columns(prefix, block)]


def own_unemployment_columns() -> List[str]:
    return [c for block in RETROSPECTIVE_BLOCKS for c in monthly_columns(UNEMP_PREFIX, block)]


def lead_unemployment_columns() -> List[str]:
    return [c for block in LEAD_BLOCKS for c in lead_columns(UNEMP_PREFIX, block)]


def lead_ui_columns() -> List[str]:
    return [c for block in LEAD_BLOCKS for c in lead_columns(C.UI_PREFIX, block)]


UI_AMOUNT_LEAD = f"{C.UI_AMOUNT}_{LEAD_SUFFIX}"


def sort_panel(df: pd.DataFrame) -> pd.DataFrame:
    """Sort by person and year with a fresh index."""
    return df.sort_values([C.PERSON_ID, C.YEAR], kind="mergesort").reset_index(drop=True)


def _numeric(frame: pd.DataFrame) -> pd.DataFrame:
    return frame.apply(pd.to_numeric, errors="coerce").astype("float64")


def _lead_frames(
    df: pd.DataFrame, cols: List[str], wave_gap_years: int
) -> Tuple[Dict[int, pd.DataFrame], Dict[int, int]]:
    """Values of ``cols`` from the next and second-next wave, masked unless exactly +2/+4 years."""
    grouped = df.groupby(C.PERSON_ID, sort=False)
    frames, n_valid = {}, {}
    for k in (1, 2):
        shifted = grouped[cols + [C.YEAR]].shift(-k)
        valid = (shifted[C.YEAR] == df[C.YEAR] + wave_gap_years * k).to_numpy()
        lead = shifted[cols].copy()
        lead.loc[~valid] = np.nan
        frames[k] = lead
        n_valid[k] = int(valid.sum())
    return frames, n_valid


def build_monthly_flags(df: pd.DataFrame, wave_gap_years: int = 2) -> pd.DataFrame:
    """
    Add own and lead monthly flag columns to a sorted panel.

    Own flags ``unemp_{tm2,tm1,t0}_MM`` are ``1 - emp`` of the record itself.
    Lead flags ``unemp_{t0..t3}_MM_lead`` and ``ui_{t0..t3}_MM_lead`` come from
    the next and second-next waves, along with ``ui_amount_lead`` (the next
    wave's annual UI amount for the record's ``t1`` year).

    Args:
        df: Panel sorted by person and year (see :func:`sort_panel`).
        wave_gap_years: Years between consecutive waves.

    Returns:
        A copy of ``df`` with the flag columns appended.
    """
    out = df.copy()
    emp_cols = {block: monthly_columns(C.EMP_PREFIX, block) for block in RETROSPECTIVE_BLOCKS}

    new_cols: Dict[str, pd.Series] = {}
    for block, cols in emp_cols.items():
        own = 1 - _numeric(df[cols])
        for src, dst in zip(cols, monthly_columns(UNEMP_PREFIX, block)):
            new_cols[dst] = own[src]

    has_ui = C.UI_AMOUNT in df.columns and all(
        c in df.columns for block in UI_BLOCKS for c in monthly_columns(C.UI_PREFIX, block)
    )
    source_cols = [c for cols in emp_cols.values() for c in cols]
    if has_ui:
        ui_cols = [c for block in UI_BLOCKS for c in monthly_columns(C.UI_PREFIX, block)]
        source_cols = source_cols + ui_cols + [C.UI_AMOUNT]
    numeric = _numeric(df[source_cols])
    numeric[C.PERSON_ID] = df[C.PERSON_ID]
    numeric[C.YEAR] = df[C.YEAR]
    leads, n_valid = _lead_frames(numeric, source_cols, wave_gap_years)

    for (k, src_block), dst_block in zip(LEAD_SOURCES, LEAD_BLOCKS):
        emp_src = leads[k][monthly_columns(C.EMP_PREFIX, src_block)]
        for src, dst in zip(emp_src.columns, lead_columns(UNEMP_PREFIX, dst_block)):
            new_cols[dst] = 1 - emp_src[src]
        ui_dst = lead_columns(C.UI_PREFIX, dst_block)
        if has_ui:
            ui_src = leads[k][monthly_columns(C.UI_PREFIX, src_block)]
            for src, dst in zip(ui_src.columns, ui_dst):
                new_cols[dst] = ui_src[src]
        else:
            for dst in ui_dst:
                new_cols[dst] = pd.Series(np.nan, index=df.index)

    new_cols[UI_AMOUNT_LEAD] = (
        leads[1][C.UI_AMOUNT] if has_ui else pd.Series(np.nan, index=df.index)
    )

    out = pd.concat([out, pd.DataFrame(new_cols, index=df.index)], axis=1)
    logger.info(
        f"Built monthly flags for {len(df)} records; {n_valid[1]} have a wave exactly "
        f"{wave_gap_years} years ahead, {n_valid[2]} one exactly {2 * wave_gap_years} years ahead"
    )
    if not has_ui:
        logger.warning("No UI monthly columns in panel; UI lead flags are all missing")
    return out


class FlagMatrix:
    """
    Offset-indexed view of the own and lead flag columns for fast row access.

    Own flags cover offsets -23..12, lead flags 1..48.
    """

    OWN_FIRST = 12 * Block.T_MINUS_2 + 1
    LEAD_FIRST = 1

    def __init__(self, df: pd.DataFrame):
        self.own = df[own_unemployment_columns()].to_numpy(dtype="float64", na_value=np.nan)
        self.lead = df[lead_unemployment_columns()].to_numpy(dtype="float64", na_value=np.nan)
        self.ui = df[lead_ui_columns()].to_numpy(dtype="float64", na_value=np.nan)

    @staticmethod
    def _take(arr: np.ndarray, row: int, offsets, first: int) -> list:
        out = []
        for off in offsets:
            v = arr[row, off - first]
            out.append(None if np.isnan(v) else int(v))
        return out

    def own_flags(self, row: int, offsets) -> list:
        return self._take(self.own, row, offsets, self.OWN_FIRST)

    def lead_flags(self, row: int, offsets) -> list:
        return self._take(self.lead, row, offsets, self.LEAD_FIRST)

    def ui_flags(self, row: int, offsets) -> list:
        return self._take(self.ui, row, offsets, self.LEAD_FIRST)
