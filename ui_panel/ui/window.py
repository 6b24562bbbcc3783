# ui_panel/ui/window.py
"""
UI receipt in the fixed window after spell onset.

For a spell first unemployed at offset ``f``, UI receipt is observed over
offsets ``f+1 .. f+window_months``. The UI recall is collected on the same
biennial cadence as employment, so onsets outside
``[min_onset_offset, max_onset_offset]`` can never have a fully observed
window, whatever the monthly UI data look like.
"""

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ui_panel.config.models import UiWindowConfig
from ui_panel.months import Block, offset_of
from ui_panel.schema import columns as C
from ui_panel.spells.lead import UI_AMOUNT_LEAD, FlagMatrix
from ui_panel.spells.scan import Flag, has_unknown, known_sum

logger = logging.getLogger(__name__)

# The next wave's prior calendar year is the record's t1 block.
ANNUAL_UI_OFFSETS = [offset_of(Block.T1, m) for m in range(1, 13)]


def window_offsets(first_offset: int, config: UiWindowConfig) -> range:
    return range(first_offset + 1, first_offset + 1 + config.window_months)


def onset_in_observable_range(first_offset: int, config: UiWindowConfig) -> bool:
    return config.min_onset_offset <= first_offset <= config.max_onset_offset


def window_fully_observed(first_offset: int, window: Sequence[Flag], config: UiWindowConfig) -> bool:
    if not onset_in_observable_range(first_offset, config):
        return False
    return not has_unknown(window)


def received_in_window(window: Sequence[Flag], fully_observed: bool) -> Optional[int]:
    """1 if any known month shows receipt, else unknown unless the window is complete."""
    if known_sum(window) > 0:
        return 1
    if not fully_observed:
        return None
    return 0


def annual_receipt(months: Sequence[Flag], amount: Optional[float]) -> Tuple[Optional[int], Optional[float]]:
    """
    Months with UI and the average monthly amount over a 12-month year.

    When some months are unknown but the annual amount is positive, the
    count of known receipt months stands in for the month count.
    """
    if amount is not None and amount == 0:
        return 0, 0.0
    if not has_unknown(months):
        n_months = known_sum(months)
    elif amount is not None and amount > 0:
        n_months = known_sum(months)
    else:
        return None, None
    if amount is None or n_months == 0:
        return n_months, None
    return n_months, float(amount) / n_months


def build_ui_window(df: pd.DataFrame, config: Optional[UiWindowConfig] = None) -> pd.DataFrame:
    """
    Add direct UI receipt columns to a panel with spell summaries.

    Window columns are filled only for records with a confirmed first
    unemployed month; annual receipt columns for every record whose next
    wave is exactly one wave ahead.
    """
    config = config or UiWindowConfig()
    flags = FlagMatrix(df)
    amounts = df[UI_AMOUNT_LEAD].to_numpy(dtype="float64", na_value=np.nan)

    observed: List[Optional[bool]] = []
    received: List[Optional[int]] = []
    months_received: List[Optional[int]] = []
    monthly_amount: List[Optional[float]] = []

    for row, first in enumerate(df[C.FIRST_UNEMPLOYED_OFFSET]):
        if pd.isna(first):
            observed.append(None)
            received.append(None)
        else:
            first = int(first)
            window = flags.ui_flags(row, window_offsets(first, config))
            full = window_fully_observed(first, window, config)
            observed.append(full)
            received.append(received_in_window(window, full))

        amount = None if np.isnan(amounts[row]) else float(amounts[row])
        n, avg = annual_receipt(flags.ui_flags(row, ANNUAL_UI_OFFSETS), amount)
        months_received.append(n)
        monthly_amount.append(avg)

    out = df.copy()
    out[C.UI_WINDOW_OBSERVED] = pd.array(observed, dtype="boolean")
    out[C.UI_RECEIVED] = pd.array(received, dtype="Int64")
    out[C.UI_RECEIPT_IMPUTED] = pd.array(
        [pd.NA if o is None else False for o in observed], dtype="boolean"
    )
    out[C.UI_MONTHS_RECEIVED] = pd.array(months_received, dtype="Int64")
    out[C.UI_MONTHLY_AMOUNT] = pd.array(monthly_amount, dtype="Float64")

    n_spells = int(df[C.FIRST_UNEMPLOYED_OFFSET].notna().sum())
    n_full = int(out[C.UI_WINDOW_OBSERVED].fillna(False).sum())
    n_recv = int((out[C.UI_RECEIVED] == 1).sum())
    logger.info(
        f"UI window: {n_spells} spells, {n_full} fully observed windows, {n_recv} with receipt"
    )
    return out
