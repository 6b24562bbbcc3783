# ui_panel/ui/non_receipt.py
"""
Rule-based imputation of UI non-receipt.

Only records whose receipt in the window is still unknown after direct
computation are touched, and only ever set to 0. A record is taken as a
non-recipient when any of these hold:

    (a) it was unemployed for more than ``max_prior_unemployment_months``
        before the interview,
    (b) its prior-year labour income is below the state's minimum
        base-period wage,
    (c) its annual hours are below the state's minimum base-period hours,
    (d) its remaining weeks worked are below the state's minimum weeks.

A rule whose inputs are missing does not fire.
"""

import logging
from typing import Optional

import pandas as pd

from ui_panel.config.models import UiWindowConfig
from ui_panel.schema import columns as C

logger = logging.getLogger(__name__)


def _below(values: pd.Series, threshold: pd.Series) -> pd.Series:
    """Elementwise ``values < threshold`` with missing on either side giving False."""
    values = pd.to_numeric(values, errors="coerce").astype("Float64")
    threshold = pd.to_numeric(threshold, errors="coerce").astype("Float64")
    return (values < threshold).fillna(False).astype(bool)


def _column(df: pd.DataFrame, name: str) -> pd.Series:
    if name in df.columns:
        return df[name]
    return pd.Series(pd.NA, index=df.index, dtype="Float64")


def remaining_weeks_worked(df: pd.DataFrame, weeks_per_year: int = 52) -> pd.Series:
    """Weeks in the prior year not spent unemployed or out of the labour force."""
    unemployed = pd.to_numeric(_column(df, C.WEEKS_UNEMPLOYED), errors="coerce").astype("Float64")
    olf = pd.to_numeric(_column(df, C.WEEKS_OUT_OF_LABOR_FORCE), errors="coerce").astype("Float64")
    return (weeks_per_year - unemployed - olf).clip(lower=0)


def non_receipt_reasons(df: pd.DataFrame, config: UiWindowConfig) -> pd.DataFrame:
    """One boolean column per disqualification rule."""
    prior_unemp = pd.to_numeric(df[C.PRE_MIN], errors="coerce").astype("Float64")
    reasons = pd.DataFrame(index=df.index)
    reasons["long_prior_unemployment"] = (
        (prior_unemp > config.max_prior_unemployment_months).fillna(False).astype(bool)
    )
    reasons["low_base_wage"] = _below(_column(df, C.LABOR_INCOME), _column(df, C.STATE_MIN_BASE_WAGE))
    if config.use_hours_rule:
        reasons["low_base_hours"] = _below(_column(df, C.ANNUAL_HOURS), _column(df, C.STATE_MIN_BASE_HOURS))
    if config.use_weeks_rule:
        reasons["low_base_weeks"] = _below(
            remaining_weeks_worked(df, config.weeks_per_year), _column(df, C.STATE_MIN_BASE_WEEKS)
        )
    return reasons


def impute_non_receipt(df: pd.DataFrame, config: Optional[UiWindowConfig] = None) -> pd.DataFrame:
    """
    Fill unknown UI receipt with 0 where a disqualification rule applies.

    Observed values, zero or positive, are never changed, and records without
    a spell are left alone.
    """
    config = config or UiWindowConfig()
    reasons = non_receipt_reasons(df, config)
    candidates = df[C.UI_RECEIVED].isna() & df[C.FIRST_UNEMPLOYED_OFFSET].notna()
    fill = candidates & reasons.any(axis=1)

    out = df.copy()
    out.loc[fill, C.UI_RECEIVED] = 0
    out.loc[fill, C.UI_RECEIPT_IMPUTED] = True

    counts = {name: int((candidates & col).sum()) for name, col in reasons.items()}
    logger.info(
        f"Non-receipt imputation: {int(fill.sum())} of {int(candidates.sum())} unknown windows set to 0; "
        f"rule hits {counts}"
    )
    return out
