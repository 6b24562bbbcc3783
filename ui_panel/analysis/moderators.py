# ui_panel/analysis/moderators.py
"""
Stratifying variables for conditional effect estimates.

All thresholds are computed within the dataset passed in, except the UI
generosity and duration medians, which come from the state UI rules table
over a fixed range of years.
"""

import logging
from typing import Optional, Tuple

import numpy as np
import pandas as pd

from ui_panel.config.models import AnalysisConfig
from ui_panel.schema import columns as C

logger = logging.getLogger(__name__)

NO_UI = "None"


def baseline_quartile(base: pd.Series) -> pd.Series:
    """Quartile (1-4) of the baseline outcome; missing stays missing."""
    numeric = pd.to_numeric(base, errors="coerce").astype("float64")
    result = pd.Series(pd.NA, index=base.index, dtype="Int64")
    if numeric.notna().sum() == 0:
        return result
    q25, q50, q75 = numeric.quantile([0.25, 0.5, 0.75])
    known = numeric.notna()
    result[known] = 4
    result[known & (numeric < q75)] = 3
    result[known & (numeric < q50)] = 2
    result[known & (numeric < q25)] = 1
    return result


def race_ethnicity(df: pd.DataFrame) -> pd.Series:
    """Hispanic, NHBlack, NHOther or NHWhite from the dichotomized race and ethnicity."""
    result = pd.Series(pd.NA, index=df.index, dtype="string")
    hispanic, black, other = df["hispanic"], df["black"], df["other"]
    result[(black == 0).fillna(False) & (other == 0).fillna(False)] = "NHWhite"
    result[(other == 1).fillna(False)] = "NHOther"
    result[(black == 1).fillna(False)] = "NHBlack"
    result[hispanic.isna()] = pd.NA
    result[(hispanic == 1).fillna(False)] = "Hispanic"
    return result


def below_median_length(df: pd.DataFrame) -> pd.Series:
    """
    1 if an exposed wave's spell is shorter than the median among exposed
    waves, 0 otherwise; missing for unexposed waves.
    """
    exposed = (df[C.UNEMPLOYED_12MO_LEAD] == 1).fillna(False).astype(bool)
    length = pd.to_numeric(df[C.SPELL_DURATION], errors="coerce").astype("float64")
    result = pd.Series(pd.NA, index=df.index, dtype="Int64")
    if not (exposed & length.notna()).any():
        return result
    median = length[exposed].median()
    result[exposed & (length < median)] = 1
    result[exposed & (length >= median)] = 0
    return result


def state_ui_medians(
    ui_rules: pd.DataFrame, years: Tuple[int, int] = (2001, 2017)
) -> Tuple[float, float]:
    """
    Median maximum duration and maximum weekly benefit across state-periods.

    Args:
        ui_rules: Table with ``year``, ``max_duration_weeks`` and ``max_weekly_benefit``.
        years: Inclusive year range.
    """
    first, last = years
    in_range = ui_rules[(ui_rules["year"] >= first) & (ui_rules["year"] <= last)]
    if in_range.empty:
        logger.warning(f"No UI rules between {first} and {last}; medians are missing")
        return np.nan, np.nan
    return (
        float(in_range["max_duration_weeks"].median()),
        float(in_range["max_weekly_benefit"].median()),
    )


def _below(values: pd.Series, threshold: float) -> pd.Series:
    numeric = pd.to_numeric(values, errors="coerce").astype("float64")
    result = pd.Series(pd.NA, index=values.index, dtype="Int64")
    if np.isnan(threshold):
        return result
    result[numeric < threshold] = 1
    result[numeric >= threshold] = 0
    return result


def ui_category(received: pd.Series, below_median: pd.Series, less: str, more: str) -> pd.Series:
    result = pd.Series(pd.NA, index=received.index, dtype="string")
    result[(received == 0).fillna(False)] = NO_UI
    got = (received == 1).fillna(False)
    result[got & (below_median == 1).fillna(False)] = less
    result[got & (below_median == 0).fillna(False)] = more
    return result


def add_moderators(
    df: pd.DataFrame,
    ui_rules: Optional[pd.DataFrame] = None,
    config: Optional[AnalysisConfig] = None,
) -> pd.DataFrame:
    """Add every stratifying variable to a prepared analysis dataset."""
    config = config or AnalysisConfig()
    out = df.copy()
    out[C.BASELINE_QUARTILE] = baseline_quartile(out[C.OUTCOME_BASE])
    if {"hispanic", "black", "other"}.issubset(out.columns):
        out[C.RACE_ETH] = race_ethnicity(out)
    out[C.BELOW_MEDIAN_LENGTH] = below_median_length(out)

    if ui_rules is None:
        logger.warning("No UI rules table; UI duration and generosity moderators are missing")
        med_duration, med_benefit = np.nan, np.nan
    else:
        med_duration, med_benefit = state_ui_medians(ui_rules, config.ui_median_years)
    out[C.UI_DUR_BELOW_MEDIAN] = _below(out[C.STATE_MAX_DURATION], med_duration)
    out[C.UI_GEN_BELOW_MEDIAN] = _below(out[C.STATE_MAX_BENEFIT], med_benefit)
    out[C.UI_CAT_DUR] = ui_category(out[C.UI_RECEIVED], out[C.UI_DUR_BELOW_MEDIAN], "YesLessMedDur", "YesMoreMedDur")
    out[C.UI_CAT_GEN] = ui_category(out[C.UI_RECEIVED], out[C.UI_GEN_BELOW_MEDIAN], "YesLessMedGen", "YesMoreMedGen")
    logger.debug(f"Moderators added (median duration={med_duration}, median benefit={med_benefit})")
    return out
