# ui_panel/analysis/prepare.py
"""
Analysis-sample preparation for one completed (or complete-case) panel.

Steps, in order:

1. Base occupation and same-state / same-occupation continuity flags; waves
   that moved state over the lead-in period are dropped.
2. Family wealth is winsorized and categorical covariates dichotomized.
3. The aligned outcome is standardized.
4. Rows are restricted to included waves with a known exposure and outcome,
   and the longest run is re-selected among the rows that remain.
"""

import logging
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from ui_panel.config.models import AnalysisConfig, PanelBuildConfig, WaveConfig
from ui_panel.schema import NO_OCCUPATION
from ui_panel.schema import columns as C
from ui_panel.waves import mark_longest_run

logger = logging.getLogger(__name__)

# Dummy column -> (source column, matching values)
DICHOTOMIES: Dict[str, tuple] = {
    "male": (C.GENDER, ("Male",)),
    "black": (C.RACE, ("Black",)),
    "other": (C.RACE, ("Other",)),
    "hispanic": (C.ETHNICITY, ("Hispanic",)),
    "non_native": (C.NATIVITY, ("NotUS",)),
    "married": (C.MARITAL_STATUS, ("MarriedCohabiting",)),
    "lesshs": (C.EDUCATION, ("LessHS",)),
    "college": (C.EDUCATION, ("College",)),
}

BASE_OCCUPATION_DUMMIES: Dict[str, str] = {
    "base_occ_farmforfish": "Farmingforestryandfishing",
    "base_occ_managerial": "Managerial",
    "base_occ_military": "Military",
    "base_occ_opfablab": "Operatorsfabricatorsandlaborers",
    "base_occ_precision": "Precisionproductioncraftandrepair",
    "base_occ_profspec": "Professionalspecialty",
    "base_occ_services": "Services",
}


def _by_person(df: pd.DataFrame):
    return df.groupby(C.PERSON_ID, sort=False)


def _usable_occupation(values: pd.Series) -> pd.Series:
    return values.notna() & (values != NO_OCCUPATION)


def base_occupation(df: pd.DataFrame, lags: Sequence[int] = (1, 0, 2, 3, 4)) -> pd.Series:
    """
    Occupation before the transition, searched over earlier and current waves.

    ``lags`` are row lags within the person's year-sorted waves, tried in
    order; the first known occupation other than unemployed/out of the
    labour force wins.
    """
    if C.OCCUPATION not in df.columns:
        return pd.Series(pd.NA, index=df.index, dtype="string")
    occupation = df[C.OCCUPATION].astype("string")
    grouped = occupation.groupby(df[C.PERSON_ID], sort=False)
    result = pd.Series(pd.NA, index=df.index, dtype="string")
    for lag in lags:
        candidate = occupation if lag == 0 else grouped.shift(lag)
        take = result.isna() & _usable_occupation(candidate).fillna(False).astype(bool)
        result[take] = candidate[take]
    return result


def same_over_lead_in(df: pd.DataFrame, column: str, wave_gap_years: int = 2) -> pd.Series:
    """
    1 if ``column`` is unchanged over the wave and its two predecessors, 0 if
    it changed, missing when the predecessors are not exactly one and two
    wave gaps back.

    Persons whose value never changes get 1 throughout; waves without two
    predecessors also get 1.
    """
    grouped = _by_person(df)
    constant = grouped[column].transform(lambda s: s.nunique(dropna=False) <= 1).astype(bool)

    values = df[column].astype("string")
    by_person = values.groupby(df[C.PERSON_ID], sort=False)
    val1 = by_person.shift(1)
    val2 = by_person.shift(2)
    year = df[C.YEAR]
    year1 = grouped[C.YEAR].shift(1)
    year2 = grouped[C.YEAR].shift(2)

    no_history = (year1.isna() | year2.isna()).astype(bool)
    exact = ((year1 == year - wave_gap_years) & (year2 == year - 2 * wave_gap_years)).fillna(False).astype(bool)
    known = exact & ~(values.isna() | val1.isna() | val2.isna())
    changed = ((val1 != values) | (val2 != values)).fillna(False).astype(bool)

    result = pd.Series(pd.NA, index=df.index, dtype="Int64")
    result[known & changed] = 0
    result[known & ~changed] = 1
    result[no_history] = 1
    result[constant] = 1
    return result


def add_continuity_flags(df: pd.DataFrame, config: Optional[AnalysisConfig] = None, wave_gap_years: int = 2) -> pd.DataFrame:
    config = config or AnalysisConfig()
    out = df.copy()
    out[C.BASE_OCCUPATION] = base_occupation(out, config.occupation_lags)
    out[C.SAME_STATE] = same_over_lead_in(out, C.STATE, wave_gap_years)
    out[C.SAME_OCCUPATION] = same_over_lead_in(out, C.BASE_OCCUPATION, wave_gap_years)
    if config.drop_state_movers:
        keep = (out[C.SAME_STATE] == 1).fillna(True).astype(bool)
        logger.info(f"Dropping {int((~keep).sum())} waves that moved state over the lead-in period")
        out = out[keep]
    return out


def winsorize(values: pd.Series, lower: float = 0.02, upper: float = 0.98) -> pd.Series:
    """Clip a numeric series at its ``lower`` and ``upper`` quantiles (missing values ignored)."""
    numeric = pd.to_numeric(values, errors="coerce").astype("float64")
    if numeric.notna().sum() == 0:
        return numeric
    lo, hi = numeric.quantile([lower, upper])
    return numeric.clip(lower=lo, upper=hi)


def dichotomize(df: pd.DataFrame) -> pd.DataFrame:
    """Add 0/1 indicator columns; missing source values stay missing."""
    out = df.copy()
    for name, (source, matches) in DICHOTOMIES.items():
        if source not in out.columns:
            continue
        out[name] = _indicator(out[source], matches)
    if C.BASE_OCCUPATION in out.columns:
        for name, occupation in BASE_OCCUPATION_DUMMIES.items():
            out[name] = _indicator(out[C.BASE_OCCUPATION], (occupation,))
    return out


def _indicator(values: pd.Series, matches: Sequence[str]) -> pd.Series:
    result = values.isin(list(matches)).astype("Int64")
    result[values.isna()] = pd.NA
    return result


def standardize(values: pd.Series) -> pd.Series:
    """z-score with the sample standard deviation."""
    numeric = pd.to_numeric(values, errors="coerce").astype("float64")
    sd = numeric.std()
    if not sd or np.isnan(sd):
        logger.warning("Cannot standardize a constant or empty series; returning missing values")
        return pd.Series(np.nan, index=values.index)
    return (numeric - numeric.mean()) / sd


def restrict_analysis_sample(
    df: pd.DataFrame,
    config: Optional[AnalysisConfig] = None,
    wave_gap_years: int = 2,
) -> pd.DataFrame:
    """
    Keep included waves with a known exposure and outcome, then re-select
    each person's longest run over the remaining rows.

    Persons left with fewer than ``min_run_waves`` waves are dropped.
    """
    config = config or AnalysisConfig()
    keep = (
        (df[C.INCLUDED] == 1)
        & df[C.UNEMPLOYED_12MO_LEAD].notna()
        & df[C.OUTCOME_LEAD].notna()
    )
    restricted = df[keep.fillna(False).astype(bool)]
    restricted = mark_longest_run(restricted, WaveConfig(wave_gap_years=wave_gap_years))
    restricted = restricted[restricted[C.INCLUDED] == 1]

    counts = restricted.groupby(C.PERSON_ID)[C.YEAR].transform("size")
    restricted = restricted[counts >= config.min_run_waves]
    logger.info(
        f"Analysis sample: {len(restricted)} waves for {restricted[C.PERSON_ID].nunique()} persons "
        f"(from {len(df)} waves)"
    )
    return restricted


def prepare_analysis_dataset(df: pd.DataFrame, config: Optional[PanelBuildConfig] = None) -> pd.DataFrame:
    """Run all preparation steps on one aligned panel."""
    config = config or PanelBuildConfig()
    analysis = config.analysis
    gap = config.waves.wave_gap_years

    out = df.sort_values([C.PERSON_ID, C.YEAR], kind="mergesort")
    out = add_continuity_flags(out, analysis, gap)
    lo, hi = analysis.winsor_quantiles
    for col in (C.FAMILY_WEALTH, C.FAMILY_WEALTH_LAG):
        if col in out.columns:
            out[col] = winsorize(out[col], lo, hi)
    out = dichotomize(out)
    out[C.OUTCOME_STANDARDIZED] = standardize(out[C.OUTCOME_LEAD])
    return restrict_analysis_sample(out, analysis, gap)


def prepare_analysis_datasets(datasets: List[pd.DataFrame], config: Optional[PanelBuildConfig] = None) -> List[pd.DataFrame]:
    return [prepare_analysis_dataset(d, config) for d in datasets]
