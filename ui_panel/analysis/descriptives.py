# ui_panel/analysis/descriptives.py
"""
Descriptive summaries of the exposure groups.

Person-level shares (sex, race) count each person once per group; all other
statistics are over waves. UI receipt and spell length are summarized for
the recently unemployed only.
"""

import logging
from typing import Dict, List

import numpy as np
import pandas as pd

from ui_panel.analysis.prepare import BASE_OCCUPATION_DUMMIES
from ui_panel.schema import ExposureGroup
from ui_panel.schema import columns as C

logger = logging.getLogger(__name__)

PERSON_COLS = ["male", "black", "other", "hispanic"]


def _numeric(values: pd.Series) -> pd.Series:
    return pd.to_numeric(values, errors="coerce").astype("float64")


def _moments(values: pd.Series, prefix: str) -> Dict[str, float]:
    numeric = _numeric(values)
    return {
        f"{prefix}_mu": numeric.mean(),
        f"{prefix}_sd": numeric.std(),
        f"{prefix}_na": int(numeric.isna().sum()),
    }


def describe_group(df: pd.DataFrame, group: str) -> Dict[str, float]:
    """Summary statistics for the waves whose exposure group is ``group``."""
    waves = df[(df[C.PREPOST] == group).fillna(False).astype(bool)]
    present = [c for c in PERSON_COLS if c in waves.columns]
    people = waves[[C.PERSON_ID] + present].drop_duplicates()

    row: Dict[str, float] = {
        "strata": group,
        "n_ind": waves[C.PERSON_ID].nunique(),
        "n_obs": len(waves),
    }
    if C.AGE in waves.columns:
        row.update(_moments(waves[C.AGE], "age"))
    if "male" in people.columns:
        male = _numeric(people["male"])
        row.update({"male_n": int((male == 1).sum()), "male_perc": male.mean(), "male_na": int(male.isna().sum())})
    if {"black", "other", "hispanic"}.issubset(people.columns):
        black, other, hispanic = (_numeric(people[c]) for c in ("black", "other", "hispanic"))
        row.update(
            {
                "nhwhite_n": int(((black == 0) & (other == 0) & (hispanic == 0)).sum()),
                "nhwhite_perc": 1 - black.mean() - other.mean() - hispanic.mean(),
                "nhblack_n": int((black == 1).sum()),
                "nhblack_perc": black.mean(),
                "nhother_n": int((other == 1).sum()),
                "nhother_perc": other.mean(),
                "hispanic_n": int((hispanic == 1).sum()),
                "hispanic_perc": hispanic.mean(),
            }
        )
    row.update(_moments(waves[C.OUTCOME_BASE], "base_outcome"))
    row.update(_moments(waves[C.OUTCOME_CHANGE], "outcome_change"))

    if group == ExposureGroup.RECENTLY_UNEMPLOYED.value:
        received = _numeric(waves[C.UI_RECEIVED])
        row.update(
            {
                "ui_received_n": int((received == 1).sum()),
                "ui_received_perc": received.mean(),
                "ui_received_na": int(received.isna().sum()),
            }
        )
        row.update(_moments(waves[C.SPELL_DURATION], "spell_length"))
    else:
        row.update({k: np.nan for k in ("ui_received_n", "ui_received_perc", "ui_received_na")})
        row.update({k: np.nan for k in ("spell_length_mu", "spell_length_sd", "spell_length_na")})
    return row


def describe_exposure_groups(df: pd.DataFrame) -> pd.DataFrame:
    groups = [g.value for g in ExposureGroup]
    return pd.DataFrame([describe_group(df, g) for g in groups])


def describe_completed_datasets(datasets: List[pd.DataFrame]) -> pd.DataFrame:
    """Per-group summaries averaged across completed datasets."""
    if not datasets:
        raise ValueError("No datasets to describe")
    per_dataset = pd.concat([describe_exposure_groups(d) for d in datasets], ignore_index=True)
    averaged = per_dataset.groupby("strata", sort=False).mean(numeric_only=True).reset_index()
    logger.info(f"Described {len(datasets)} completed datasets")
    return averaged


def unemployment_length_by_receipt(df: pd.DataFrame, length_col: str = C.SPELL_DURATION) -> pd.DataFrame:
    """
    Spell length among the recently unemployed, split by UI receipt.

    Returns:
        One row per observed ``ui_received_in_window`` value (0, 1) with
        count, mean, sd, quartiles, min, max and the number of missing
        lengths.
    """
    ru = df[(df[C.PREPOST] == ExposureGroup.RECENTLY_UNEMPLOYED.value).fillna(False).astype(bool)]
    received = _numeric(ru[C.UI_RECEIVED])
    length = _numeric(ru[length_col])
    rows = []
    for value in sorted(received.dropna().unique()):
        group = length[received == value]
        stats = group.describe()
        rows.append(
            {
                C.UI_RECEIVED: int(value),
                "n": len(group),
                "mean": stats["mean"],
                "sd": stats["std"],
                "min": stats["min"],
                "q25": stats["25%"],
                "median": stats["50%"],
                "q75": stats["75%"],
                "max": stats["max"],
                "na": int(group.isna().sum()),
            }
        )
    return pd.DataFrame(rows, columns=[C.UI_RECEIVED, "n", "mean", "sd", "min", "q25", "median", "q75", "max", "na"])


OTHER_SECTOR = "techadmin"
SECTOR_GROUPS = ("CE", "RU (No UI)", "RU (UI)")


def occupation_sector(base_occupation: pd.Series) -> pd.Series:
    """Short sector label for a base occupation; unlisted occupations fall in ``techadmin``."""
    labels = {occupation: name[len("base_occ_"):] for name, occupation in BASE_OCCUPATION_DUMMIES.items()}
    values = base_occupation.astype("string")
    sector = values.map(lambda v: labels.get(v, OTHER_SECTOR), na_action="ignore")
    return sector.astype("string")


def _sector_group(df: pd.DataFrame) -> pd.Series:
    prepost = df[C.PREPOST]
    received = _numeric(df[C.UI_RECEIVED])
    group = pd.Series(pd.NA, index=df.index, dtype="string")
    group[(prepost == ExposureGroup.CONTINUOUSLY_EMPLOYED.value).fillna(False).astype(bool)] = SECTOR_GROUPS[0]
    ru = (prepost == ExposureGroup.RECENTLY_UNEMPLOYED.value).fillna(False).astype(bool)
    group[ru & (received == 0)] = SECTOR_GROUPS[1]
    group[ru & (received == 1)] = SECTOR_GROUPS[2]
    return group


def occupation_shift(df: pd.DataFrame) -> pd.DataFrame:
    """
    Pre/post occupational-sector shares by exposure group.

    The "next" sector is the base occupation of the person's following wave.
    Shares are over waves with a known sector. The sector's mean baseline
    outcome (over all waves) weights each share, giving the outcome
    component a sector shift contributes.
    """
    ordered = df.sort_values([C.PERSON_ID, C.YEAR], kind="mergesort")
    base = occupation_sector(ordered[C.BASE_OCCUPATION])
    nxt = base.groupby(ordered[C.PERSON_ID], sort=False).shift(-1)
    group = _sector_group(ordered)
    mu = _numeric(ordered[C.OUTCOME_BASE]).groupby(base).mean()

    sectors = sorted({name[len("base_occ_"):] for name in BASE_OCCUPATION_DUMMIES} | {OTHER_SECTOR})
    rows = []
    for name in SECTOR_GROUPS:
        in_group = (group == name).fillna(False).astype(bool)
        base_shares = base[in_group].value_counts(normalize=True)
        next_shares = nxt[in_group].value_counts(normalize=True)
        for sector in sectors:
            prop_base = float(base_shares.get(sector, 0.0))
            prop_next = float(next_shares.get(sector, 0.0))
            mean_outcome = float(mu.get(sector, np.nan))
            rows.append(
                {
                    "group": name,
                    "sector": sector,
                    "mu_outcome_base": mean_outcome,
                    "prop_base_occ": prop_base,
                    "prop_next_occ": prop_next,
                    "prop_shift_pct": (prop_next - prop_base) * 100,
                    "outcome_component_shift": mean_outcome * (prop_next - prop_base),
                }
            )
    logger.debug(f"Occupation shift over {int(group.notna().sum())} grouped waves")
    return pd.DataFrame(rows)
