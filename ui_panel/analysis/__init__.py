"""Analysis-sample preparation, moderators, pooling and descriptive summaries."""

from .descriptives import (
    describe_completed_datasets,
    describe_exposure_groups,
    describe_group,
    occupation_sector,
    occupation_shift,
    unemployment_length_by_receipt,
)
from .moderators import (
    NO_UI,
    add_moderators,
    baseline_quartile,
    below_median_length,
    race_ethnicity,
    state_ui_medians,
    ui_category,
)
from .pooling import Z_95, PooledEstimate, pool_estimates, pool_results
from .prepare import (
    add_continuity_flags,
    base_occupation,
    dichotomize,
    prepare_analysis_dataset,
    prepare_analysis_datasets,
    restrict_analysis_sample,
    same_over_lead_in,
    standardize,
    winsorize,
)

__all__ = [
    "describe_completed_datasets",
    "describe_exposure_groups",
    "describe_group",
    "occupation_sector",
    "occupation_shift",
    "unemployment_length_by_receipt",
    "NO_UI",
    "add_moderators",
    "baseline_quartile",
    "below_median_length",
    "race_ethnicity",
    "state_ui_medians",
    "ui_category",
    "Z_95",
    "PooledEstimate",
    "pool_estimates",
    "pool_results",
    "add_continuity_flags",
    "base_occupation",
    "dichotomize",
    "prepare_analysis_dataset",
    "prepare_analysis_datasets",
    "restrict_analysis_sample",
    "same_over_lead_in",
    "standardize",
    "winsorize",
]
