"""Stratified multiple imputation through an external service."""

from .predictors import design_matrix, method_map, predictor_matrix, stratum_mask
from .runner import (
    apply_unemployed_floor,
    impute_stratum,
    rederive_completed,
    run_imputation,
    stratum_seed,
)
from .service import ImputationService

__all__ = [
    "design_matrix",
    "method_map",
    "predictor_matrix",
    "stratum_mask",
    "apply_unemployed_floor",
    "impute_stratum",
    "rederive_completed",
    "run_imputation",
    "stratum_seed",
    "ImputationService",
]
