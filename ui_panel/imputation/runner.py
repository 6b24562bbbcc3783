# ui_panel/imputation/runner.py
"""
Multiple imputation by employment stratum.

Each configured stratum is completed ``m`` times by the external service.
Completion ``k`` of every stratum is written into a copy of the panel to
form completed dataset ``k``; rows outside all strata keep their observed
values. Each completed dataset is then re-derived and outcome-aligned on
its own.
"""

import logging
import time
from typing import List, Optional

import pandas as pd

from ui_panel.config.models import ImputationConfig, ImputationStratum, PanelBuildConfig
from ui_panel.exceptions import ImputationError
from ui_panel.outcomes import align_outcomes
from ui_panel.schema import UNEMPLOYED_STATUS
from ui_panel.schema import columns as C
from .predictors import design_matrix, method_map, predictor_matrix
from .service import ImputationService

logger = logging.getLogger(__name__)
perf_logger = logging.getLogger("ui_panel.performance")


def stratum_seed(base_seed: int, stratum_index: int) -> int:
    return base_seed + stratum_index


def _check_completions(
    completions, design: pd.DataFrame, stratum: ImputationStratum, seed: int, m: int
) -> List[pd.DataFrame]:
    if not isinstance(completions, (list, tuple)) or len(completions) != m:
        got = len(completions) if isinstance(completions, (list, tuple)) else type(completions).__name__
        raise ImputationError(f"Service returned {got} completions, expected {m}", stratum.name, seed)
    for k, completed in enumerate(completions, start=1):
        if not completed.index.equals(design.index):
            raise ImputationError("Completed dataset index does not match the design matrix", stratum.name, seed, k)
        absent = [c for c in design.columns if c not in completed.columns]
        if absent:
            raise ImputationError(f"Completed dataset lacks columns {absent}", stratum.name, seed, k)
    return list(completions)


def impute_stratum(
    panel: pd.DataFrame,
    stratum: ImputationStratum,
    service: ImputationService,
    m: int,
    seed: int,
) -> Optional[List[pd.DataFrame]]:
    """
    Run the service for one stratum.

    Returns:
        ``m`` completed design matrices, or None for an empty stratum.

    Raises:
        ImputationError: If the service fails or returns malformed completions.
    """
    design = design_matrix(panel, stratum)
    if design.empty:
        logger.warning(f"Stratum {stratum.name!r} selects no rows; skipped")
        return None
    methods = method_map(design, stratum)
    predictors = predictor_matrix(stratum, methods)

    start = time.time()
    try:
        completions = service.run(design, methods, predictors, m, seed)
    except ImputationError:
        raise
    except Exception as e:
        raise ImputationError(f"Imputation service failed: {e}", stratum.name, seed) from e
    perf_logger.info(f"Stratum {stratum.name!r}: {len(design)} rows imputed {m}x in {time.time() - start:.2f}s")
    return _check_completions(completions, design, stratum, seed, m)


def _write_back(dataset: pd.DataFrame, completed: pd.DataFrame) -> None:
    for col in completed.columns:
        values = completed[col]
        if pd.api.types.is_integer_dtype(dataset[col].dtype):
            values = pd.to_numeric(values, errors="coerce").round().astype("Int64")
            if dataset[col].dtype != "Int64":
                dataset[col] = dataset[col].astype("Int64")
        dataset.loc[completed.index, col] = values


def apply_unemployed_floor(completed: pd.DataFrame, observed: pd.DataFrame) -> pd.DataFrame:
    """
    Set the 12-month lead indicator to 1 where it was missing before
    imputation and the imputed employment status is Unemployed.
    """
    out = completed.copy()
    if C.EMPLOYMENT_STATUS not in out.columns:
        return out
    was_missing = observed[C.UNEMPLOYED_12MO_LEAD].reindex(out.index).isna()
    unemployed = (out[C.EMPLOYMENT_STATUS] == UNEMPLOYED_STATUS).fillna(False).astype(bool)
    fix = was_missing & unemployed & (out[C.UNEMPLOYED_12MO_LEAD] != 1).fillna(True).astype(bool)
    out[C.UNEMPLOYED_12MO_LEAD] = out[C.UNEMPLOYED_12MO_LEAD].astype("Int64")
    out.loc[fix, C.UNEMPLOYED_12MO_LEAD] = 1
    if fix.any():
        logger.info(f"Unemployed floor correction set the lead indicator on {int(fix.sum())} rows")
    return out


def rederive_completed(
    completed: pd.DataFrame,
    observed: pd.DataFrame,
    config: Optional[PanelBuildConfig] = None,
) -> pd.DataFrame:
    """
    Recompute fields that depend on imputed values: the lead-indicator floor
    correction, then transition pattern, exposure group and outcome change
    through a fresh outcome alignment.
    """
    config = config or PanelBuildConfig()
    if config.imputation.unemployed_floor_correction:
        completed = apply_unemployed_floor(completed, observed)
    return align_outcomes(completed, config.alignment, config.waves.wave_gap_years)


def run_imputation(
    panel: pd.DataFrame,
    service: ImputationService,
    config: Optional[PanelBuildConfig] = None,
) -> List[pd.DataFrame]:
    """
    Produce ``m`` completed, re-derived and aligned datasets.

    Args:
        panel: Panel after spell, UI and wave stages.
        service: External imputation service.
        config: Build configuration; ``config.imputation`` lists the strata.

    Returns:
        List of ``m`` DataFrames, each carrying an ``imputation_index`` column
        numbered from 1.
    """
    config = config or PanelBuildConfig()
    imp: ImputationConfig = config.imputation
    if not imp.strata:
        logger.warning("No imputation strata configured; completed datasets equal the observed panel")

    stratum_results = []
    for i, stratum in enumerate(imp.strata):
        seed = stratum_seed(imp.seed, i)
        logger.info(f"Imputing stratum {stratum.name!r} (seed={seed}, m={imp.m})")
        completions = impute_stratum(panel, stratum, service, imp.m, seed)
        if completions is not None:
            stratum_results.append(completions)

    datasets = []
    for k in range(imp.m):
        dataset = panel.copy()
        for completions in stratum_results:
            _write_back(dataset, completions[k])
        dataset = rederive_completed(dataset, panel, config)
        dataset[C.IMPUTATION_INDEX] = k + 1
        datasets.append(dataset)
    logger.info(f"Built {len(datasets)} completed datasets from {len(stratum_results)} strata")
    return datasets
