# ui_panel/pipeline.py
"""
End-to-end panel build.

Each stage takes and returns a DataFrame, so any stage can be run or tested
on its own:

    validate -> sort -> monthly flags -> spells -> UI window
    -> reference periods -> state context -> non-receipt imputation
    -> wave selection -> outcome alignment (complete case)

Multiple imputation and analysis preparation run on the result via
:func:`build_completed_datasets` and :func:`build_analysis_datasets`.
"""

import logging
import time
from typing import List, Optional

import pandas as pd

from ui_panel.analysis import add_moderators, prepare_analysis_dataset
from ui_panel.config.models import PanelBuildConfig
from ui_panel.context import assign_reference_periods, join_state_context
from ui_panel.imputation import ImputationService, run_imputation
from ui_panel.outcomes import align_outcomes
from ui_panel.schema import validate_panel_schema
from ui_panel.sources import StateMacroSource, StateUiRulesSource
from ui_panel.spells import build_monthly_flags, reconstruct_spells, sort_panel
from ui_panel.spells.lead import lead_ui_columns, lead_unemployment_columns, own_unemployment_columns, UI_AMOUNT_LEAD
from ui_panel.ui import build_ui_window, impute_non_receipt
from ui_panel.waves import mark_waves

logger = logging.getLogger("ui_panel.pipeline")
perf_logger = logging.getLogger("ui_panel.performance")


def _timed(label: str, func, *args, **kwargs):
    start = time.time()
    result = func(*args, **kwargs)
    perf_logger.info(f"{label} completed in {time.time() - start:.2f}s")
    return result


def drop_flag_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Remove the intermediate monthly flag columns."""
    flags = own_unemployment_columns() + lead_unemployment_columns() + lead_ui_columns() + [UI_AMOUNT_LEAD]
    return df.drop(columns=[c for c in flags if c in df.columns])


def build_panel(
    raw: pd.DataFrame,
    config: Optional[PanelBuildConfig] = None,
    ui_rules: Optional[StateUiRulesSource] = None,
    macro: Optional[StateMacroSource] = None,
    keep_flags: bool = False,
) -> pd.DataFrame:
    """
    Build the enriched person-year panel.

    Args:
        raw: Raw panel with identity, ``emp_*``/``ui_*`` code and demographic columns.
        config: Build configuration; defaults reproduce the study design.
        ui_rules: State UI rules lookup; without it, rule-based non-receipt
            imputation only applies the prior-unemployment rule.
        macro: State macro indicator lookup.
        keep_flags: Keep the monthly flag columns in the output.

    Returns:
        Panel sorted by person and year with spell, UI, context, wave and
        complete-case outcome alignment columns.

    Raises:
        SchemaError: If ``raw`` is structurally invalid.
        SpellIntegrityError: If a record falls into no branch of the spell case analysis.
    """
    config = config or PanelBuildConfig()
    logger.info(f"Building panel from {len(raw)} records")

    validate_panel_schema(raw, require_ui=False)
    df = sort_panel(raw)
    df = _timed("Monthly flags", build_monthly_flags, df, config.waves.wave_gap_years)
    df = _timed("Spell reconstruction", reconstruct_spells, df, config.spell)
    df = _timed("UI window", build_ui_window, df, config.ui_window)
    df = assign_reference_periods(df)
    df = _timed("State context", join_state_context, df, ui_rules, macro)
    df = impute_non_receipt(df, config.ui_window)
    df = _timed("Wave selection", mark_waves, df, config.waves)
    df = _timed("Outcome alignment", align_outcomes, df, config.alignment, config.waves.wave_gap_years)

    if not keep_flags:
        df = drop_flag_columns(df)
    logger.info(f"Panel build finished: {len(df)} records, {df.shape[1]} columns")
    return df


def build_completed_datasets(
    panel: pd.DataFrame,
    service: ImputationService,
    config: Optional[PanelBuildConfig] = None,
) -> List[pd.DataFrame]:
    """Multiply impute a built panel; each dataset is re-derived and aligned."""
    config = config or PanelBuildConfig()
    return _timed("Multiple imputation", run_imputation, panel, service, config)


def build_analysis_datasets(
    datasets: List[pd.DataFrame],
    config: Optional[PanelBuildConfig] = None,
    ui_rules_table: Optional[pd.DataFrame] = None,
) -> List[pd.DataFrame]:
    """Prepare each completed (or complete-case) dataset for modelling and add moderators."""
    config = config or PanelBuildConfig()
    prepared = []
    for i, dataset in enumerate(datasets, start=1):
        logger.info(f"Preparing analysis dataset {i} of {len(datasets)}")
        analysis = prepare_analysis_dataset(dataset, config)
        prepared.append(add_moderators(analysis, ui_rules_table, config.analysis))
    return prepared
