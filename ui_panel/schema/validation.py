"""
Validation of the raw person-year panel before reconstruction.
"""

import logging
from dataclasses import dataclass, field
from typing import List

import pandas as pd

from ui_panel.exceptions import SchemaError
from ui_panel.months import RETROSPECTIVE_BLOCKS, UI_BLOCKS, monthly_columns
from . import columns as C

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of schema validation."""

    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)


def employment_code_columns() -> List[str]:
    return [c for block in RETROSPECTIVE_BLOCKS for c in monthly_columns(C.EMP_PREFIX, block)]


def ui_code_columns() -> List[str]:
    return [c for block in UI_BLOCKS for c in monthly_columns(C.UI_PREFIX, block)]


def _check_binary(df: pd.DataFrame, cols: List[str], result: ValidationResult) -> None:
    values = pd.unique(df[cols].to_numpy().ravel())
    bad = [v for v in values if not pd.isna(v) and v not in (0, 1)]
    if bad:
        result.add_error(f"Monthly codes must be 0, 1 or missing; found {sorted(bad)[:5]}")


def check_panel(df: pd.DataFrame, require_ui: bool = True) -> ValidationResult:
    """Collect schema problems in a raw panel without raising."""
    result = ValidationResult()

    missing = [c for c in C.REQUIRED_INPUT_COLS if c not in df.columns]
    if missing:
        result.add_error(f"Missing required columns: {missing}")
        return result

    emp_cols = employment_code_columns()
    missing_emp = [c for c in emp_cols if c not in df.columns]
    if missing_emp:
        result.add_error(f"Missing {len(missing_emp)} employment code columns, e.g. {missing_emp[:3]}")
    else:
        _check_binary(df, emp_cols, result)

    ui_cols = ui_code_columns() + [C.UI_AMOUNT]
    missing_ui = [c for c in ui_cols if c not in df.columns]
    if missing_ui:
        message = f"Missing {len(missing_ui)} UI columns, e.g. {missing_ui[:3]}"
        if require_ui:
            result.add_error(message)
        else:
            result.add_warning(message)
    else:
        _check_binary(df, ui_cols[:-1], result)

    dupes = df.duplicated([C.PERSON_ID, C.YEAR]).sum()
    if dupes:
        result.add_error(f"{dupes} duplicate (person_id, year) rows")

    months = df[C.INTERVIEW_MONTH].dropna()
    out_of_range = months[(months < 1) | (months > 12)]
    if len(out_of_range):
        result.add_error(f"{len(out_of_range)} interview months outside 1..12")

    if C.OUTCOME not in df.columns:
        result.add_warning(f"No '{C.OUTCOME}' column; outcome alignment will be empty")

    return result


def validate_panel_schema(df: pd.DataFrame, require_ui: bool = True) -> pd.DataFrame:
    """
    Validate a raw panel and return it unchanged.

    Raises:
        SchemaError: If any structural problem is found.
    """
    result = check_panel(df, require_ui=require_ui)
    for warning in result.warnings:
        logger.warning(warning)
    if not result.is_valid:
        raise SchemaError("; ".join(result.errors))
    return df
