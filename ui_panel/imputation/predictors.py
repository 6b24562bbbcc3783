# ui_panel/imputation/predictors.py
"""
Design matrices, method maps and predictor matrices for one employment stratum.

The predictor matrix is square over the stratum's variables: row ``target``
has a 1 in column ``predictor`` when ``predictor`` is used to impute
``target``. Rows of variables that are not imputed are all zero, and a
variable never predicts itself.
"""

import logging
from typing import Dict

import pandas as pd

from ui_panel.config.models import ImputationStratum, StratumSelector
from ui_panel.exceptions import SchemaError

logger = logging.getLogger(__name__)


def stratum_mask(df: pd.DataFrame, selector: StratumSelector) -> pd.Series:
    """Rows whose selector column takes one of the selector values (null selects missing)."""
    if selector.column not in df.columns:
        raise SchemaError(f"Stratum selector column '{selector.column}' not found in panel")
    column = df[selector.column]
    values = [v for v in selector.values if v is not None]
    mask = column.isin(values).fillna(False).astype(bool)
    if any(v is None for v in selector.values):
        mask = mask | column.isna()
    return mask


def design_matrix(df: pd.DataFrame, stratum: ImputationStratum) -> pd.DataFrame:
    missing = [c for c in stratum.variables if c not in df.columns]
    if missing:
        raise SchemaError(f"Stratum {stratum.name!r} variables missing from panel: {missing}")
    mask = stratum_mask(df, stratum.selector)
    return df.loc[mask, stratum.variables].copy()


def method_map(design: pd.DataFrame, stratum: ImputationStratum) -> Dict[str, str]:
    """
    Imputation method per variable; ``""`` leaves the variable as is.

    Variables with missing values but no configured method are logged and
    left incomplete.
    """
    methods = {}
    for col in design.columns:
        has_missing = bool(design[col].isna().any())
        method = stratum.methods.get(col, "")
        if has_missing and not method:
            logger.warning(f"Stratum {stratum.name!r}: '{col}' has missing values but no method")
        methods[col] = method if has_missing else ""
    return methods


def predictor_matrix(stratum: ImputationStratum, methods: Dict[str, str]) -> pd.DataFrame:
    variables = list(stratum.variables)
    predictors = stratum.include or variables
    predictors = [p for p in predictors if p not in set(stratum.exclude)]

    matrix = pd.DataFrame(0, index=variables, columns=variables, dtype="int64")
    for target in variables:
        if not methods.get(target):
            continue
        for predictor in predictors:
            if predictor != target:
                matrix.loc[target, predictor] = 1
    return matrix
