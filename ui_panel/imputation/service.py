# ui_panel/imputation/service.py
"""Interface of the external multiple-imputation service."""

from typing import Dict, List, Protocol, runtime_checkable

import pandas as pd


@runtime_checkable
class ImputationService(Protocol):
    """
    Anything that completes a design matrix ``m`` times.

    Implementations return ``m`` DataFrames with the index and columns of
    ``design_matrix`` and every column with a non-empty method filled in.
    The call is treated as one synchronous batch; failures propagate as
    exceptions.
    """

    def run(
        self,
        design_matrix: pd.DataFrame,
        method_spec: Dict[str, str],
        predictor_spec: pd.DataFrame,
        m: int,
        seed: int,
    ) -> List[pd.DataFrame]: ...
