# ui_panel/analysis/pooling.py
"""Rubin's rules for combining estimates across completed datasets."""

import logging
import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

Z_95 = 1.96


@dataclass(frozen=True)
class PooledEstimate:
    estimate: float
    within_variance: float
    between_variance: float
    se: float
    lower: float
    upper: float
    n_imputations: int


def pool_estimates(estimates: Sequence[float], standard_errors: Sequence[float]) -> PooledEstimate:
    """
    Pool per-dataset estimates and standard errors.

    Total variance is ``W + B + B/M`` with ``W`` the mean squared standard
    error and ``B`` the sample variance of the estimates. Missing pairs are
    dropped; with a single estimate ``B`` is 0.

    Raises:
        ValueError: If the inputs differ in length or no estimate is known.
    """
    if len(estimates) != len(standard_errors):
        raise ValueError("estimates and standard_errors must have the same length")
    est = np.asarray(estimates, dtype="float64")
    se = np.asarray(standard_errors, dtype="float64")
    known = ~(np.isnan(est) | np.isnan(se))
    est, se = est[known], se[known]
    m = len(est)
    if m == 0:
        raise ValueError("No estimates to pool")

    mean = float(est.mean())
    within = float((se ** 2).sum() / m)
    between = float(((est - mean) ** 2).sum() / (m - 1)) if m > 1 else 0.0
    pooled_se = math.sqrt(within + between + between / m)
    return PooledEstimate(
        estimate=mean,
        within_variance=within,
        between_variance=between,
        se=pooled_se,
        lower=mean - Z_95 * pooled_se,
        upper=mean + Z_95 * pooled_se,
        n_imputations=m,
    )


def pool_results(results: pd.DataFrame, by: str = "estimand", est: str = "est", se: str = "se") -> pd.DataFrame:
    """Pool a long table of per-dataset results, one output row per ``by`` value."""
    rows = []
    for key, group in results.groupby(by, sort=False):
        pooled = pool_estimates(group[est].tolist(), group[se].tolist())
        rows.append(
            {
                by: key,
                "est": pooled.estimate,
                "se": pooled.se,
                "lci": pooled.lower,
                "uci": pooled.upper,
                "n_imputations": pooled.n_imputations,
            }
        )
    logger.info(f"Pooled {len(rows)} estimands across completed datasets")
    return pd.DataFrame(rows, columns=[by, "est", "se", "lci", "uci", "n_imputations"])
