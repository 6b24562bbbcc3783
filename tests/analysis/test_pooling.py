import math

import numpy as np
import pandas as pd
import pytest

from ui_panel.analysis import Z_95, pool_estimates, pool_results

pytestmark = pytest.mark.analysis


def test_rubins_rules():
    pooled = pool_estimates([1.0, 2.0, 3.0], [1.0, 1.0, 1.0])
    assert pooled.estimate == 2.0
    assert pooled.within_variance == 1.0
    assert pooled.between_variance == 1.0
    assert pooled.se == pytest.approx(math.sqrt(1 + 1 + 1 / 3))
    assert pooled.lower == pytest.approx(2.0 - Z_95 * pooled.se)
    assert pooled.n_imputations == 3


def test_single_dataset_has_no_between_variance():
    pooled = pool_estimates([0.5], [0.2])
    assert pooled.between_variance == 0.0
    assert pooled.se == pytest.approx(0.2)


def test_missing_pairs_dropped():
    pooled = pool_estimates([1.0, np.nan, 3.0], [1.0, 1.0, 1.0])
    assert pooled.n_imputations == 2
    assert pooled.estimate == 2.0


def test_pool_estimates_errors():
    with pytest.raises(ValueError):
        pool_estimates([1.0, 2.0], [1.0])
    with pytest.raises(ValueError):
        pool_estimates([np.nan], [1.0])


def test_pool_results_per_estimand():
    results = pd.DataFrame(
        {
            "estimand": ["ate", "ate", "att", "att"],
            "est": [1.0, 3.0, 0.0, 0.0],
            "se": [1.0, 1.0, 0.5, 0.5],
        }
    )
    pooled = pool_results(results)
    assert pooled["estimand"].tolist() == ["ate", "att"]
    assert pooled["est"].tolist() == [2.0, 0.0]
    assert pooled.loc[1, "se"] == pytest.approx(0.5)
    assert list(pooled.columns) == ["estimand", "est", "se", "lci", "uci", "n_imputations"]
