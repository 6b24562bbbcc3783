import numpy as np
import pandas as pd
import pytest

from ui_panel.analysis import (
    NO_UI,
    add_moderators,
    baseline_quartile,
    below_median_length,
    race_ethnicity,
    state_ui_medians,
    ui_category,
)
from ui_panel.schema import columns as C

pytestmark = pytest.mark.analysis


def test_baseline_quartile():
    base = pd.Series([1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0, np.nan])
    result = baseline_quartile(base)
    assert result.tolist()[:8] == [1, 1, 2, 2, 3, 3, 4, 4]
    assert pd.isna(result.iloc[8])


def test_race_ethnicity_hispanic_takes_precedence():
    df = pd.DataFrame(
        {
            "hispanic": pd.array([1, 0, 0, 0, None], dtype="Int64"),
            "black": pd.array([1, 1, 0, 0, 0], dtype="Int64"),
            "other": pd.array([0, 0, 1, 0, 0], dtype="Int64"),
        }
    )
    result = race_ethnicity(df)
    assert result.tolist()[:4] == ["Hispanic", "NHBlack", "NHOther", "NHWhite"]
    assert pd.isna(result.iloc[4])


def test_below_median_length_only_for_exposed():
    df = pd.DataFrame(
        {
            C.UNEMPLOYED_12MO_LEAD: pd.array([1, 1, 1, 0], dtype="Int64"),
            C.SPELL_DURATION: [2, 4, 6, 10],
        }
    )
    result = below_median_length(df)
    assert result.tolist()[:3] == [1, 0, 0]
    assert pd.isna(result.iloc[3])


def test_state_ui_medians(ui_rules_table):
    duration, benefit = state_ui_medians(ui_rules_table, (2001, 2017))
    assert duration == 23.0
    assert benefit == 400.0


def test_state_ui_medians_outside_range(ui_rules_table):
    duration, benefit = state_ui_medians(ui_rules_table, (1990, 1995))
    assert np.isnan(duration) and np.isnan(benefit)


def test_ui_category():
    received = pd.Series(pd.array([0, 1, 1, None], dtype="Int64"))
    below = pd.Series(pd.array([1, 1, 0, 1], dtype="Int64"))
    result = ui_category(received, below, "YesLess", "YesMore")
    assert result.tolist()[:3] == [NO_UI, "YesLess", "YesMore"]
    assert pd.isna(result.iloc[3])


def test_add_moderators(ui_rules_table):
    df = pd.DataFrame(
        {
            C.OUTCOME_BASE: [1.0, 2.0, 3.0, 4.0],
            C.UNEMPLOYED_12MO_LEAD: pd.array([1, 1, 0, 0], dtype="Int64"),
            C.SPELL_DURATION: [3, 9, None, None],
            C.UI_RECEIVED: pd.array([1, 1, None, None], dtype="Int64"),
            C.STATE_MAX_DURATION: [26.0, 20.0, 26.0, 20.0],
            C.STATE_MAX_BENEFIT: [450.0, 350.0, 450.0, 350.0],
        }
    )
    out = add_moderators(df, ui_rules_table)
    assert out[C.BASELINE_QUARTILE].tolist() == [1, 2, 3, 4]
    assert C.RACE_ETH not in out.columns
    assert out[C.BELOW_MEDIAN_LENGTH].tolist()[:2] == [1, 0]
    assert out[C.UI_DUR_BELOW_MEDIAN].tolist() == [0, 1, 0, 1]
    assert out[C.UI_CAT_DUR].tolist()[:2] == ["YesMoreMedDur", "YesLessMedDur"]
    assert out[C.UI_CAT_GEN].tolist()[:2] == ["YesMoreMedGen", "YesLessMedGen"]


def test_add_moderators_without_rules():
    df = pd.DataFrame(
        {
            C.OUTCOME_BASE: [1.0],
            C.UNEMPLOYED_12MO_LEAD: pd.array([1], dtype="Int64"),
            C.SPELL_DURATION: [3],
            C.UI_RECEIVED: pd.array([1], dtype="Int64"),
            C.STATE_MAX_DURATION: [26.0],
            C.STATE_MAX_BENEFIT: [450.0],
        }
    )
    out = add_moderators(df)
    assert pd.isna(out[C.UI_DUR_BELOW_MEDIAN].iloc[0])
    assert pd.isna(out[C.UI_CAT_DUR].iloc[0])
