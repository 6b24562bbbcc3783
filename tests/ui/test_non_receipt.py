import pandas as pd
import pytest

from ui_panel.config.models import UiWindowConfig
from ui_panel.schema import columns as C
from ui_panel.ui import impute_non_receipt, non_receipt_reasons, remaining_weeks_worked


def _frame(rows):
    df = pd.DataFrame(rows)
    df[C.UI_RECEIVED] = df[C.UI_RECEIVED].astype("Int64")
    df[C.FIRST_UNEMPLOYED_OFFSET] = df[C.FIRST_UNEMPLOYED_OFFSET].astype("Int64")
    df[C.PRE_MIN] = df[C.PRE_MIN].astype("Int64")
    df[C.UI_RECEIPT_IMPUTED] = pd.array(
        [pd.NA if pd.isna(v) else False for v in df[C.FIRST_UNEMPLOYED_OFFSET].tolist()], dtype="boolean"
    )
    return df


def _row(**overrides):
    row = {
        C.UI_RECEIVED: None,
        C.FIRST_UNEMPLOYED_OFFSET: 10,
        C.PRE_MIN: 0,
        C.LABOR_INCOME: 20000.0,
        C.STATE_MIN_BASE_WAGE: 1300.0,
        C.ANNUAL_HOURS: 2000.0,
        C.STATE_MIN_BASE_HOURS: 500.0,
        C.WEEKS_UNEMPLOYED: 2.0,
        C.WEEKS_OUT_OF_LABOR_FORCE: 0.0,
        C.STATE_MIN_BASE_WEEKS: 20.0,
    }
    row.update(overrides)
    return row


@pytest.mark.unit
def test_long_prior_unemployment_imputes_zero():
    df = _frame([_row(**{C.PRE_MIN: 9})])
    out = impute_non_receipt(df)
    assert out[C.UI_RECEIVED].iloc[0] == 0
    assert bool(out[C.UI_RECEIPT_IMPUTED].iloc[0])


def test_low_income_imputes_zero():
    df = _frame([_row(**{C.LABOR_INCOME: 500.0})])
    out = impute_non_receipt(df)
    assert out[C.UI_RECEIVED].iloc[0] == 0


def test_low_hours_respects_rule_switch():
    df = _frame([_row(**{C.ANNUAL_HOURS: 100.0})])
    assert impute_non_receipt(df)[C.UI_RECEIVED].iloc[0] == 0
    off = UiWindowConfig(use_hours_rule=False)
    assert pd.isna(impute_non_receipt(df, off)[C.UI_RECEIVED].iloc[0])


def test_low_remaining_weeks_imputes_zero():
    df = _frame([_row(**{C.WEEKS_UNEMPLOYED: 30.0, C.WEEKS_OUT_OF_LABOR_FORCE: 10.0})])
    assert remaining_weeks_worked(df).iloc[0] == 12
    assert impute_non_receipt(df)[C.UI_RECEIVED].iloc[0] == 0


def test_observed_values_never_overridden():
    df = _frame([_row(**{C.UI_RECEIVED: 1, C.PRE_MIN: 12}), _row(**{C.UI_RECEIVED: 0})])
    out = impute_non_receipt(df)
    assert out[C.UI_RECEIVED].tolist() == [1, 0]
    assert not out[C.UI_RECEIPT_IMPUTED].any()


def test_no_rule_leaves_unknown():
    df = _frame([_row()])
    out = impute_non_receipt(df)
    assert pd.isna(out[C.UI_RECEIVED].iloc[0])


def test_missing_threshold_does_not_fire():
    df = _frame([_row(**{C.LABOR_INCOME: 10.0, C.STATE_MIN_BASE_WAGE: None})])
    reasons = non_receipt_reasons(df, UiWindowConfig())
    assert not reasons["low_base_wage"].iloc[0]


def test_records_without_spell_untouched():
    df = _frame([_row(**{C.FIRST_UNEMPLOYED_OFFSET: None, C.PRE_MIN: 12})])
    out = impute_non_receipt(df)
    assert pd.isna(out[C.UI_RECEIVED].iloc[0])
