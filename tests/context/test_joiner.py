import pandas as pd
import pytest

from ui_panel.context import join_macro, join_state_context, join_ui_rules
from ui_panel.exceptions import SchemaError
from ui_panel.schema import columns as C
from ui_panel.sources import TableStateMacro, TableStateUiRules


def _periods():
    return pd.DataFrame(
        {
            C.STATE: ["CA", "TX", "NY", "CA"],
            C.UI_REF_YEAR: pd.array([2005, 2006, 2005, None], dtype="Int64"),
            C.UI_REF_HALF: pd.array([1, 2, 1, None], dtype="Int64"),
            C.MACRO_REF_YEAR: pd.array([2005, 2006, 2005, None], dtype="Int64"),
            C.MACRO_REF_QUARTER: pd.array([2, 4, 1, None], dtype="Int64"),
        }
    )


@pytest.mark.unit
def test_join_ui_rules_with_misses(ui_rules_table, caplog):
    out = join_ui_rules(_periods(), TableStateUiRules(ui_rules_table))
    assert out[C.STATE_MIN_BASE_WAGE].iloc[0] == 1300.0
    assert out[C.STATE_MAX_DURATION].iloc[1] == 20.0
    # NY is not in the table and the last row has no period
    assert pd.isna(out[C.STATE_MAX_BENEFIT].iloc[2])
    assert pd.isna(out[C.STATE_MAX_BENEFIT].iloc[3])
    assert "no matching state/period row" in caplog.text


def test_join_macro(macro_table):
    out = join_macro(_periods(), TableStateMacro(macro_table))
    assert out[C.UNEMPLOYMENT_RATE].iloc[0] == pytest.approx(5.2)
    assert pd.isna(out[C.UNEMPLOYMENT_RATE].iloc[1])


def test_join_state_context_without_sources_adds_missing_columns():
    out = join_state_context(_periods())
    for col in (C.STATE_MIN_BASE_WAGE, C.UNEMPLOYMENT_RATE, C.GSP_PER_CAPITA):
        assert out[col].isna().all()


def test_lookup_table_requires_keys():
    with pytest.raises(SchemaError):
        TableStateUiRules(pd.DataFrame({"state": ["CA"], "year": [2005]}))


def test_lookup_table_duplicate_keys_keep_first(ui_rules_table):
    doubled = pd.concat([ui_rules_table, ui_rules_table.assign(min_base_wage=9999.0)])
    rules = TableStateUiRules(doubled)
    assert rules.get("CA", (2005, 1))["min_base_wage"] == 1300.0
