import pandas as pd
import pytest

from ui_panel.exceptions import SchemaError
from ui_panel.schema import columns as C
from ui_panel.schema.validation import check_panel, ui_code_columns, validate_panel_schema


@pytest.mark.unit
def test_valid_panel_passes(panel_builder):
    df = panel_builder.waves(1, [2001, 2003], outcome=1.0).frame()
    result = check_panel(df)
    assert result.is_valid
    assert result.warnings == []
    assert validate_panel_schema(df) is df


def test_missing_identity_columns(panel_builder):
    df = panel_builder.wave(1, 2001).frame().drop(columns=[C.STATE])
    result = check_panel(df)
    assert not result.is_valid
    assert "Missing required columns" in result.errors[0]


def test_ui_columns_optional_when_not_required(panel_builder):
    df = panel_builder.wave(1, 2001).frame().drop(columns=ui_code_columns())
    assert not check_panel(df).is_valid
    relaxed = check_panel(df, require_ui=False)
    assert relaxed.is_valid
    assert any("UI columns" in w for w in relaxed.warnings)


def test_bad_codes_duplicates_and_months(panel_builder):
    panel_builder.wave(1, 2001, interview_month=13, emp_tm1_01=7.0)
    df = panel_builder.frame()
    df = pd.concat([df, df], ignore_index=True)
    result = check_panel(df)
    assert not result.is_valid
    assert len(result.errors) == 3


def test_validate_raises_with_all_errors(panel_builder):
    df = panel_builder.wave(1, 2001, interview_month=0).frame()
    with pytest.raises(SchemaError, match="interview months"):
        validate_panel_schema(df)
