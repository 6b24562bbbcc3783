import pandas as pd
import pytest

import logging_config
from ui_panel import build_analysis_datasets, build_panel
from ui_panel.cli import main
from ui_panel.exceptions import SchemaError
from ui_panel.schema import columns as C
from ui_panel.sources import TableStateMacro, TableStateUiRules

pytestmark = pytest.mark.integration

YEARS = [2001, 2003, 2005, 2007, 2009, 2011]


def _raw(builder):
    for i, year in enumerate(YEARS):
        builder.wave(1, year, interview_month=3, outcome=10.0 + i)
    # Unemployed from October to December 2005, UI in December and January
    builder.unemployed(1, 2005, [10, 11, 12])
    builder.ui(1, 2005, [12, 13])
    return builder.frame()


def _record(df, person_id, year):
    return df[(df[C.PERSON_ID] == person_id) & (df[C.YEAR] == year)].iloc[0]


@pytest.fixture
def panel(panel_builder, ui_rules_table, macro_table):
    return build_panel(
        _raw(panel_builder),
        ui_rules=TableStateUiRules(ui_rules_table),
        macro=TableStateMacro(macro_table),
    )


def test_spell_and_ui_receipt(panel):
    rec = _record(panel, 1, 2005)
    assert rec[C.UNEMPLOYED_12MO_LEAD] == 1
    assert rec[C.FIRST_UNEMPLOYED_OFFSET] == 10
    assert rec[C.SPELL_DURATION] == 3
    assert bool(rec[C.UI_WINDOW_OBSERVED])
    assert rec[C.UI_RECEIVED] == 1
    assert not bool(rec[C.UI_RECEIPT_IMPUTED])


def test_lead_status_per_wave(panel):
    status = panel.set_index(C.YEAR)[C.UNEMPLOYED_12MO_LEAD]
    assert status.loc[[2001, 2003, 2005, 2007, 2009]].tolist() == [0, 0, 1, 0, 0]
    assert pd.isna(status.loc[2011])


def test_state_context_uses_spell_onset(panel):
    rec = _record(panel, 1, 2005)
    assert rec[C.REFERENCE_BASIS] == "spell_onset"
    assert (rec[C.UI_REF_YEAR], rec[C.UI_REF_HALF]) == (2005, 2)
    assert rec[C.MACRO_REF_QUARTER] == 4
    assert rec[C.STATE_MAX_DURATION] == 26.0
    assert rec[C.UNEMPLOYMENT_RATE] == pytest.approx(5.4)

    employed = _record(panel, 1, 2003)
    assert employed[C.REFERENCE_BASIS] == "interview"
    assert employed[C.MACRO_REF_QUARTER] == 1


def test_waves_and_alignment(panel):
    assert panel[C.ELIGIBLE].tolist() == [0, 0, 1, 1, 1, 1]
    assert panel[C.INCLUDED].tolist() == [1] * 6
    assert panel[C.LONGEST_RUN_LENGTH].unique().tolist() == [4]

    onset = _record(panel, 1, 2005)
    assert onset[C.TRANSITION_PATTERN] == "newly-unemployed"
    assert onset[C.PREPOST] == "RU"
    assert onset[C.OUTCOME_LEAD] == 13.0
    assert onset[C.OUTCOME_BASE] == 12.0
    assert onset[C.OUTCOME_CHANGE] == pytest.approx(1.0)

    before = _record(panel, 1, 2003)
    assert before[C.PREPOST] == "CE"
    assert before[C.OUTCOME_LEAD] == 11.0
    assert before[C.OUTCOME_BASE] == 10.0


def test_flag_columns_dropped_unless_requested(panel_builder):
    raw = _raw(panel_builder)
    slim = build_panel(raw)
    wide = build_panel(raw, keep_flags=True)
    assert wide.shape[1] > slim.shape[1]
    assert set(slim.columns) < set(wide.columns)


def test_gap_wave_selection_through_pipeline(panel_builder):
    panel_builder.waves(5, [2001, 2003, 2005, 2009])
    out = build_panel(panel_builder.frame())
    assert out[C.ELIGIBLE].tolist() == [0, 0, 1, 0]
    assert out.loc[out[C.INCLUDED] == 1, C.YEAR].tolist() == [2001, 2003, 2005]
    assert out[C.LONGEST_RUN_LENGTH].unique().tolist() == [1]


def test_structurally_invalid_panel_raises():
    with pytest.raises(SchemaError):
        build_panel(pd.DataFrame({C.PERSON_ID: [1], C.YEAR: [2001]}))


def test_complete_case_analysis_dataset(panel, ui_rules_table):
    (analysis,) = build_analysis_datasets([panel], ui_rules_table=ui_rules_table)
    assert analysis[C.YEAR].tolist() == [2001, 2003, 2005, 2007]
    assert analysis[C.OUTCOME_STANDARDIZED].notna().all()
    onset = _record(analysis, 1, 2005)
    assert onset[C.UI_CAT_DUR] == "YesMoreMedDur"


@pytest.fixture
def cli_files(tmp_path, panel_builder, ui_rules_table, macro_table):
    paths = {
        "panel": tmp_path / "raw.csv",
        "ui_rules": tmp_path / "ui_rules.csv",
        "macro": tmp_path / "macro.csv",
    }
    _raw(panel_builder).to_csv(paths["panel"], index=False)
    ui_rules_table.to_csv(paths["ui_rules"], index=False)
    macro_table.to_csv(paths["macro"], index=False)
    yield paths
    logging_config.reset_logging()


def test_cli_writes_panel_and_analysis(tmp_path, cli_files):
    output = tmp_path / "out" / "panel.csv"
    analysis = tmp_path / "out" / "analysis.csv"
    code = main(
        [
            "--panel", str(cli_files["panel"]),
            "--ui-rules", str(cli_files["ui_rules"]),
            "--macro", str(cli_files["macro"]),
            "--output", str(output),
            "--analysis-output", str(analysis),
            "--log-dir", str(tmp_path / "logs"),
        ]
    )
    assert code == 0
    written = pd.read_csv(output)
    assert len(written) == len(YEARS)
    assert C.OUTCOME_LEAD in written.columns
    assert len(pd.read_csv(analysis)) == 4


def test_cli_missing_input_returns_error(tmp_path, cli_files):
    code = main(
        [
            "--panel", str(tmp_path / "missing.csv"),
            "--output", str(tmp_path / "out.csv"),
            "--log-dir", str(tmp_path / "logs"),
        ]
    )
    assert code == 1
    assert not (tmp_path / "out.csv").exists()
