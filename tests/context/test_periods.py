import pandas as pd
import pytest

from ui_panel.context import (
    assign_reference_periods,
    reference_offset,
    resolve_macro_reference_period,
    resolve_ui_reference_period,
)
from ui_panel.schema import ReferenceBasis
from ui_panel.schema import columns as C


@pytest.mark.unit
def test_reference_offset_prefers_spell_onset():
    assert reference_offset(14, 3) == (14, ReferenceBasis.SPELL_ONSET)
    assert reference_offset(pd.NA, 3) == (3, ReferenceBasis.INTERVIEW)
    assert reference_offset(None, None) == (None, None)


def test_resolve_periods():
    assert resolve_ui_reference_period(2005, 14, 3) == (2006, 1)
    assert resolve_ui_reference_period(2005, 8, 3) == (2005, 2)
    assert resolve_macro_reference_period(2005, 14, 3) == (2006, 1)
    assert resolve_macro_reference_period(2005, None, 11) == (2005, 4)
    assert resolve_ui_reference_period(2005, None, None) is None


def test_assign_reference_periods():
    df = pd.DataFrame(
        {
            C.YEAR: [2005, 2007, 2009],
            C.FIRST_UNEMPLOYED_OFFSET: pd.array([20, None, None], dtype="Int64"),
            C.INTERVIEW_MONTH: pd.array([3, 7, None], dtype="Int64"),
        }
    )
    out = assign_reference_periods(df)
    assert out[C.REFERENCE_BASIS].tolist()[:2] == ["spell_onset", "interview"]
    assert pd.isna(out[C.REFERENCE_BASIS].iloc[2])
    assert out[C.UI_REF_YEAR].tolist()[:2] == [2006, 2007]
    assert out[C.UI_REF_HALF].tolist()[:2] == [2, 2]
    assert out[C.MACRO_REF_QUARTER].tolist()[:2] == [3, 3]


def test_unconfirmed_onset_with_lead_anchors_at_window_start():
    assert reference_offset(None, 3, 1) == (3, ReferenceBasis.LEAD_WINDOW)
    assert reference_offset(None, 3, 0) == (3, ReferenceBasis.INTERVIEW)
    assert reference_offset(pd.NA, 3, pd.NA) == (3, ReferenceBasis.INTERVIEW)
    assert reference_offset(None, None, 1) == (None, None)
    assert resolve_ui_reference_period(2005, None, 8, 1) == (2005, 2)
    assert resolve_macro_reference_period(2005, None, 8, 1) == (2005, 3)


def test_assign_reference_periods_reads_lead_indicator():
    df = pd.DataFrame(
        {
            C.YEAR: [2005, 2005, 2005],
            C.FIRST_UNEMPLOYED_OFFSET: pd.array([None, None, 9], dtype="Int64"),
            C.INTERVIEW_MONTH: pd.array([4, 4, 4], dtype="Int64"),
            C.UNEMPLOYED_12MO_LEAD: pd.array([1, 0, 1], dtype="Int64"),
        }
    )
    out = assign_reference_periods(df)
    assert out[C.REFERENCE_BASIS].tolist() == ["lead_window", "interview", "spell_onset"]
    assert out[C.MACRO_REF_QUARTER].tolist() == [2, 2, 3]
