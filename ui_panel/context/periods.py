# ui_panel/context/periods.py
"""
Reference periods for joining state-level context.

UI law parameters are published by half-year and macro indicators by
quarter. A record's reference month is its first unemployed month when the
spell onset is confirmed. Otherwise the 12-month lead indicator decides the
basis: a record unemployed in the lead window whose onset is unconfirmed is
anchored at the start of that window (the interview month), and any other
record at its interview month. Records with neither have no reference
period.
"""

from typing import Optional, Tuple

import pandas as pd

from ui_panel.months import reference_period
from ui_panel.schema import ReferenceBasis
from ui_panel.schema import columns as C


def reference_offset(
    first_unemployed_offset, interview_month, unemployed_in_12mo_lead=None
) -> Tuple[Optional[int], Optional[ReferenceBasis]]:
    """Offset anchoring the record's context and what it is based on."""
    if not pd.isna(first_unemployed_offset):
        return int(first_unemployed_offset), ReferenceBasis.SPELL_ONSET
    if pd.isna(interview_month):
        return None, None
    # Post-interview window starts at offset M
    if not pd.isna(unemployed_in_12mo_lead) and int(unemployed_in_12mo_lead) == 1:
        return int(interview_month), ReferenceBasis.LEAD_WINDOW
    return int(interview_month), ReferenceBasis.INTERVIEW


def resolve_ui_reference_period(
    year: int, first_unemployed_offset, interview_month, unemployed_in_12mo_lead=None
) -> Optional[Tuple[int, int]]:
    """(calendar year, half) for the state UI rules lookup."""
    offset, _ = reference_offset(first_unemployed_offset, interview_month, unemployed_in_12mo_lead)
    if offset is None:
        return None
    period = reference_period(year, offset)
    return period.year, period.half


def resolve_macro_reference_period(
    year: int, first_unemployed_offset, interview_month, unemployed_in_12mo_lead=None
) -> Optional[Tuple[int, int]]:
    """(calendar year, quarter) for the state macro lookup."""
    offset, _ = reference_offset(first_unemployed_offset, interview_month, unemployed_in_12mo_lead)
    if offset is None:
        return None
    period = reference_period(year, offset)
    return period.year, period.quarter


def assign_reference_periods(df: pd.DataFrame) -> pd.DataFrame:
    """Add reference basis, UI (year, half) and macro (year, quarter) columns."""
    if C.UNEMPLOYED_12MO_LEAD in df.columns:
        leads = df[C.UNEMPLOYED_12MO_LEAD]
    else:
        leads = pd.Series(pd.NA, index=df.index, dtype="Int64")

    basis, ui_year, ui_half, macro_year, macro_quarter = [], [], [], [], []
    for year, first, month, lead in zip(df[C.YEAR], df[C.FIRST_UNEMPLOYED_OFFSET], df[C.INTERVIEW_MONTH], leads):
        offset, kind = reference_offset(first, month, lead)
        if offset is None:
            basis.append(None)
            ui_year.append(None)
            ui_half.append(None)
            macro_year.append(None)
            macro_quarter.append(None)
            continue
        period = reference_period(int(year), offset)
        basis.append(kind.value)
        ui_year.append(period.year)
        ui_half.append(period.half)
        macro_year.append(period.year)
        macro_quarter.append(period.quarter)

    out = df.copy()
    out[C.REFERENCE_BASIS] = pd.array(basis, dtype="string")
    out[C.UI_REF_YEAR] = pd.array(ui_year, dtype="Int64")
    out[C.UI_REF_HALF] = pd.array(ui_half, dtype="Int64")
    out[C.MACRO_REF_YEAR] = pd.array(macro_year, dtype="Int64")
    out[C.MACRO_REF_QUARTER] = pd.array(macro_quarter, dtype="Int64")
    return out
