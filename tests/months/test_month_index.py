import pytest

from ui_panel.exceptions import CalendarError
from ui_panel.months import (
    FIRST_OFFSET,
    LAST_OFFSET,
    Block,
    MonthCalendar,
    block_month_of,
    lead_block,
    monthly_columns,
    offset_of,
    reference_period,
    reference_period_table,
)


@pytest.mark.unit
def test_frame_bounds():
    assert offset_of(Block.T_MINUS_2, 1) == FIRST_OFFSET == -23
    assert offset_of(Block.T0, 1) == 1
    assert offset_of(Block.T1, 12) == 24
    assert offset_of(Block.T3, 12) == LAST_OFFSET == 48


@pytest.mark.unit
def test_offset_round_trip_covers_whole_frame():
    for offset in range(FIRST_OFFSET, LAST_OFFSET + 1):
        block, month = block_month_of(offset)
        assert offset_of(block, month) == offset


@pytest.mark.unit
@pytest.mark.parametrize("offset", [FIRST_OFFSET - 1, LAST_OFFSET + 1])
def test_offset_outside_frame_raises(offset):
    with pytest.raises(CalendarError):
        block_month_of(offset)


@pytest.mark.unit
@pytest.mark.parametrize("month", [0, 13])
def test_bad_month_raises(month):
    with pytest.raises(CalendarError):
        offset_of(Block.T0, month)
    with pytest.raises(CalendarError):
        MonthCalendar(month)


def test_unknown_interview_month_raises():
    with pytest.raises(CalendarError):
        MonthCalendar(None)


def test_calendar_windows_for_march():
    cal = MonthCalendar(3)
    assert list(cal.post_interview_window()) == list(range(3, 15))
    pre = list(cal.pre_interview_offsets())
    assert pre[0] == 2 and pre[-1] == -23
    assert len(pre) == cal.pre_interview_ceiling == 26
    assert list(cal.post_interview_offsets(14))[0] == 14
    assert cal.post_interview_ceiling(14) == 35
    assert cal.month_before_interview() == 2


def test_calendar_layout_maps_every_block_month():
    layout = MonthCalendar(6).layout()
    assert len(layout) == 72
    assert layout[(Block.T_MINUS_1, 12)] == 0
    assert layout[(Block.T2, 1)] == 25


def test_block_labels_and_columns():
    assert Block.T_MINUS_2.label == "tm2"
    assert Block.T3.label == "t3"
    cols = monthly_columns("emp", Block.T_MINUS_1)
    assert cols[0] == "emp_tm1_01" and cols[-1] == "emp_tm1_12"


def test_lead_block_maps_later_wave_onto_earlier_frame():
    assert lead_block(Block.T_MINUS_2, 1) == Block.T0
    assert lead_block(Block.T_MINUS_1, 1) == Block.T1
    assert lead_block(Block.T_MINUS_2, 2) == Block.T2
    assert lead_block(Block.T_MINUS_1, 2) == Block.T3


def test_reference_period():
    period = reference_period(2005, 14)
    assert (period.year, period.month, period.half, period.quarter) == (2006, 2, 1, 1)
    period = reference_period(2005, 9)
    assert (period.year, period.half, period.quarter) == (2005, 2, 3)


def test_reference_period_table():
    table = reference_period_table()
    assert len(table) == LAST_OFFSET - FIRST_OFFSET + 1
    row = table[table["offset"] == 25].iloc[0]
    assert row["year_shift"] == 2
    assert row["month"] == 1
    assert row["quarter"] == 1
