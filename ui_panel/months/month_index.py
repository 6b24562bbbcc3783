# ui_panel/months/month_index.py
"""
Month-index calendar for one person-year record.

Every record is laid out on a fixed frame of calendar months relative to its
interview year Y. Blocks are calendar years (``t-2`` = Y-2 ... ``t3`` = Y+3)
and a month's offset is ``12 * block + month``: January of the interview
year is offset 1, December of ``t1`` is 24, January of ``t-2`` is -23 and
December of ``t3`` is 48.

The frame itself does not depend on the interview month M. What does is the
set of offsets each window covers:

    post-interview window   M .. M+11          (first unemployed month 1..23)
    pre-interview walk      M-1, M-2, ..., -23 (23 + M months, ceiling 24..35)
    post-interview walk     f .. 48            (49 - f months)

Examples:
    >>> cal = MonthCalendar(3)
    >>> cal.offset(Block.T0, 3)
    3
    >>> cal.block_month(14)
    (<Block.T1: 1>, 2)
    >>> list(cal.post_interview_window())[:3]
    [3, 4, 5]
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Tuple

import pandas as pd

from ui_panel.exceptions import CalendarError

MONTHS_PER_YEAR = 12
WINDOW_MONTHS = 12


class Block(IntEnum):
    """Calendar year relative to the interview year."""

    T_MINUS_2 = -2
    T_MINUS_1 = -1
    T0 = 0
    T1 = 1
    T2 = 2
    T3 = 3

    @property
    def label(self) -> str:
        """Column-name label: ``tm2``, ``tm1``, ``t0`` ... ``t3``."""
        return f"tm{-self.value}" if self.value < 0 else f"t{self.value}"


FIRST_OFFSET = MONTHS_PER_YEAR * Block.T_MINUS_2 + 1
LAST_OFFSET = MONTHS_PER_YEAR * Block.T3 + MONTHS_PER_YEAR

# Blocks a wave reports about itself, and how a later wave's blocks land on
# an earlier record's frame: a wave k steps ahead (2k years later) reports
# its t-2 block as the earlier record's block 2k-2.
RETROSPECTIVE_BLOCKS: Tuple[Block, ...] = (Block.T_MINUS_2, Block.T_MINUS_1, Block.T0)
UI_BLOCKS: Tuple[Block, ...] = (Block.T_MINUS_2, Block.T_MINUS_1)


@dataclass(frozen=True)
class ReferencePeriod:
    """Calendar period of one offset: year, half-year and quarter."""

    year: int
    month: int

    @property
    def half(self) -> int:
        return 1 if self.month <= 6 else 2

    @property
    def quarter(self) -> int:
        return (self.month - 1) // 3 + 1


def _check_month(month: int) -> None:
    if not 1 <= month <= MONTHS_PER_YEAR:
        raise CalendarError(f"Month must be in 1..12, got {month!r}")


def offset_of(block: Block, month: int) -> int:
    """Offset of ``month`` (1..12) of ``block`` in the record frame."""
    _check_month(month)
    return MONTHS_PER_YEAR * int(Block(block)) + month


def block_month_of(offset: int) -> Tuple[Block, int]:
    """Inverse of :func:`offset_of`."""
    if not FIRST_OFFSET <= offset <= LAST_OFFSET:
        raise CalendarError(
            f"Offset {offset} outside the record frame [{FIRST_OFFSET}, {LAST_OFFSET}]"
        )
    block, month0 = divmod(offset - 1, MONTHS_PER_YEAR)
    return Block(block), month0 + 1


def monthly_columns(prefix: str, block: Block) -> List[str]:
    """Column names for the 12 months of a block, e.g. ``emp_tm1_01`` .. ``emp_tm1_12``."""
    return [f"{prefix}_{Block(block).label}_{m:02d}" for m in range(1, MONTHS_PER_YEAR + 1)]


def lead_block(source_block: Block, waves_ahead: int) -> Block:
    """Block of the earlier record that a later wave's ``source_block`` describes."""
    return Block(int(source_block) + 2 * waves_ahead)


class MonthCalendar:
    """
    Offsets and windows for a record interviewed in ``interview_month``.

    Raises:
        CalendarError: If the interview month is not in 1..12.
    """

    def __init__(self, interview_month: int):
        if interview_month is None or pd.isna(interview_month):
            raise CalendarError("Interview month is unknown")
        interview_month = int(interview_month)
        _check_month(interview_month)
        self.interview_month = interview_month

    def __repr__(self) -> str:
        return f"MonthCalendar(interview_month={self.interview_month})"

    @property
    def interview_offset(self) -> int:
        return self.interview_month

    def offset(self, block: Block, month: int) -> int:
        return offset_of(block, month)

    def block_month(self, offset: int) -> Tuple[Block, int]:
        return block_month_of(offset)

    def post_interview_window(self) -> range:
        """The 12 offsets starting at the interview month."""
        return range(self.interview_month, self.interview_month + WINDOW_MONTHS)

    def pre_interview_offsets(self) -> range:
        """Offsets walked backward from the month before the interview."""
        return range(self.interview_month - 1, FIRST_OFFSET - 1, -1)

    @property
    def pre_interview_ceiling(self) -> int:
        return self.interview_month - FIRST_OFFSET

    @staticmethod
    def post_interview_offsets(start: int) -> range:
        """Offsets walked forward from ``start`` to the end of the frame."""
        return range(start, LAST_OFFSET + 1)

    @staticmethod
    def post_interview_ceiling(start: int) -> int:
        return LAST_OFFSET - start + 1

    def month_before_interview(self) -> int:
        return self.interview_month - 1

    def layout(self) -> Dict[Tuple[Block, int], int]:
        """Full (block, month) -> offset mapping for this record."""
        return {(block, m): offset_of(block, m) for block in Block for m in range(1, 13)}


def reference_period(interview_year: int, offset: int) -> ReferencePeriod:
    """Calendar year and month of ``offset`` for a record interviewed in ``interview_year``."""
    block, month = block_month_of(offset)
    return ReferencePeriod(year=int(interview_year) + int(block), month=month)


def reference_period_table() -> pd.DataFrame:
    """
    Offset -> (year shift, month, half, quarter) mapping for the whole frame.

    The year shift is added to the interview year.
    """
    rows = []
    for offset in range(FIRST_OFFSET, LAST_OFFSET + 1):
        block, month = block_month_of(offset)
        period = ReferencePeriod(year=int(block), month=month)
        rows.append(
            {
                "offset": offset,
                "block": block.label,
                "year_shift": int(block),
                "month": month,
                "half": period.half,
                "quarter": period.quarter,
            }
        )
    return pd.DataFrame(rows)
