"""Month-index calendar shared by every reconstruction stage."""

from .month_index import (
    Block,
    FIRST_OFFSET,
    LAST_OFFSET,
    RETROSPECTIVE_BLOCKS,
    UI_BLOCKS,
    MonthCalendar,
    ReferencePeriod,
    block_month_of,
    lead_block,
    monthly_columns,
    offset_of,
    reference_period,
    reference_period_table,
)

__all__ = [
    "Block",
    "FIRST_OFFSET",
    "LAST_OFFSET",
    "RETROSPECTIVE_BLOCKS",
    "UI_BLOCKS",
    "MonthCalendar",
    "ReferencePeriod",
    "block_month_of",
    "lead_block",
    "monthly_columns",
    "offset_of",
    "reference_period",
    "reference_period_table",
]
