# ui_panel/spells/reconstruct.py
"""
Steps B-G: unemployment spell summaries for every person-year record.

Given the monthly flags from :mod:`ui_panel.spells.lead`, each record gets

* whether it was unemployed at any point in the 12 months from the interview
  month (``unemployed_in_12mo_lead``, tri-state),
* the offset of the first unemployed month in that window,
* the consecutive unemployment before the interview (walking backward) and
  after the spell onset (walking forward), each as an exact count, a
  minimum-known count and a censoring flag,
* the combined spell duration and its censoring kind.

All scans are linear walks over the offsets supplied by ``MonthCalendar``.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Optional, Sequence

import pandas as pd

from ui_panel.config.models import SpellConfig
from ui_panel.exceptions import SpellIntegrityError
from ui_panel.months import MonthCalendar
from ui_panel.schema import CensoringKind
from ui_panel.schema import columns as C
from .lead import FlagMatrix
from .scan import Flag, RunLength, first_positive, has_unknown, known_sum, run_length

logger = logging.getLogger(__name__)


@dataclass
class SpellSummary:
    """Spell fields of one record; None marks an unknown or not-applicable value."""

    unemp_status_period_na: bool = True
    unemployed_in_12mo_lead: Optional[int] = None
    first_unemployed_month_offset: Optional[int] = None
    already_unemployed_at_interview: Optional[int] = None
    months_unemployed_pre_interview_exact: Optional[int] = None
    months_unemployed_pre_interview_min: Optional[int] = None
    pre_interview_censored: Optional[bool] = None
    months_unemployed_post_interview_exact: Optional[int] = None
    months_unemployed_post_interview_min: Optional[int] = None
    post_interview_censored: Optional[bool] = None
    total_spell_duration_value: Optional[int] = None
    total_spell_duration_censoring_kind: Optional[str] = None


def lead_indicator(window: Sequence[Flag], period_na: bool) -> Optional[int]:
    """
    Step C. A known unemployed month anywhere in the window wins over
    missing months elsewhere; otherwise an incomplete window is unknown.
    """
    if known_sum(window) > 0:
        return 1
    if period_na:
        return None
    return 0


def first_unemployed_offset(
    window: Sequence[Flag], offsets: Sequence[int], indicator: Optional[int]
) -> Optional[int]:
    """
    Step D. Offset of the first unemployed month in the 12-month window.

    An unknown month before the first unemployed month leaves the answer
    unknown, since it may itself have been the first.

    Raises:
        SpellIntegrityError: If the window and the lead indicator disagree.
    """
    if indicator != 1:
        return None
    index, blocked = first_positive(window)
    if blocked:
        return None
    if index is None:
        raise SpellIntegrityError("Lead indicator is 1 but no unemployed month in window")
    return offsets[index]


def combine_spell(
    first_offset: int,
    interview_month: int,
    already_unemployed: Optional[int],
    pre: RunLength,
    post: RunLength,
):
    """
    Step G. Total spell duration and censoring kind.

    The spell runs back across the interview only when it starts in the
    interview month and the month before was not known to be employed.
    Pre-interview months are offsets below the interview month and post
    months start at it, so no month is counted twice.
    """
    continues_back = first_offset == interview_month and already_unemployed != 0
    if continues_back:
        total = pre.minimum + post.minimum
        left = pre.censored or already_unemployed is None
    elif first_offset >= interview_month:
        total = post.minimum
        left = False
    else:
        raise SpellIntegrityError(
            f"First unemployed offset {first_offset} precedes interview month {interview_month}"
        )
    return total, CensoringKind.from_flags(left=left, right=post.censored)


def reconstruct_record(
    flags: FlagMatrix,
    row: int,
    interview_month,
    year: int,
    config: SpellConfig,
) -> SpellSummary:
    """Steps B-G for one record."""
    summary = SpellSummary()
    if pd.isna(interview_month) or year < config.monthly_data_start_year:
        return summary

    cal = MonthCalendar(interview_month)
    offsets = list(cal.post_interview_window())
    window = flags.lead_flags(row, offsets)

    # Step B / C
    summary.unemp_status_period_na = has_unknown(window)
    summary.unemployed_in_12mo_lead = lead_indicator(window, summary.unemp_status_period_na)

    # Step D
    summary.first_unemployed_month_offset = first_unemployed_offset(
        window, offsets, summary.unemployed_in_12mo_lead
    )
    summary.already_unemployed_at_interview = flags.own_flags(row, [cal.month_before_interview()])[0]

    # Step E
    pre = run_length(flags.own_flags(row, cal.pre_interview_offsets()))
    summary.months_unemployed_pre_interview_exact = pre.exact
    summary.months_unemployed_pre_interview_min = pre.minimum
    summary.pre_interview_censored = pre.censored

    first = summary.first_unemployed_month_offset
    if first is None:
        return summary

    # Step F
    post = run_length(flags.lead_flags(row, cal.post_interview_offsets(first)))
    if post.minimum < 1:
        raise SpellIntegrityError(f"Spell starting at offset {first} has no unemployed month")
    summary.months_unemployed_post_interview_exact = post.exact
    summary.months_unemployed_post_interview_min = post.minimum
    summary.post_interview_censored = post.censored

    # Step G
    total, kind = combine_spell(
        first, cal.interview_month, summary.already_unemployed_at_interview, pre, post
    )
    summary.total_spell_duration_value = total
    summary.total_spell_duration_censoring_kind = kind.value
    return summary


SPELL_DTYPES = {
    C.UNEMP_PERIOD_NA: "boolean",
    C.UNEMPLOYED_12MO_LEAD: "Int64",
    C.FIRST_UNEMPLOYED_OFFSET: "Int64",
    C.ALREADY_UNEMPLOYED: "Int64",
    C.PRE_EXACT: "Int64",
    C.PRE_MIN: "Int64",
    C.PRE_CENSORED: "boolean",
    C.POST_EXACT: "Int64",
    C.POST_MIN: "Int64",
    C.POST_CENSORED: "boolean",
    C.SPELL_DURATION: "Int64",
    C.SPELL_CENSORING: "string",
}


def reconstruct_spells(df: pd.DataFrame, config: Optional[SpellConfig] = None) -> pd.DataFrame:
    """
    Add spell summary columns to a panel carrying monthly flags.

    Args:
        df: Output of :func:`ui_panel.spells.lead.build_monthly_flags`.
        config: Spell settings; defaults reproduce the study design.

    Returns:
        A copy of ``df`` with the columns in ``SPELL_COLS``.

    Raises:
        SpellIntegrityError: For a record outside every anticipated branch.
    """
    config = config or SpellConfig()
    flags = FlagMatrix(df)
    records = []
    for row, (person_id, year, month) in enumerate(
        zip(df[C.PERSON_ID], df[C.YEAR], df[C.INTERVIEW_MONTH])
    ):
        try:
            records.append(asdict(reconstruct_record(flags, row, month, int(year), config)))
        except SpellIntegrityError as e:
            logger.error(f"Spell reconstruction failed: {e}")
            raise SpellIntegrityError(str(e), person_id=person_id, year=year) from e

    spells = pd.DataFrame(records, columns=list(SPELL_DTYPES), index=df.index)
    spells = spells.astype(SPELL_DTYPES)

    out = df.drop(columns=[c for c in SPELL_DTYPES if c in df.columns])
    out = pd.concat([out, spells], axis=1)

    n_unemp = int((out[C.UNEMPLOYED_12MO_LEAD] == 1).sum())
    n_unknown = int(out[C.UNEMPLOYED_12MO_LEAD].isna().sum())
    logger.info(
        f"Reconstructed spells for {len(out)} records: {n_unemp} unemployed within 12 months, "
        f"{n_unknown} unknown"
    )
    return out
