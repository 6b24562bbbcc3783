# ui_panel/spells/scan.py
"""
Linear scans over ordered monthly flags.

A flag is 1 (unemployed / received), 0 (employed / not received) or None
(unknown). Every scan walks the sequence once with early exit.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

Flag = Optional[int]


def to_flag(value) -> Flag:
    """Coerce a float/NA cell to a flag."""
    if value is None or value != value:  # NaN
        return None
    return int(value)


def has_unknown(flags: Iterable[Flag]) -> bool:
    return any(f is None for f in flags)


def known_sum(flags: Iterable[Flag]) -> int:
    """Sum of the flags with unknowns counted as 0."""
    return sum(f for f in flags if f is not None)


def first_positive(flags: Sequence[Flag]) -> Tuple[Optional[int], bool]:
    """
    Position of the first 1 in ``flags``.

    Returns:
        (index, blocked): ``index`` is the position of the first 1, or None.
        ``blocked`` is True when an unknown flag was met before any 1, in
        which case the index is always None.
    """
    for i, flag in enumerate(flags):
        if flag is None:
            return None, True
        if flag == 1:
            return i, False
    return None, False


@dataclass(frozen=True)
class RunLength:
    """
    Length of a run of consecutive 1 flags.

    ``exact`` is the run length when it ends at a known 0 with no unknown
    flag along the way, else None. ``minimum`` counts unknown flags as
    continuing the run and equals the sequence length when the run never
    ends. ``censored`` is True whenever ``exact`` is None.
    """

    exact: Optional[int]
    minimum: int
    censored: bool
    saturated: bool = False


def run_length(flags: Sequence[Flag]) -> RunLength:
    count = 0
    saw_unknown = False
    for flag in flags:
        if flag == 0:
            exact = None if saw_unknown else count
            return RunLength(exact=exact, minimum=count, censored=exact is None)
        if flag is None:
            saw_unknown = True
        count += 1
    return RunLength(exact=None, minimum=count, censored=True, saturated=True)
