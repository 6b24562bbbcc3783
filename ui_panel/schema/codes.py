# ui_panel/schema/codes.py

from enum import Enum


class CensoringKind(str, Enum):
    """Censoring of a reconstructed unemployment spell."""

    ACTUAL = "actual"
    LEFT = "cens_left"
    RIGHT = "cens_right"
    BOTH = "cens_both"

    @classmethod
    def from_flags(cls, left: bool, right: bool) -> "CensoringKind":
        if left and right:
            return cls.BOTH
        if left:
            return cls.LEFT
        if right:
            return cls.RIGHT
        return cls.ACTUAL


class TransitionPattern(str, Enum):
    """Employment-transition pattern over the previous and current wave."""

    STABLY_EMPLOYED = "stably-employed"
    NEWLY_UNEMPLOYED = "newly-unemployed"
    NEWLY_REEMPLOYED = "newly-reemployed"
    STABLY_UNEMPLOYED = "stably-unemployed"
    UNKNOWN = "unknown"


class ExposureGroup(str, Enum):
    """Analysis exposure group derived from the transition pattern."""

    CONTINUOUSLY_EMPLOYED = "CE"
    RECENTLY_UNEMPLOYED = "RU"


class ReferenceBasis(str, Enum):
    """Which month anchors a record's reference period."""

    SPELL_ONSET = "spell_onset"
    LEAD_WINDOW = "lead_window"
    INTERVIEW = "interview"


UNEMPLOYED_STATUS = "Unemployed"
NO_OCCUPATION = "UnemployedorNILF"

# Explicit exports
__all__ = [
    "CensoringKind",
    "TransitionPattern",
    "ExposureGroup",
    "ReferenceBasis",
    "UNEMPLOYED_STATUS",
    "NO_OCCUPATION",
]
