"""
Column names, categorical codes and input validation for the person-year panel.

Example Usage:
    >>> from ui_panel.schema import columns as C
    >>> from ui_panel.schema import CensoringKind
    >>> CensoringKind.from_flags(left=True, right=False).value
    'cens_left'
"""

from . import columns
from .codes import (
    CensoringKind,
    ExposureGroup,
    ReferenceBasis,
    TransitionPattern,
    NO_OCCUPATION,
    UNEMPLOYED_STATUS,
)
from .validation import validate_panel_schema

__all__ = [
    "columns",
    "CensoringKind",
    "ExposureGroup",
    "ReferenceBasis",
    "TransitionPattern",
    "NO_OCCUPATION",
    "UNEMPLOYED_STATUS",
    "validate_panel_schema",
]
