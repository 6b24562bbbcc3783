"""UI receipt window construction and non-receipt imputation."""

from .non_receipt import impute_non_receipt, non_receipt_reasons, remaining_weeks_worked
from .window import (
    annual_receipt,
    build_ui_window,
    onset_in_observable_range,
    received_in_window,
    window_fully_observed,
    window_offsets,
)

__all__ = [
    "impute_non_receipt",
    "non_receipt_reasons",
    "remaining_weeks_worked",
    "annual_receipt",
    "build_ui_window",
    "onset_in_observable_range",
    "received_in_window",
    "window_fully_observed",
    "window_offsets",
]
