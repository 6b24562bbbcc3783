"""Reference-period resolution and state context joins."""

from .joiner import join_macro, join_state_context, join_ui_rules
from .periods import (
    assign_reference_periods,
    reference_offset,
    resolve_macro_reference_period,
    resolve_ui_reference_period,
)

__all__ = [
    "join_macro",
    "join_state_context",
    "join_ui_rules",
    "assign_reference_periods",
    "reference_offset",
    "resolve_macro_reference_period",
    "resolve_ui_reference_period",
]
