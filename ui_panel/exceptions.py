"""
Custom exception classes for panel construction.

Structural gaps in an unbalanced panel are never exceptions; they resolve to
missing values. The classes here cover configuration problems, malformed
input tables, case analyses that reach an unanticipated branch, and failures
of the external imputation service.
"""

from typing import Any, Optional


class PanelError(Exception):
    """Base exception for all panel-construction errors."""

    pass


class ConfigLoadError(PanelError):
    """Raised when a configuration file cannot be found, parsed or validated."""

    pass


class SchemaError(PanelError):
    """Raised when an input table is missing required columns or keys."""

    pass


class CalendarError(PanelError, ValueError):
    """Raised for an interview month, block or offset outside the month frame."""

    pass


class SpellIntegrityError(PanelError):
    """Raised when a record falls into no anticipated branch of the spell case analysis."""

    def __init__(self, message: str, person_id: Any = None, year: Any = None):
        self.person_id = person_id
        self.year = year
        if person_id is not None:
            message = f"{message} (person_id={person_id}, year={year})"
        super().__init__(message)


class ImputationError(PanelError):
    """Raised when the imputation service fails for a stratum; carries retry context."""

    def __init__(
        self,
        message: str,
        stratum: str,
        seed: int,
        iteration: Optional[int] = None,
    ):
        self.stratum = stratum
        self.seed = seed
        self.iteration = iteration
        super().__init__(
            f"{message} (stratum={stratum!r}, seed={seed}, iteration={iteration})"
        )


__all__ = [
    "PanelError",
    "ConfigLoadError",
    "SchemaError",
    "CalendarError",
    "SpellIntegrityError",
    "ImputationError",
]
