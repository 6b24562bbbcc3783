# ui_panel/sources.py
"""
Interfaces of the external collaborators and table-backed implementations.

Ingestion of the raw extracts is not part of this package. Anything that
answers these ``get`` calls can feed the pipeline; the ``Table*`` classes
wrap already-loaded pandas DataFrames.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, Tuple, runtime_checkable

import pandas as pd

from ui_panel.exceptions import SchemaError
from ui_panel.months import RETROSPECTIVE_BLOCKS, UI_BLOCKS, monthly_columns
from ui_panel.schema import columns as C

logger = logging.getLogger(__name__)

UI_RULE_FIELDS = (
    "max_weekly_benefit",
    "max_duration_weeks",
    "min_base_wage",
    "min_base_hours",
    "min_base_weeks",
)
MACRO_FIELDS = ("gsp_per_capita", "unemployment_rate")


@runtime_checkable
class DemographicSource(Protocol):
    def get(self, person_id: Any, year: int) -> Optional[Mapping[str, Any]]: ...


@runtime_checkable
class EmploymentMonthlySource(Protocol):
    def get(self, person_id: Any, year: int) -> Optional[Sequence[Optional[int]]]:
        """36 monthly employment codes, blocks t-2, t-1, t0 in order."""
        ...


@runtime_checkable
class UiMonthlySource(Protocol):
    def get(self, person_id: Any, year: int) -> Optional[Mapping[str, Any]]:
        """``{"months": [24 codes for t-2, t-1], "amount": annual amount for t-1}``."""
        ...


@runtime_checkable
class OutcomeSource(Protocol):
    def get(self, person_id: Any, year: int) -> Optional[float]: ...


@runtime_checkable
class StateUiRulesSource(Protocol):
    def get(self, state: Any, period: Tuple[int, int]) -> Optional[Mapping[str, float]]:
        """UI law parameters for a state and (year, half)."""
        ...


@runtime_checkable
class StateMacroSource(Protocol):
    def get(self, state: Any, year: int, quarter: int) -> Optional[Mapping[str, float]]: ...


class _KeyedTable:
    """Dictionary index over a DataFrame keyed by ``key_cols``."""

    def __init__(self, frame: pd.DataFrame, key_cols: List[str], value_cols: Iterable[str]):
        missing = [c for c in key_cols if c not in frame.columns]
        if missing:
            raise SchemaError(f"Lookup table missing key columns {missing}")
        self.value_cols = [c for c in value_cols if c in frame.columns]
        dupes = frame.duplicated(key_cols)
        if dupes.any():
            logger.warning(f"Lookup table has {int(dupes.sum())} duplicate keys on {key_cols}; keeping first")
            frame = frame[~dupes]
        self._index: Dict[tuple, Dict[str, float]] = {}
        for rec in frame[key_cols + self.value_cols].to_dict("records"):
            key = tuple(rec.pop(k) for k in key_cols)
            self._index[key] = {k: (None if pd.isna(v) else v) for k, v in rec.items()}

    def lookup(self, key: tuple) -> Optional[Dict[str, float]]:
        return self._index.get(key)

    def __len__(self) -> int:
        return len(self._index)


class TableStateUiRules:
    """State UI rules from a frame with ``state, year, half`` plus rule columns."""

    def __init__(self, frame: pd.DataFrame):
        self._table = _KeyedTable(frame, ["state", "year", "half"], UI_RULE_FIELDS)

    def get(self, state, period):
        year, half = period
        return self._table.lookup((state, int(year), int(half)))


class TableStateMacro:
    """State macro indicators from a frame with ``state, year, quarter`` plus indicator columns."""

    def __init__(self, frame: pd.DataFrame):
        self._table = _KeyedTable(frame, ["state", "year", "quarter"], MACRO_FIELDS)

    def get(self, state, year, quarter):
        return self._table.lookup((state, int(year), int(quarter)))


def assemble_panel(
    keys: pd.DataFrame,
    demographics: DemographicSource,
    employment: EmploymentMonthlySource,
    ui: Optional[UiMonthlySource] = None,
    outcomes: Optional[OutcomeSource] = None,
) -> pd.DataFrame:
    """
    Join the per-record sources into the raw person-year panel.

    Args:
        keys: Frame with ``person_id`` and ``year`` columns.

    Returns:
        One row per key with demographic fields, ``emp_*`` and ``ui_*`` code
        columns, ``ui_amount`` and ``outcome``.
    """
    emp_cols = [c for block in RETROSPECTIVE_BLOCKS for c in monthly_columns(C.EMP_PREFIX, block)]
    ui_cols = [c for block in UI_BLOCKS for c in monthly_columns(C.UI_PREFIX, block)]
    rows = []
    for person_id, year in zip(keys[C.PERSON_ID], keys[C.YEAR]):
        row: Dict[str, Any] = {C.PERSON_ID: person_id, C.YEAR: int(year)}
        row.update(demographics.get(person_id, year) or {})

        codes = employment.get(person_id, year)
        codes = list(codes) if codes is not None else [None] * len(emp_cols)
        if len(codes) != len(emp_cols):
            raise SchemaError(
                f"Employment source returned {len(codes)} codes for ({person_id}, {year}); expected {len(emp_cols)}"
            )
        row.update(dict(zip(emp_cols, codes)))

        ui_rec = ui.get(person_id, year) if ui is not None else None
        ui_months = list(ui_rec["months"]) if ui_rec else [None] * len(ui_cols)
        if len(ui_months) != len(ui_cols):
            raise SchemaError(
                f"UI source returned {len(ui_months)} codes for ({person_id}, {year}); expected {len(ui_cols)}"
            )
        row.update(dict(zip(ui_cols, ui_months)))
        row[C.UI_AMOUNT] = ui_rec.get("amount") if ui_rec else None

        row[C.OUTCOME] = outcomes.get(person_id, year) if outcomes is not None else None
        rows.append(row)

    panel = pd.DataFrame(rows)
    for col in emp_cols + ui_cols + [C.UI_AMOUNT, C.OUTCOME]:
        panel[col] = pd.to_numeric(panel[col], errors="coerce").astype("float64")
    if C.INTERVIEW_MONTH in panel.columns:
        panel[C.INTERVIEW_MONTH] = pd.to_numeric(panel[C.INTERVIEW_MONTH], errors="coerce").astype("Int64")
    logger.info(f"Assembled panel with {len(panel)} person-year records")
    return panel
