import os
import sys
from typing import Dict, Iterable, Optional, Tuple

import pandas as pd
import pytest

# Ensure project root is on sys.path before imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from ui_panel.months import Block, RETROSPECTIVE_BLOCKS, UI_BLOCKS, block_month_of, monthly_columns  # noqa: E402
from ui_panel.schema import columns as C  # noqa: E402


# Define pytest markers for test categories
def pytest_configure(config):
    """
    Register custom markers to avoid pytest warnings.
    """
    config.addinivalue_line("markers", "unit: mark a test as a unit test")
    config.addinivalue_line("markers", "integration: mark a test as an integration test")
    config.addinivalue_line("markers", "quick: mark a test as a quick test for CI")
    config.addinivalue_line("markers", "config: mark a test as a config test")
    config.addinivalue_line("markers", "spells: mark a test as a spell reconstruction test")
    config.addinivalue_line("markers", "waves: mark a test as a wave selection test")
    config.addinivalue_line("markers", "alignment: mark a test as an outcome alignment test")
    config.addinivalue_line("markers", "imputation: mark a test as an imputation test")
    config.addinivalue_line("markers", "analysis: mark a test as an analysis preparation test")


EMP_COLS = [c for block in RETROSPECTIVE_BLOCKS for c in monthly_columns(C.EMP_PREFIX, block)]
UI_CODE_COLS = [c for block in UI_BLOCKS for c in monthly_columns(C.UI_PREFIX, block)]


def _code_column(prefix: str, block: Block, month: int) -> str:
    return monthly_columns(prefix, block)[month - 1]


class PanelBuilder:
    """
    Builds raw person-year panels by month offset instead of column name.

    Every wave starts fully employed with no UI receipt. ``unemployed`` and
    ``ui`` write a record's month offsets into whichever wave reports them:
    the record itself for months before the interview (``own=True``), the
    wave 2 years later for offsets 1..24 and the wave 4 years later for
    offsets 25..48.
    """

    def __init__(self):
        self.rows: Dict[Tuple[int, int], dict] = {}

    def wave(self, person_id: int, year: int, interview_month: Optional[int] = 3, **fields) -> "PanelBuilder":
        row = {
            C.PERSON_ID: person_id,
            C.YEAR: year,
            C.INTERVIEW_MONTH: interview_month,
            C.STATE: "CA",
            C.UI_AMOUNT: 0.0,
            C.OUTCOME: None,
        }
        row.update({c: 1.0 for c in EMP_COLS})
        row.update({c: 0.0 for c in UI_CODE_COLS})
        row.update(fields)
        self.rows[(person_id, year)] = row
        return self

    def waves(self, person_id: int, years: Iterable[int], **fields) -> "PanelBuilder":
        for year in years:
            self.wave(person_id, year, **fields)
        return self

    def set(self, person_id: int, year: int, **fields) -> "PanelBuilder":
        self.rows[(person_id, year)].update(fields)
        return self

    @staticmethod
    def _lead_source(record_year: int, offset: int) -> Tuple[int, Block, int]:
        block, month = block_month_of(offset)
        waves_ahead = 1 if block in (Block.T0, Block.T1) else 2
        return record_year + 2 * waves_ahead, Block(int(block) - 2 * waves_ahead), month

    def unemployed(
        self, person_id: int, record_year: int, offsets: Iterable[int], value: Optional[int] = 1, own: bool = False
    ) -> "PanelBuilder":
        code = None if value is None else float(1 - value)
        for offset in offsets:
            if own:
                block, month = block_month_of(offset)
                year = record_year
            else:
                year, block, month = self._lead_source(record_year, offset)
            self.rows[(person_id, year)][_code_column(C.EMP_PREFIX, block, month)] = code
        return self

    def ui(self, person_id: int, record_year: int, offsets: Iterable[int], value: Optional[int] = 1) -> "PanelBuilder":
        code = None if value is None else float(value)
        for offset in offsets:
            year, block, month = self._lead_source(record_year, offset)
            self.rows[(person_id, year)][_code_column(C.UI_PREFIX, block, month)] = code
        return self

    def frame(self) -> pd.DataFrame:
        return pd.DataFrame(list(self.rows.values()))


@pytest.fixture
def panel_builder():
    return PanelBuilder()


@pytest.fixture
def ui_rules_table():
    rows = []
    for year in range(2001, 2012):
        for half in (1, 2):
            rows.append(
                {
                    "state": "CA",
                    "year": year,
                    "half": half,
                    "max_weekly_benefit": 450.0,
                    "max_duration_weeks": 26.0,
                    "min_base_wage": 1300.0,
                    "min_base_hours": 0.0,
                    "min_base_weeks": 0.0,
                }
            )
            rows.append(
                {
                    "state": "TX",
                    "year": year,
                    "half": half,
                    "max_weekly_benefit": 350.0,
                    "max_duration_weeks": 20.0,
                    "min_base_wage": 2000.0,
                    "min_base_hours": 0.0,
                    "min_base_weeks": 0.0,
                }
            )
    return pd.DataFrame(rows)


@pytest.fixture
def macro_table():
    rows = []
    for year in range(2001, 2012):
        for quarter in (1, 2, 3, 4):
            rows.append(
                {"state": "CA", "year": year, "quarter": quarter, "unemployment_rate": 5.0 + quarter / 10, "gsp_per_capita": 50000.0}
            )
    return pd.DataFrame(rows)
