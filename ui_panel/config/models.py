# ui_panel/config/models.py
"""
Pydantic models for validating the structure and types of the panel-build
configuration loaded from YAML files (e.g., config/panel_build.yaml).

Defaults reproduce the study design: biennial waves, monthly recall from
2001 onward, a 6-month UI observation window and 8-wave outcome searches.
"""

import logging
from typing import Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger(__name__)


class SpellConfig(BaseModel):
    """Unemployment spell reconstruction."""

    monthly_data_start_year: int = Field(
        2001, description="First interview year whose monthly employment recall is usable"
    )


class UiWindowConfig(BaseModel):
    """UI receipt window and non-receipt imputation thresholds."""

    window_months: int = Field(6, ge=1, description="Months after spell onset observed for UI receipt")
    min_onset_offset: int = Field(
        7, description="Earliest spell-onset offset whose UI window the UI recall can cover"
    )
    max_onset_offset: int = Field(
        23, description="Latest spell-onset offset whose UI window the UI recall can cover"
    )
    max_prior_unemployment_months: int = Field(
        7, ge=0, description="Pre-interview unemployment beyond this rules out UI receipt"
    )
    weeks_per_year: int = Field(52, gt=0)
    use_hours_rule: bool = Field(True, description="Apply the minimum base-period hours rule")
    use_weeks_rule: bool = Field(True, description="Apply the minimum base-period weeks rule")

    @model_validator(mode="after")
    def check_onset_bounds(self) -> "UiWindowConfig":
        if self.min_onset_offset > self.max_onset_offset:
            raise ValueError(
                f"min_onset_offset ({self.min_onset_offset}) exceeds max_onset_offset ({self.max_onset_offset})"
            )
        return self


class WaveConfig(BaseModel):
    """Wave cadence used by eligibility and longest-run selection."""

    wave_gap_years: int = Field(2, gt=0)
    lead_in_waves: int = Field(2, ge=1, description="Preceding waves an eligible wave needs")


class AlignmentConfig(BaseModel):
    """Outcome alignment search distances (in waves)."""

    outcome_column: str = "outcome"
    max_wave_distance: int = Field(8, ge=1)
    max_base_distance: int = Field(16, ge=1)

    @model_validator(mode="after")
    def check_distances(self) -> "AlignmentConfig":
        if self.max_base_distance < self.max_wave_distance:
            raise ValueError("max_base_distance must be at least max_wave_distance")
        return self


class StratumSelector(BaseModel):
    column: str
    values: List[Optional[Union[int, float, str]]] = Field(
        ..., description="Values selecting the stratum; null selects missing values"
    )


class ImputationStratum(BaseModel):
    """
    One employment stratum handed to the imputation service.

    Attributes:
        name: Stratum label used in logs and errors.
        selector: Rows belonging to the stratum.
        methods: Imputation method per column with missing values (e.g. ``pmm``).
        include: Predictor columns; empty means every column in ``variables``.
        exclude: Columns never used as predictors.
        variables: Columns forming the design matrix.
    """

    name: str
    selector: StratumSelector
    variables: List[str] = Field(..., min_length=1)
    methods: Dict[str, str] = Field(default_factory=dict)
    include: List[str] = Field(default_factory=list)
    exclude: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_columns(self) -> "ImputationStratum":
        unknown = [c for c in list(self.methods) + self.include + self.exclude if c not in self.variables]
        if unknown:
            raise ValueError(f"Stratum {self.name!r} references columns not in variables: {unknown}")
        return self


class ImputationConfig(BaseModel):
    m: int = Field(35, ge=1, description="Number of completed datasets")
    seed: int = 20230606
    unemployed_floor_correction: bool = Field(
        True,
        description="Set the 12-month lead indicator to 1 when it was missing and the imputed status is Unemployed",
    )
    strata: List[ImputationStratum] = Field(default_factory=list)


class AnalysisConfig(BaseModel):
    """Analysis-sample preparation and moderator construction."""

    winsor_quantiles: Tuple[float, float] = (0.02, 0.98)
    ui_median_years: Tuple[int, int] = (2001, 2017)
    occupation_lags: List[int] = Field(
        default_factory=lambda: [1, 0, 2, 3, 4],
        description="Search order for the base occupation (wave lags; 0 is the current wave)",
    )
    drop_state_movers: bool = True
    min_run_waves: int = Field(3, ge=1)

    @model_validator(mode="after")
    def check_quantiles(self) -> "AnalysisConfig":
        lo, hi = self.winsor_quantiles
        if not 0.0 <= lo < hi <= 1.0:
            raise ValueError(f"winsor_quantiles must satisfy 0 <= lo < hi <= 1, got {self.winsor_quantiles}")
        return self


class PanelBuildConfig(BaseModel):
    """Top-level configuration for a panel build."""

    log_level: str = "INFO"
    spell: SpellConfig = Field(default_factory=SpellConfig)
    ui_window: UiWindowConfig = Field(default_factory=UiWindowConfig)
    waves: WaveConfig = Field(default_factory=WaveConfig)
    alignment: AlignmentConfig = Field(default_factory=AlignmentConfig)
    imputation: ImputationConfig = Field(default_factory=ImputationConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
