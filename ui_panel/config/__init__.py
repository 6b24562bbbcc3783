from .loaders import load_config, load_yaml_config, parse_config
from .models import (
    AlignmentConfig,
    AnalysisConfig,
    ImputationConfig,
    ImputationStratum,
    PanelBuildConfig,
    SpellConfig,
    StratumSelector,
    UiWindowConfig,
    WaveConfig,
)

__all__ = [
    "load_config",
    "load_yaml_config",
    "parse_config",
    "AlignmentConfig",
    "AnalysisConfig",
    "ImputationConfig",
    "ImputationStratum",
    "PanelBuildConfig",
    "SpellConfig",
    "StratumSelector",
    "UiWindowConfig",
    "WaveConfig",
]
