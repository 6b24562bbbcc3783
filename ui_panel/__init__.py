"""
ui_panel: unemployment spells, UI receipt and aligned outcomes from a
biennial person-year survey panel.
"""

from ui_panel.config import PanelBuildConfig, load_config
from ui_panel.pipeline import build_analysis_datasets, build_completed_datasets, build_panel

__version__ = "0.1.0"

__all__ = [
    "PanelBuildConfig",
    "load_config",
    "build_analysis_datasets",
    "build_completed_datasets",
    "build_panel",
]
