from pathlib import Path

import pytest

from ui_panel.config import PanelBuildConfig, load_config, load_yaml_config, parse_config
from ui_panel.exceptions import ConfigLoadError

pytestmark = pytest.mark.config

REPO_CONFIG = Path(__file__).resolve().parents[2] / "config" / "panel_build.yaml"


def test_defaults_without_path():
    config = load_config()
    assert isinstance(config, PanelBuildConfig)
    assert config.ui_window.window_months == 6
    assert config.ui_window.min_onset_offset == 7
    assert config.ui_window.max_onset_offset == 23
    assert config.waves.wave_gap_years == 2
    assert config.alignment.max_wave_distance == 8
    assert config.imputation.strata == []


def test_repository_config_loads():
    config = load_config(REPO_CONFIG)
    assert config.imputation.m == 35
    names = [s.name for s in config.imputation.strata]
    assert names == ["unemployed_in_12mo_lead", "employed_in_12mo_lead", "lead_status_missing"]
    assert config.imputation.strata[2].selector.values == [None]
    assert config.analysis.winsor_quantiles == (0.02, 0.98)


def test_partial_file_keeps_defaults(tmp_path):
    path = tmp_path / "partial.yaml"
    path.write_text("waves:\n  wave_gap_years: 1\n")
    config = load_config(path)
    assert config.waves.wave_gap_years == 1
    assert config.waves.lead_in_waves == 2
    assert config.ui_window.window_months == 6


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_yaml_config(path) == {}
    assert load_config(path) == PanelBuildConfig()


def test_missing_file(tmp_path):
    with pytest.raises(ConfigLoadError):
        load_config(tmp_path / "nope.yaml")


def test_malformed_yaml(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("waves: [1, 2\n")
    with pytest.raises(ConfigLoadError):
        load_config(path)


def test_non_mapping_yaml(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n")
    with pytest.raises(ConfigLoadError):
        load_config(path)


def test_unknown_top_level_key():
    with pytest.raises(ConfigLoadError):
        parse_config({"cohorts": {}})


def test_wrong_type_rejected_by_schema():
    with pytest.raises(ConfigLoadError):
        parse_config({"imputation": {"m": "many"}})


@pytest.mark.parametrize(
    "data",
    [
        {"ui_window": {"min_onset_offset": 24, "max_onset_offset": 23}},
        {"alignment": {"max_wave_distance": 8, "max_base_distance": 4}},
        {"analysis": {"winsor_quantiles": [0.9, 0.1]}},
        {"imputation": {"m": 0}},
        {
            "imputation": {
                "strata": [
                    {
                        "name": "s",
                        "selector": {"column": "unemployed_in_12mo_lead", "values": [1]},
                        "variables": ["outcome"],
                        "methods": {"age": "pmm"},
                    }
                ]
            }
        },
    ],
)
def test_invalid_values(data):
    with pytest.raises(ConfigLoadError):
        parse_config(data)
