import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml
from cerberus import Validator
from pydantic import ValidationError

from ui_panel.exceptions import ConfigLoadError
from .models import PanelBuildConfig

# Configure logger for this module
logger = logging.getLogger(__name__)

# Top-level shape only; field types and ranges are checked by the pydantic models.
TOP_LEVEL_SCHEMA = {
    "log_level": {"type": "string", "required": False},
    "spell": {"type": "dict", "required": False},
    "ui_window": {"type": "dict", "required": False},
    "waves": {"type": "dict", "required": False},
    "alignment": {"type": "dict", "required": False},
    "imputation": {
        "type": "dict",
        "required": False,
        "schema": {
            "m": {"type": "integer", "required": False},
            "seed": {"type": "integer", "required": False},
            "unemployed_floor_correction": {"type": "boolean", "required": False},
            "strata": {"type": "list", "required": False, "schema": {"type": "dict"}},
        },
    },
    "analysis": {"type": "dict", "required": False},
}


def load_yaml_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Loads configuration data from a YAML file.

    Args:
        config_path: Path pointing to the YAML configuration file.

    Returns:
        A dictionary containing the loaded configuration (empty for an empty file).

    Raises:
        ConfigLoadError: If the file cannot be found or parsed.
    """
    config_path = Path(config_path)
    logger.info(f"Attempting to load configuration from: {config_path}")

    if not config_path.is_file():
        logger.error(f"Configuration file not found at path: {config_path}")
        raise ConfigLoadError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.exception(f"Error parsing YAML configuration file {config_path}: {e}")
        raise ConfigLoadError(f"Error parsing YAML file {config_path}") from e

    if config_data is None:
        return {}
    if not isinstance(config_data, dict):
        logger.error(f"Configuration file {config_path} did not parse into a dictionary.")
        raise ConfigLoadError(
            f"Invalid configuration format in {config_path}: Expected a dictionary."
        )

    logger.info(f"Successfully loaded configuration from {config_path}")
    return config_data


def parse_config(config_data: Dict[str, Any]) -> PanelBuildConfig:
    """
    Validates a configuration mapping and converts it to ``PanelBuildConfig``.

    Raises:
        ConfigLoadError: On schema or model validation errors.
    """
    v = Validator(TOP_LEVEL_SCHEMA)
    if not v.validate(config_data):
        raise ConfigLoadError(f"Config validation failed: {v.errors}")
    try:
        config = PanelBuildConfig(**config_data)
    except ValidationError as e:
        raise ConfigLoadError(f"Config validation failed: {e}") from e
    logger.debug(f"Configuration parsed: {config}")
    return config


def load_config(config_path: Union[str, Path, None] = None) -> PanelBuildConfig:
    """Load a YAML file into ``PanelBuildConfig``; ``None`` returns the defaults."""
    if config_path is None:
        return PanelBuildConfig()
    return parse_config(load_yaml_config(config_path))


# Expose for import
__all__ = [
    "load_yaml_config",
    "parse_config",
    "load_config",
    "ConfigLoadError",
]
