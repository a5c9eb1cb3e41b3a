# maintenance/config_loader.py
# -*- coding: utf-8 -*-
"""
Configuration loader for the maintenance run.

Settings are resolved in this order, later sources winning:
1. Pydantic model defaults
2. Environment variables (``MAINT_`` prefix, read by BaseSettings)
3. The YAML configuration file
4. Command-line arguments
"""

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from maintenance import config as static_config
from maintenance.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def _deep_update(
    source: Dict[str, Any], overrides: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Recursively update ``source`` with ``overrides``.

    Nested dictionaries are merged key by key; any other value replaces the
    one in ``source``. None values in ``overrides`` never replace an
    existing value.
    """
    for key, value in overrides.items():
        if (
            isinstance(value, dict)
            and key in source
            and isinstance(source[key], dict)
        ):
            source[key] = _deep_update(source[key], value)
        elif value is not None:
            source[key] = value
        elif key not in source:
            source[key] = value
    return source


def read_yaml_config(
    yaml_config_path: Path, current_logger: Optional[logging.Logger] = None
) -> Dict[str, Any]:
    """
    Read a YAML mapping from ``yaml_config_path``.

    A missing, unreadable or malformed file yields an empty mapping and a
    log message; it never stops the run.
    """
    logger_to_use = current_logger if current_logger else module_logger

    if not (yaml_config_path.exists() and yaml_config_path.is_file()):
        logger_to_use.debug(
            f"Configuration file '{yaml_config_path}' not found. Using defaults, environment variables, and CLI args."
        )
        return {}

    try:
        with open(yaml_config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger_to_use.warning(
            f"Could not parse YAML config file '{yaml_config_path}': {e}. Using defaults and environment variables."
        )
        return {}
    except IOError as e:
        logger_to_use.warning(
            f"Could not read config file '{yaml_config_path}': {e}. Using defaults and environment variables."
        )
        return {}

    if yaml_data is None:
        return {}
    if not isinstance(yaml_data, dict):
        logger_to_use.warning(
            f"Config file '{yaml_config_path}' does not contain a valid YAML dictionary. Ignoring."
        )
        return {}

    logger_to_use.info(f"Loaded configuration from {yaml_config_path}")
    return yaml_data


def load_app_settings(
    cli_args: Optional[argparse.Namespace] = None,
    config_file_path: Optional[Path] = None,
    current_logger: Optional[logging.Logger] = None,
) -> AppSettings:
    """
    Build the AppSettings for this run.

    Args:
        cli_args: Parsed command-line arguments.
        config_file_path: YAML file to read. Defaults to ``maintenance.yaml``
            beside the entry script.
        current_logger: Optional logger to use instead of the module logger.

    Returns:
        The fully resolved settings.

    Raises:
        SystemExit: The merged configuration does not validate.
    """
    logger_to_use = current_logger if current_logger else module_logger

    # Defaults < environment
    current_values_dict = AppSettings().model_dump(exclude_defaults=False)

    yaml_config_path = Path(
        config_file_path
        if config_file_path
        else static_config.PROJECT_ROOT / static_config.CONFIG_FILE_NAME
    )
    current_values_dict = _deep_update(
        current_values_dict, read_yaml_config(yaml_config_path, logger_to_use)
    )

    if cli_args:
        mapped_cli_values: Dict[str, Any] = {}
        cli_arg_dict = vars(cli_args)
        if cli_arg_dict.get("log_file"):
            mapped_cli_values["log_file_path"] = Path(cli_arg_dict["log_file"])
        if cli_arg_dict.get("verbose"):
            mapped_cli_values["log_level"] = "DEBUG"
        current_values_dict = _deep_update(current_values_dict, mapped_cli_values)

    try:
        final_settings = AppSettings(**current_values_dict)
    except ValidationError as e:
        logger_to_use.error(f"Configuration validation failed: {e}")
        raise SystemExit(f"Configuration error: {e}") from e

    logger_to_use.debug("Successfully loaded and validated application settings")
    return final_settings


def resolve_log_path(app_settings: AppSettings) -> Path:
    """The transcript lives beside the entry script unless configured."""
    if app_settings.log_file_path:
        return Path(app_settings.log_file_path)
    return static_config.PROJECT_ROOT / app_settings.log_file_name
