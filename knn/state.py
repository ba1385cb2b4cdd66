"""
Configuration Management

This module loads and validates the optional JSON configuration file that
supplies defaults for the command line. Values given on the command line
always take precedence over the file, which takes precedence over
DEFAULT_CONFIG.

Example config.json:

    {
      "algo": "manhattan",
      "no_header": false,
      "log_level": "INFO",
      "predict": {"k": "1-5"},
      "search": {"k": "3-10,2", "test": 0.3}
    }
"""

import copy
import json
import logging
import os
from typing import Any, Dict

from knn.distance import DISTANCE_FUNCTIONS
from knn.kvalue import KValue


logger = logging.getLogger(__name__)


DEFAULT_CONFIG: Dict[str, Any] = {
    "algo": "euclidean",
    "no_header": False,
    "log_level": "WARNING",
    "predict": {
        "k": "3"
    },
    "search": {
        "k": "3-10",
        "test": 0.25
    }
}

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


def load_config(config_path: str) -> Dict:
    """
    Load configuration from a JSON file.

    Args:
        config_path (str): Path to the configuration file

    Returns:
        dict: Configuration dictionary

    Raises:
        FileNotFoundError: If config file does not exist
        json.JSONDecodeError: If config file is not valid JSON
        ValueError: If a configuration field has an invalid type or value
    """
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r') as f:
        config = json.load(f)

    _validate_config(config)

    return config


def merge_config(config: Dict) -> Dict:
    """Overlay a loaded configuration on top of DEFAULT_CONFIG."""
    merged = copy.deepcopy(DEFAULT_CONFIG)

    for key, value in config.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key].update(value)
        else:
            merged[key] = value

    return merged


def _validate_k(config: Dict, section: str) -> None:
    value = get_config_value(config, f"{section}.k")

    if value is None:
        return

    if not isinstance(value, str):
        raise ValueError(f"Configuration field '{section}.k' must be a string")

    try:
        KValue.parse(value)
    except ValueError as e:
        raise ValueError(f"Configuration field '{section}.k' is invalid: {e}")


def _validate_config(config: Dict) -> None:
    """
    Validate the types and values of the known configuration fields.

    Args:
        config (dict): Configuration dictionary to validate

    Raises:
        ValueError: If a field is invalid
    """
    if not isinstance(config, dict):
        raise ValueError("Configuration must be a JSON object")

    if 'algo' in config:
        if not isinstance(config['algo'], str):
            raise ValueError("Configuration field 'algo' must be a string")

        if config['algo'].strip().lower() not in DISTANCE_FUNCTIONS:
            raise ValueError(f"Configuration field 'algo' is not a known algorithm: {config['algo']}")

    if 'no_header' in config and not isinstance(config['no_header'], bool):
        raise ValueError("Configuration field 'no_header' must be a boolean")

    if 'log_level' in config:
        if not isinstance(config['log_level'], str) or config['log_level'].upper() not in LOG_LEVELS:
            raise ValueError(f"Configuration field 'log_level' must be one of {', '.join(LOG_LEVELS)}")

    for section in ('predict', 'search'):
        if section in config and not isinstance(config[section], dict):
            raise ValueError(f"'{section}' configuration must be a dictionary")

        _validate_k(config, section)

    test = get_config_value(config, 'search.test')

    if test is not None:
        # bool is a subclass of int
        if isinstance(test, bool) or not isinstance(test, (int, float)):
            raise ValueError("Configuration field 'search.test' must be a number")

        if not 0.0 <= test <= 1.0:
            raise ValueError("Configuration field 'search.test' must be between 0 and 1")

    unknown = set(config) - set(DEFAULT_CONFIG)

    if unknown:
        logger.warning(f"Ignoring unknown configuration fields: {sorted(unknown)}")


def get_config_value(config: Dict, key: str, default: Any = None) -> Any:
    """
    Get a configuration value with optional default.

    Args:
        config (dict): Configuration dictionary
        key (str): Configuration key (supports nested keys with dot notation)
        default: Default value if key is not found

    Returns:
        Configuration value or default

    Example:
        get_config_value(config, 'search.test', 0.25)
    """
    keys = key.split('.')
    value = config

    for k in keys:
        if isinstance(value, dict) and k in value:
            value = value[k]
        else:
            return default

    return value
