"""
cortexgraph v0.1.0

Configuration schema for cortexgraph.

Defines all available configuration parameters with defaults and validation.

Author: cortexgraph Development Team
License: MIT - See LICENSE
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml


logger = logging.getLogger(__name__)


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""
    pass


# Default configuration values
DEFAULT_CONFIG = {
    # ========================================================================
    # Binary Reader
    # ========================================================================
    'reader': {
        'max_name_length': 10000,  # Longer colour names are treated as corruption
        'strict_alphabet': True,  # Reject non-ACGT characters when packing k-mers
        'threaded': False,  # Decode records on a producer thread
        'prefetch_queue_size': 1024,  # Bounded hand-off queue for threaded streaming
    },

    # ========================================================================
    # Neighbour Derivation
    # ========================================================================
    'neighbors': {
        'colours': None,  # Colour indices whose edges are unioned (None = all)
    },

    # ========================================================================
    # Logging
    # ========================================================================
    'logging': {
        'level': 'INFO',
        'format': '%(asctime)s %(levelname)s %(name)s: %(message)s',
    },
}

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def load_config(config_path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file, merged over defaults.

    Args:
        config_path: Path to YAML configuration file (optional)

    Returns:
        Complete configuration dictionary

    Raises:
        FileNotFoundError: If config_path does not exist
        ConfigValidationError: If the file is not valid YAML
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path is None:
        return config

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, 'r') as f:
            user_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Invalid YAML in config file {config_path}: {e}")

    if user_config:
        if not isinstance(user_config, dict):
            raise ConfigValidationError(
                f"Config file {config_path} must contain a mapping, got {type(user_config).__name__}"
            )
        # Deep merge user config into defaults
        config = _deep_merge(config, user_config)

    logger.debug(f"Loaded configuration from {config_path}")
    return config


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Override dictionary

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def save_config_template(output_path: Union[str, Path]):
    """
    Save the default configuration to file.

    Args:
        output_path: Output file path
    """
    with open(output_path, 'w') as f:
        yaml.dump(DEFAULT_CONFIG, f, default_flow_style=False, sort_keys=False)


def _is_integer(value) -> bool:
    # YAML true/false load as bool, which is an int subclass
    return isinstance(value, int) and not isinstance(value, bool)


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration dictionary.

    Args:
        config: Configuration to validate

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    reader = config.get('reader', {})
    max_name_length = reader.get('max_name_length')
    if not _is_integer(max_name_length) or max_name_length < 0:
        errors.append(f"reader.max_name_length must be a non-negative integer, got {max_name_length!r}")

    queue_size = reader.get('prefetch_queue_size')
    if not _is_integer(queue_size) or queue_size < 1:
        errors.append(f"reader.prefetch_queue_size must be >= 1, got {queue_size!r}")

    for key in ('strict_alphabet', 'threaded'):
        if not isinstance(reader.get(key), bool):
            errors.append(f"reader.{key} must be true or false")

    colours = config.get('neighbors', {}).get('colours')
    if colours is not None:
        if not isinstance(colours, list) or not all(_is_integer(c) and c >= 0 for c in colours):
            errors.append("neighbors.colours must be null or a list of colour indices")

    level = str(config.get('logging', {}).get('level', 'INFO')).upper()
    if level not in VALID_LOG_LEVELS:
        errors.append(f"Invalid logging level: {level}")

    return errors

# cortexgraph v0.1.0
# Any usage is subject to this software's license.
