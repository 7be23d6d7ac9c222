"""Operations and utilities for configuration processing.

This module contains helper functions for:
- Merging dictionaries
- Parsing values
- Setting nested values using dot notation
"""

from copy import deepcopy
from typing import Any, Dict, List, Tuple

import yaml

from .errors import ConfigPathError, ConfigTypeError

__all__ = ["deep_merge", "parse_value", "set_nested_value", "apply_overrides"]


def deep_merge(
    base_dict: Dict[str, Any], override_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Recursively merge override_dict into base_dict.

    Parameters
    ----------
    base_dict : Dict[str, Any]
        Base dictionary
    override_dict : Dict[str, Any]
        Override dictionary

    Returns
    -------
    Dict[str, Any]
        Merged dictionary (new copy)
    """
    result = deepcopy(base_dict)

    for key, value in override_dict.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = deepcopy(value)

    return result


def parse_value(value_str: Any) -> Any:
    """Parse a string value into appropriate Python type.

    Parameters
    ----------
    value_str : Any
        Value to parse (if string, attempts YAML parsing)

    Returns
    -------
    Any
        Parsed value
    """
    if not isinstance(value_str, str):
        return value_str

    if value_str.strip() == "":
        return value_str

    try:
        return yaml.safe_load(value_str)
    except yaml.YAMLError:
        return value_str


def set_nested_value(
    config: Dict[str, Any],
    key_path: str,
    value: Any,
    delete: bool = False,
) -> Dict[str, Any]:
    """Set or delete a nested value using dot notation.

    Missing intermediate blocks are created when setting a value.

    Parameters
    ----------
    config : Dict[str, Any]
        Configuration dictionary
    key_path : str
        Dot-separated path (e.g., "flash.bin_width")
    value : Any
        Value to set (ignored if delete=True)
    delete : bool, default False
        If True, delete the key

    Returns
    -------
    Dict[str, Any]
        Modified configuration

    Raises
    ------
    ConfigPathError
        If the key path to delete does not exist
    ConfigTypeError
        If path traverses non-dict value
    """
    keys = key_path.split(".")
    current = config

    # Navigate to parent
    for i, key in enumerate(keys[:-1]):
        if key not in current:
            if delete:
                partial_path = ".".join(keys[: i + 1])
                raise ConfigPathError(
                    f"Cannot delete '{key_path}': path '{partial_path}' does not exist"
                )
            current[key] = {}
        elif not isinstance(current[key], dict):
            raise ConfigTypeError(
                f"Cannot set '{key_path}': '{key}' is not a dictionary"
            )
        current = current[key]

    # Set or delete the final key
    final_key = keys[-1]
    if delete:
        if final_key not in current:
            raise ConfigPathError(f"Cannot delete '{key_path}': key does not exist")
        del current[final_key]
    else:
        current[final_key] = value

    return config


def apply_overrides(config: Dict[str, Any], overrides: List[str]) -> Dict[str, Any]:
    """Apply a list of `key.path=value` overrides to a configuration.

    Parameters
    ----------
    config : Dict[str, Any]
        Configuration dictionary
    overrides : List[str]
        List of overrides, each in the form "key.path=value"

    Returns
    -------
    Dict[str, Any]
        Modified configuration
    """
    for override in overrides:
        key_path, value = split_override(override)
        config = set_nested_value(config, key_path, parse_value(value))

    return config


def split_override(override: str) -> Tuple[str, str]:
    """Split a `key.path=value` string into its key path and value string.

    Parameters
    ----------
    override : str
        Override string

    Returns
    -------
    Tuple[str, str]
        (key path, value string)
    """
    if "=" not in override:
        raise ValueError(
            f"Invalid override format: '{override}'. "
            "Expected format: 'key.path=value'"
        )

    key_path, value_str = override.split("=", 1)

    return key_path.strip(), value_str.strip()
