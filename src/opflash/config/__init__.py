"""Configuration loading system.

Supports:
- Hierarchical file includes (`include:`) with cycle detection
- Override semantics with dot-notation (`flash.bin_width=8`)
- Validation of the flash finder parameters

Main entry points are :func:`load_config` and :func:`load_config_file`.
"""

from .errors import (
    ConfigCycleError,
    ConfigError,
    ConfigIncludeError,
    ConfigPathError,
    ConfigTypeError,
    ConfigValidationError,
)
from .load import load_config, load_config_file
from .operations import (
    apply_overrides,
    deep_merge,
    parse_value,
    set_nested_value,
    split_override,
)
from .validate import validate_config, validate_flash_block

__all__ = [
    "load_config",
    "load_config_file",
    "apply_overrides",
    "deep_merge",
    "parse_value",
    "set_nested_value",
    "split_override",
    "validate_config",
    "validate_flash_block",
    "ConfigError",
    "ConfigIncludeError",
    "ConfigCycleError",
    "ConfigPathError",
    "ConfigTypeError",
    "ConfigValidationError",
]
