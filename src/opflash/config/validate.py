"""Checks on the content of a loaded flash finder configuration.

The checks only cover the structure and the value ranges of the blocks. The
components built from each block still validate their own arguments.
"""

from numbers import Number
from typing import Any, Dict

from .errors import ConfigValidationError

__all__ = ["validate_config", "validate_flash_block"]

# Parameters of the `flash` block which must be strictly positive numbers
POSITIVE_KEYS = ("bin_width", "flash_threshold")

# Parameters of the `flash` block which must be non-negative numbers
NON_NEGATIVE_KEYS = ("hit_threshold", "width_tolerance", "trig_coinc", "frame_margin")

# Parameters of the `flash` block which must be integers
INTEGER_KEYS = ("bin_width", "frame_margin")

# Full list of parameters accepted in the `flash` block
FLASH_KEYS = (
    "bin_width",
    "hit_threshold",
    "flash_threshold",
    "width_tolerance",
    "trig_coinc",
    "frame_margin",
    "spe_size",
    "channel_map",
    "late_light_cutoff",
)


def _is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def validate_flash_block(flash: Dict[str, Any]):
    """Check the parameters of the `flash` block.

    Parameters
    ----------
    flash : Dict[str, Any]
        Flash finder configuration block

    Raises
    ------
    ConfigValidationError
        If a parameter is unknown, has the wrong type or is out of range
    """
    if not isinstance(flash, dict):
        raise ConfigValidationError(
            f"The `flash` block must be a mapping, got {type(flash).__name__}."
        )

    unknown = set(flash).difference(FLASH_KEYS)
    if unknown:
        raise ConfigValidationError(
            f"Unknown parameter(s) in the `flash` block: {sorted(unknown)}. "
            f"Accepted parameters: {list(FLASH_KEYS)}"
        )

    for key in POSITIVE_KEYS + NON_NEGATIVE_KEYS:
        if key not in flash:
            continue
        value = flash[key]
        if not _is_number(value):
            raise ConfigValidationError(
                f"`flash.{key}` must be a number, got {value!r}."
            )
        if key in INTEGER_KEYS and int(value) != value:
            raise ConfigValidationError(
                f"`flash.{key}` must be an integer, got {value!r}."
            )
        if key in POSITIVE_KEYS and value <= 0:
            raise ConfigValidationError(f"`flash.{key}` must be positive, got {value}.")
        if value < 0:
            raise ConfigValidationError(
                f"`flash.{key}` must not be negative, got {value}."
            )

    if "spe_size" in flash:
        spe_size = flash["spe_size"]
        values = spe_size if isinstance(spe_size, list) else [spe_size]
        if not values or not all(_is_number(v) and v > 0 for v in values):
            raise ConfigValidationError(
                "`flash.spe_size` must be a positive number or a list of "
                f"positive numbers, got {spe_size!r}."
            )

    channel_map = flash.get("channel_map")
    if channel_map is not None:
        if not isinstance(channel_map, dict):
            raise ConfigValidationError(
                "`flash.channel_map` must map device channels onto "
                f"normalized channels, got {type(channel_map).__name__}."
            )
        for key, value in channel_map.items():
            try:
                int(key), int(value)
            except (TypeError, ValueError) as exc:
                raise ConfigValidationError(
                    f"Invalid `flash.channel_map` entry: {key!r}: {value!r}."
                ) from exc


def validate_config(cfg: Dict[str, Any]):
    """Check the overall structure of a flash finder configuration.

    Parameters
    ----------
    cfg : Dict[str, Any]
        Full configuration dictionary

    Raises
    ------
    ConfigValidationError
        If a required block is missing or holds invalid values
    """
    if "io" not in cfg or not isinstance(cfg["io"], dict):
        raise ConfigValidationError("The configuration must contain an `io` block.")
    if "reader" not in cfg["io"]:
        raise ConfigValidationError("The `io` block must contain a `reader` block.")
    if not cfg.get("geo"):
        raise ConfigValidationError("The configuration must contain a `geo` block.")

    validate_flash_block(cfg.get("flash", {}) or {})
