"""Main configuration loading functions.

This module provides the primary entry points for loading configurations:
- load_config(): Load from a YAML string
- load_config_file(): Load from a file path

A configuration may pull in other files through a top-level `include` key
(a path or a list of paths, resolved relative to the including file). The
included files are merged in order, then the including file is merged on top
of them, so that its own values always take precedence.
"""

import os
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigCycleError, ConfigIncludeError, ConfigTypeError
from .operations import deep_merge

__all__ = ["load_config", "load_config_file"]

INCLUDE_KEY = "include"


def _load_recursive(
    cfg_path: Optional[str] = None,
    config_string: Optional[str] = None,
    root_dir: Optional[str] = None,
    include_stack: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """Recursively load a configuration with cycle detection.

    Parameters
    ----------
    cfg_path : str, optional
        Path to configuration file (mutually exclusive with config_string)
    config_string : str, optional
        YAML configuration string (mutually exclusive with cfg_path)
    root_dir : str, optional
        Root directory for resolving relative include paths
    include_stack : List[str], optional
        Stack of currently-loading files (for cycle detection)

    Returns
    -------
    Dict[str, Any]
        Merged configuration
    """
    if (cfg_path is None) == (config_string is None):
        raise ValueError("Must provide exactly one of cfg_path or config_string")

    # Determine the identifier for cycle detection and root directory
    include_stack = include_stack or []
    if cfg_path is not None:
        cfg_path = os.path.abspath(cfg_path)
        if cfg_path in include_stack:
            raise ConfigCycleError(include_stack + [cfg_path])
        include_stack = include_stack + [cfg_path]
        root_dir = os.path.dirname(cfg_path)
    elif root_dir is None:
        root_dir = os.getcwd()

    # Load YAML
    try:
        if cfg_path is not None:
            with open(cfg_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        else:
            config = yaml.safe_load(config_string)
    except FileNotFoundError as exc:
        raise ConfigIncludeError(f"Configuration file not found: {cfg_path}") from exc
    except yaml.YAMLError as exc:
        source = cfg_path if cfg_path else "<string>"
        raise ConfigIncludeError(f"Error loading {source}: {exc}") from exc

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigTypeError(
            "Top level of a configuration must be a mapping, "
            f"got {type(config).__name__}"
        )

    # Process includes
    includes = config.pop(INCLUDE_KEY, [])
    if isinstance(includes, str):
        includes = [includes]

    merged = {}
    for include_file in includes:
        include_path = include_file
        if not os.path.isabs(include_path):
            include_path = os.path.join(root_dir, include_path)
        if not os.path.isfile(include_path):
            raise ConfigIncludeError(
                f"Included configuration file not found: {include_file} "
                f"(resolved to {include_path})"
            )

        included = _load_recursive(cfg_path=include_path, include_stack=include_stack)
        merged = deep_merge(merged, included)

    return deep_merge(merged, config)


def load_config(config_str: str, root_dir: Optional[str] = None) -> Dict[str, Any]:
    """Load a configuration from a YAML string.

    Parameters
    ----------
    config_str : str
        YAML configuration string
    root_dir : str, optional
        Root directory for resolving relative include paths. If not provided,
        defaults to the current working directory.

    Returns
    -------
    Dict[str, Any]
        Loaded and merged configuration

    Examples
    --------
    >>> cfg = load_config("flash:\\n  bin_width: 10\\n")
    >>> cfg["flash"]["bin_width"]
    10
    """
    return _load_recursive(config_string=config_str, root_dir=root_dir)


def load_config_file(cfg_path: str) -> Dict[str, Any]:
    """Load a configuration from a file.

    Parameters
    ----------
    cfg_path : str
        Path to configuration file

    Returns
    -------
    Dict[str, Any]
        Loaded and merged configuration
    """
    return _load_recursive(cfg_path=cfg_path)
