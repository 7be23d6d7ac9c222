"""Exceptions raised while building the flash finder configuration.

A configuration goes through three stages before it reaches the driver:
the YAML files are read and their `include:` lists resolved, the `--set`
overrides of the command line are applied, then the flash finder, geometry
and I/O blocks are checked. Each stage raises its own subclass of
:class:`ConfigError`, so that the command line can report all of them the
same way.
"""

from typing import List


class ConfigError(Exception):
    """Common parent of every flash finder configuration problem."""


class ConfigIncludeError(ConfigError):
    """A YAML file, or one of the files it includes, cannot be read."""


class ConfigCycleError(ConfigError):
    """A chain of `include:` statements leads back to one of its files.

    Attributes
    ----------
    cycle_path : List[str]
        Files visited along the include chain, the repeated file last
    """

    def __init__(self, cycle_path: List[str]):
        self.cycle_path = cycle_path
        super().__init__(
            "Configuration files include each other: " + " -> ".join(cycle_path)
        )


class ConfigPathError(ConfigError):
    """A configuration file, or a dotted key of an override, does not exist."""


class ConfigTypeError(ConfigError):
    """A YAML document or an overridden key does not hold a mapping."""


class ConfigValidationError(ConfigError):
    """The `flash`, `geo` or `io` block is missing or holds bad values."""
