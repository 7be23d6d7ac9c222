"""Construct a geometry class from a detector name or a geometry file."""

from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import yaml

from .base import Geometry

# Get config directory relative to this module
GEO_CONFIG_DIR = Path(__file__).parent / "config"

__all__ = ["geo_factory"]


def geo_dict() -> Dict[Path, Dict[str, str]]:
    """Builds a dictionary of the packaged geometry descriptions.

    Returns
    -------
    dict
        Dictionary which maps geometry files onto their (name, tag, version)
    """
    options = {}
    for path in GEO_CONFIG_DIR.glob("*/*_geometry.yaml"):
        with open(path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f)

        options[path] = {k: cfg.get(k) for k in ("name", "tag", "version")}
        options[path]["version"] = str(options[path]["version"])

    return options


def version_key(version: str) -> Tuple[int, int, str]:
    """Sorting key of a geometry version.

    Numerical versions are compared as integers and rank above any other
    version string, which are compared alphabetically.

    Parameters
    ----------
    version : str
        Geometry version

    Returns
    -------
    Tuple[int, int, str]
        Sorting key
    """
    if version.isdigit():
        return (1, int(version), version)

    return (0, 0, version)


def load_geometry_file(file_path: Union[str, Path]) -> Geometry:
    """Builds a geometry object from a YAML geometry description.

    Parameters
    ----------
    file_path : Union[str, Path]
        Path to the geometry YAML file

    Returns
    -------
    Geometry
        Initialized geometry object
    """
    with open(file_path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)

    return Geometry(**cfg)


def geo_factory(
    detector: Optional[str] = None,
    tag: Optional[str] = None,
    version: Optional[Union[str, int]] = None,
    file_path: Optional[str] = None,
    parent_path: Optional[str] = None,
) -> Geometry:
    """Instantiates a geometry from a packaged detector name or a file.

    Parameters
    ----------
    detector : str, optional
        Name of a packaged detector geometry (e.g. "toy")
    tag : str, optional
        Geometry tag, must match exactly if provided
    version : str, optional
        Geometry version, must match exactly if provided
    file_path : str, optional
        Path to a geometry YAML file (takes precedence over `detector`)
    parent_path : str, optional
        Directory against which a relative `file_path` is resolved

    Returns
    -------
    Geometry
         Initialized geometry object
    """
    # If an explicit file is provided, load it
    if file_path is not None:
        path = Path(file_path)
        if not path.is_absolute() and parent_path is not None:
            path = Path(parent_path) / path
        if not path.is_file():
            raise FileNotFoundError(f"Geometry file not found: {path}")

        return load_geometry_file(path)

    if detector is None:
        raise ValueError("Must provide either a `detector` name or a `file_path`.")

    # Find a packaged geometry that matches the requested parameters
    matches = []
    for path, cfg in geo_dict().items():
        if cfg["name"].lower() != detector.lower():
            continue
        if tag is not None and cfg["tag"] != tag:
            continue
        if version is not None and cfg["version"] != str(version):
            continue
        matches.append((cfg["version"], path))

    if not matches:
        raise ValueError(
            f"No geometry found for detector '{detector}' "
            f"(tag: {tag}, version: {version})."
        )

    # If several versions match, return the most recent one
    _, path = max(matches, key=lambda match: version_key(match[0]))

    return load_geometry_file(path)
