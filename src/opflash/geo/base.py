"""Module with the optical geometry class used by the flash finder.

This class supports the storage of:
- The center of each optical channel
- The wire planes onto which flash barycenters are projected

It provides the queries needed to characterize a flash geometrically.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import numpy as np

__all__ = ["Geometry", "WirePlane"]


@dataclass
class WirePlane:
    """Class which holds the description of one wire plane.

    Wires lie in the transverse (y, z) plane. The wire coordinate of a point
    is measured along the direction perpendicular to the wires.

    Attributes
    ----------
    angle : float
        Angle of the wire direction with respect to the vertical (y) axis, in degrees
    pitch : float
        Distance between two consecutive wires in cm
    offset : float
        Wire coordinate of the first wire (index 0) in cm
    num_wires : int
        Number of wires in the plane
    """

    angle: float
    pitch: float
    offset: float
    num_wires: int

    def __post_init__(self):
        """Check that the plane description is sensible."""
        if self.pitch <= 0.0:
            raise ValueError(f"Wire pitch must be positive, got {self.pitch}.")
        if self.num_wires < 1:
            raise ValueError(
                f"A wire plane must contain at least one wire, got {self.num_wires}."
            )

    def coordinate(self, position: np.ndarray) -> float:
        """Projects a point onto the axis perpendicular to the wires.

        Parameters
        ----------
        position : np.ndarray
            (3,) Coordinates of the point

        Returns
        -------
        float
            Wire coordinate of the point in cm
        """
        theta = np.radians(self.angle)
        return position[2] * np.cos(theta) - position[1] * np.sin(theta)

    def nearest_wire(self, position: np.ndarray) -> int:
        """Index of the wire closest to a point.

        Parameters
        ----------
        position : np.ndarray
            (3,) Coordinates of the point

        Returns
        -------
        int
            Index of the nearest wire, clamped to the plane boundaries
        """
        wire = np.rint((self.coordinate(position) - self.offset) / self.pitch)
        return int(np.clip(wire, 0, self.num_wires - 1))


@dataclass
class Geometry:
    """Handles the geometry queries for a set of optical channels.

    Attributes
    ----------
    name : str
        Name of the detector
    tag : str
        Tag or label for the geometry instance
    version : str
        Version of the geometry
    positions : np.ndarray
        (N_c, 3) Location of the center of each optical channel
    planes : List[WirePlane]
        List of wire planes
    """

    name: str
    tag: Optional[str]
    version: Optional[str]
    positions: np.ndarray
    planes: List[WirePlane]

    def __init__(
        self,
        name: str,
        positions: List[List[float]],
        planes: Optional[List[Dict[str, Any]]] = None,
        tag: Optional[str] = None,
        version: Optional[str] = None,
    ):
        """Initialize the detector geometry.

        Parameters
        ----------
        name : str
            Name of the detector
        positions : List[List[float]]
            (N_c, 3) Location of the center of each optical channel, in cm
        planes : List[dict], optional
            List of wire plane configurations (see :class:`WirePlane`)
        tag : str, optional
            Tag or label for the geometry instance
        version : str, optional
            Version of the geometry
        """
        self.name = name
        self.tag = tag
        self.version = str(version) if version is not None else None

        # Parse the optical channel positions
        self.positions = np.asarray(positions, dtype=np.float64)
        if self.positions.ndim != 2 or self.positions.shape[1] != 3:
            raise ValueError(
                "The optical channel positions must be provided as an (N, 3) "
                f"array, got shape {self.positions.shape}."
            )

        # Parse the wire planes
        self.planes = []
        for plane in planes or []:
            self.planes.append(
                plane if isinstance(plane, WirePlane) else WirePlane(**plane)
            )

    @property
    def num_channels(self) -> int:
        """Number of optical channels, N_c."""
        return len(self.positions)

    @property
    def num_planes(self) -> int:
        """Number of wire planes."""
        return len(self.planes)

    def channel_center(self, channel: int) -> np.ndarray:
        """Location of the center of an optical channel.

        Parameters
        ----------
        channel : int
            Optical channel index

        Returns
        -------
        np.ndarray
            (3,) Center of the optical channel
        """
        if channel < 0 or channel >= self.num_channels:
            raise IndexError(
                f"Optical channel {channel} out of range "
                f"[0, {self.num_channels - 1}]."
            )

        return self.positions[channel]

    def nearest_wire(self, position: np.ndarray, plane: int) -> int:
        """Index of the wire of a plane closest to a position.

        Parameters
        ----------
        position : np.ndarray
            (3,) Coordinates of the point
        plane : int
            Index of the wire plane

        Returns
        -------
        int
            Index of the nearest wire
        """
        return self.planes[plane].nearest_wire(position)

    def is_valid_channel(self, channel: int) -> bool:
        """Checks whether a channel index belongs to this geometry.

        Parameters
        ----------
        channel : int
            Optical channel index

        Returns
        -------
        bool
            `True` if the channel index is in range
        """
        return 0 <= channel < self.num_channels
