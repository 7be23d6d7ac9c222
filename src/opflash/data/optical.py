"""Module with a data class object which represents optical information.

This copies the internal structure of :class:`recob::OpFlash`.
"""

from dataclasses import dataclass

import numpy as np

from .base import DataBase

__all__ = ["Flash"]


@dataclass(eq=False)
class Flash(DataBase):
    """Optical flash information.

    Attributes
    ----------
    id : int
        Index of the flash in the list
    frame : int
        Frame number
    in_beam_frame : bool
        Whether the flash is in the beam frame
    on_beam_time : bool
        Whether the flash time is consistent with the beam window
    time : float
        Time with respect to the trigger in microseconds
    time_width : float
        Width of the flash in microseconds
    time_abs : float
        Time with respect to the electronics start in microseconds
    total_pe : float
        Total number of PE in the flash
    fast_to_total : float
        Fraction of the total PE contributed by the fast component
    pe_per_ch : np.ndarray
        (N) Fixed-length array of the number of PE per optical channel
    center : np.ndarray
        (2) Barycenter of the flash along the transverse (y, z) axes
    width : np.ndarray
        (2) Spatial width of the flash along the transverse (y, z) axes
    wire_centers : np.ndarray
        (P) Barycenter of the flash projected on each wire plane (wire index)
    wire_widths : np.ndarray
        (P) Width of the flash projected on each wire plane (wire index)
    """

    id: int = -1
    frame: int = -1
    in_beam_frame: bool = False
    on_beam_time: bool = False
    time: float = -1.0
    time_width: float = -1.0
    time_abs: float = -1.0
    total_pe: float = -1.0
    fast_to_total: float = -1.0
    pe_per_ch: np.ndarray = None
    center: np.ndarray = None
    width: np.ndarray = None
    wire_centers: np.ndarray = None
    wire_widths: np.ndarray = None

    # Fixed-length attributes
    _fixed_length_attrs = (("center", 2), ("width", 2))

    # Variable-length attributes
    _var_length_attrs = (
        ("pe_per_ch", np.float64),
        ("wire_centers", np.float64),
        ("wire_widths", np.float64),
    )

    # Attributes specifying coordinates
    _pos_attrs = ("center",)

    # Attributes specifying vector components
    _vec_attrs = ("width",)

    # Index attributes
    _index_attrs = ("id",)

    # Only the transverse coordinates are measured by the optical system
    _axes = ("y", "z")
