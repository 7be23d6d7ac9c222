"""Module with a data class object which represents a reconstructed optical hit.

This copies the internal structure of :class:`recob::OpHit`.
"""

from dataclasses import dataclass

from .base import DataBase

__all__ = ["Hit"]


@dataclass(eq=False)
class Hit(DataBase):
    """Optical hit information (one reconstructed pulse on one channel).

    Hits are produced once by the hit constructor and are not modified
    afterwards; downstream stages refer to them by their index in the list
    of hits of the frame being processed.

    Attributes
    ----------
    id : int
        Index of the hit in the list
    channel : int
        Normalized optical channel index
    peak_time : float
        Peak time with respect to the trigger in microseconds
    peak_time_abs : float
        Peak time with respect to the electronics start in microseconds
    frame : int
        Frame number
    width : float
        Pulse duration in microseconds
    area : float
        Pedestal-subtracted pulse area in ADC x ticks
    amplitude : float
        Peak amplitude in ADC above pedestal
    pe : float
        Number of photoelectrons (amplitude over single PE amplitude)
    fast_to_total : float
        Fraction of the light in the prompt component
    """

    id: int = -1
    channel: int = -1
    peak_time: float = -1.0
    peak_time_abs: float = -1.0
    frame: int = -1
    width: float = -1.0
    area: float = -1.0
    amplitude: float = -1.0
    pe: float = -1.0
    fast_to_total: float = 0.0

    # Index attributes
    _index_attrs = ("id",)
