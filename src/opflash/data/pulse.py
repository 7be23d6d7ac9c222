"""Module with the data class objects consumed by pulse reconstruction."""

from dataclasses import dataclass

import numpy as np

from .base import DataBase

__all__ = ["Pulse", "Waveform"]


@dataclass(eq=False)
class Pulse(DataBase):
    """Pulse found in an optical waveform.

    Attributes
    ----------
    peak : float
        Maximum amplitude above pedestal in ADC
    area : float
        Pedestal-subtracted integral of the pulse in ADC x ticks
    t_start : float
        Tick at which the pulse starts, relative to the waveform start
    t_end : float
        Tick at which the pulse ends, relative to the waveform start
    t_max : float
        Tick of the pulse maximum, relative to the waveform start
    """

    peak: float = -1.0
    area: float = -1.0
    t_start: float = -1.0
    t_end: float = -1.0
    t_max: float = -1.0


@dataclass(eq=False)
class Waveform(DataBase):
    """Raw optical waveform readout on one channel.

    Attributes
    ----------
    channel : int
        Device (readout) channel number, before channel mapping
    time_slice : int
        Tick at which the waveform starts within its frame
    frame : int
        Frame number
    adcs : np.ndarray
        (S) ADC samples, in the integer type of the digitizer output
    """

    channel: int = -1
    time_slice: int = 0
    frame: int = -1
    adcs: np.ndarray = None

    # Variable-length attributes
    _var_length_attrs = (("adcs", np.int16),)
