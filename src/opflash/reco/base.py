"""Contains the base class of all pulse reconstruction algorithms."""

from typing import List

import numpy as np

from opflash.data import Pulse

__all__ = ["PulseRecoBase"]


class PulseRecoBase:
    """Parent class of the pulse reconstruction algorithms.

    A pulse reconstruction algorithm takes the ADC samples of one optical
    waveform and returns the list of pulses found in it. Algorithms hold no
    per-waveform state, so a single instance may be shared between frames.
    """

    name = ""

    def __call__(self, adcs: np.ndarray) -> List[Pulse]:
        """Alias for :meth:`reco`."""
        return self.reco(adcs)

    def reco(self, adcs: np.ndarray) -> List[Pulse]:
        """Placeholder to be defined by the daughter class."""
        raise NotImplementedError
