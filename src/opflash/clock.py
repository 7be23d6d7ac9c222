"""Optical readout clock, used to convert ticks into physical times.

Times are expressed in microseconds with respect to the start of the
electronics clock. The readout is organized in frames of fixed length; a
waveform starts at a given tick (`time_slice`) within its frame.
"""

from dataclasses import dataclass

import numpy as np

__all__ = ["OpticalClock"]


@dataclass
class OpticalClock:
    """Time service of the optical readout.

    Attributes
    ----------
    tick_period : float
        Duration of one optical tick in microseconds
    frame_period : float
        Duration of one readout frame in microseconds
    trigger_time : float
        Time of the trigger in microseconds
    beam_gate_time : float
        Time of the opening of the beam gate in microseconds
    """

    tick_period: float = 0.015625
    frame_period: float = 1600.0
    trigger_time: float = 0.0
    beam_gate_time: float = 0.0

    def __post_init__(self):
        """Check that the clock periods are sensible."""
        if self.tick_period <= 0.0 or self.frame_period <= 0.0:
            raise ValueError(
                "The tick and frame periods must be positive, got "
                f"{self.tick_period} and {self.frame_period}."
            )

    @property
    def frame_ticks(self) -> int:
        """Number of ticks in one frame."""
        return int(round(self.frame_period / self.tick_period))

    @property
    def trigger_frame(self) -> int:
        """Frame number containing the beam gate."""
        return self.frame(self.beam_gate_time)

    def frame(self, time: float) -> int:
        """Frame number which contains a given time.

        Parameters
        ----------
        time : float
            Time in microseconds

        Returns
        -------
        int
            Frame number
        """
        return int(np.floor(time / self.frame_period))

    def tick_to_time(self, tick: float, time_slice: int, frame: int) -> float:
        """Converts a tick within a waveform into an absolute time.

        Parameters
        ----------
        tick : float
            Tick relative to the waveform start
        time_slice : int
            Tick at which the waveform starts within its frame
        frame : int
            Frame number

        Returns
        -------
        float
            Time w.r.t. the electronics start in microseconds
        """
        return frame * self.frame_period + (time_slice + tick) * self.tick_period

    def tick_to_beam_time(self, tick: float, time_slice: int, frame: int) -> float:
        """Converts a tick within a waveform into a time w.r.t. the trigger.

        Parameters
        ----------
        tick : float
            Tick relative to the waveform start
        time_slice : int
            Tick at which the waveform starts within its frame
        frame : int
            Frame number

        Returns
        -------
        float
            Time w.r.t. the trigger in microseconds
        """
        return self.tick_to_time(tick, time_slice, frame) - self.trigger_time
