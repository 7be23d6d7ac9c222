"""Builds optical hits from reconstructed pulses."""

from typing import Optional

from opflash.clock import OpticalClock
from opflash.data import Hit, Pulse

__all__ = ["construct_hit"]


def construct_hit(
    pulse: Pulse,
    channel: int,
    time_slice: int,
    frame: int,
    clock: OpticalClock,
    spe_size: float,
    hit_threshold: float,
    hit_id: int = -1,
) -> Optional[Hit]:
    """Converts one pulse into a calibrated hit.

    Parameters
    ----------
    pulse : Pulse
        Pulse found in the waveform of this channel
    channel : int
        Normalized optical channel index
    time_slice : int
        Tick at which the waveform starts within its frame
    frame : int
        Frame number
    clock : OpticalClock
        Optical clock used to convert ticks into times
    spe_size : float
        Amplitude of a single photoelectron on this channel, in ADC
    hit_threshold : float
        Minimum pulse amplitude (ADC) to produce a hit
    hit_id : int, default -1
        Index of the hit in the list of hits of the frame

    Returns
    -------
    Hit
        Calibrated hit, or `None` if the pulse is below threshold
    """
    if pulse.peak < hit_threshold:
        return None

    return Hit(
        id=hit_id,
        channel=channel,
        peak_time=clock.tick_to_beam_time(pulse.t_max, time_slice, frame),
        peak_time_abs=clock.tick_to_time(pulse.t_max, time_slice, frame),
        frame=frame,
        width=(pulse.t_end - pulse.t_start) * clock.tick_period,
        area=pulse.area,
        amplitude=pulse.peak,
        pe=pulse.peak / spe_size,
        fast_to_total=0.0,
    )
