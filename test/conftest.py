"""Sets up fixtures general to the entire test suite of this package.

This file is read during the collection phase of pytest when running anything
inside this directory.
"""

import numpy as np
import pytest

from opflash.clock import OpticalClock
from opflash.data import Hit, Waveform
from opflash.geo import geo_factory


@pytest.fixture(name="geometry")
def fixture_geometry():
    """Loads the packaged toy geometry (8 channels, 3 wire planes)."""
    return geo_factory("toy")


@pytest.fixture(name="clock")
def fixture_clock():
    """Optical clock with the default readout parameters."""
    return OpticalClock()


@pytest.fixture(name="unit_clock")
def fixture_unit_clock():
    """Optical clock with one tick per microsecond.

    With this clock, a bin width of 10 ticks spans 10 time units, which
    makes hand-computed binning easy to follow.
    """
    return OpticalClock(tick_period=1.0, frame_period=10000.0)


def build_hit(
    channel=0, time=0.0, pe=1.0, width=4.0, frame=0, fast_to_total=0.0, id=-1
):
    """Builds a hit with consistent relative and absolute times.

    Parameters
    ----------
    channel : int, default 0
        Optical channel
    time : float, default 0.
        Peak time (relative and absolute)
    pe : float, default 1.
        Number of photoelectrons
    width : float, default 4.
        Pulse duration
    frame : int, default 0
        Frame number
    fast_to_total : float, default 0.
        Prompt light fraction
    id : int, default -1
        Hit index

    Returns
    -------
    Hit
        Hit object
    """
    return Hit(
        id=id,
        channel=channel,
        peak_time=time,
        peak_time_abs=time,
        frame=frame,
        width=width,
        area=10.0 * pe,
        amplitude=20.0 * pe,
        pe=pe,
        fast_to_total=fast_to_total,
    )


def build_waveform(channel, pulses, num_samples=200, time_slice=0, frame=0):
    """Builds a flat waveform with square pulses on top of a pedestal.

    Parameters
    ----------
    channel : int
        Device channel
    pulses : List[Tuple[int, int, int]]
        (start, length, amplitude) of each square pulse
    num_samples : int, default 200
        Number of samples
    time_slice : int, default 0
        Tick at which the waveform starts within its frame
    frame : int, default 0
        Frame number

    Returns
    -------
    Waveform
        Waveform object
    """
    adcs = np.full(num_samples, 2000, dtype=np.int16)
    for start, length, amplitude in pulses:
        adcs[start : start + length] += amplitude

    return Waveform(channel=channel, time_slice=time_slice, frame=frame, adcs=adcs)


@pytest.fixture(name="make_hit")
def fixture_make_hit():
    """Factory of hits, see :func:`build_hit`."""
    return build_hit


@pytest.fixture(name="make_waveform")
def fixture_make_waveform():
    """Factory of waveforms, see :func:`build_waveform`."""
    return build_waveform
