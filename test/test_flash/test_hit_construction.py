"""Test that pulses are converted into calibrated hits."""

import pytest

from opflash.clock import OpticalClock
from opflash.data import Pulse
from opflash.flash import construct_hit


@pytest.fixture(name="pulse")
def fixture_pulse():
    """A pulse of 40 ADC spanning 8 ticks."""
    return Pulse(peak=40.0, area=200.0, t_start=6.0, t_end=14.0, t_max=10.0)


def test_construct_hit(pulse, clock):
    """Test the calibration and the timing of a hit."""
    hit = construct_hit(pulse, 3, 100, 1, clock, 20.0, 3.0, hit_id=7)

    assert hit.id == 7
    assert hit.channel == 3
    assert hit.frame == 1
    assert hit.pe == pytest.approx(2.0)
    assert hit.amplitude == 40.0
    assert hit.area == 200.0
    assert hit.width == pytest.approx(8 * clock.tick_period)
    assert hit.peak_time_abs == pytest.approx(1600.0 + 110 * clock.tick_period)
    assert hit.peak_time == pytest.approx(hit.peak_time_abs)
    assert hit.fast_to_total == 0.0


def test_construct_hit_trigger(pulse):
    """Test that the relative time is measured from the trigger."""
    clock = OpticalClock(trigger_time=1600.0)
    hit = construct_hit(pulse, 0, 0, 1, clock, 20.0, 3.0)
    assert hit.peak_time == pytest.approx(10 * clock.tick_period)


def test_construct_hit_threshold(pulse, clock):
    """Test that pulses below threshold do not make hits."""
    assert construct_hit(pulse, 0, 0, 0, clock, 20.0, 40.1) is None
    assert construct_hit(pulse, 0, 0, 0, clock, 20.0, 40.0) is not None
