"""Test that the optical clock converts ticks into times."""

import pytest

from opflash.clock import OpticalClock


def test_clock_frame_ticks():
    """Test the number of ticks per frame."""
    assert OpticalClock().frame_ticks == 102400
    assert OpticalClock(tick_period=1.0, frame_period=100.0).frame_ticks == 100


def test_clock_frame():
    """Test the frame lookup."""
    clock = OpticalClock(frame_period=100.0)
    assert clock.frame(0.0) == 0
    assert clock.frame(99.9) == 0
    assert clock.frame(100.0) == 1
    assert clock.frame(-0.1) == -1


def test_clock_trigger_frame():
    """Test that the trigger frame contains the beam gate."""
    assert OpticalClock(frame_period=100.0, beam_gate_time=250.0).trigger_frame == 2


def test_clock_tick_to_time():
    """Test the tick to time conversions."""
    clock = OpticalClock(tick_period=0.5, frame_period=100.0, trigger_time=120.0)
    assert clock.tick_to_time(4, 10, 1) == pytest.approx(107.0)
    assert clock.tick_to_beam_time(4, 10, 1) == pytest.approx(-13.0)


@pytest.mark.parametrize("kwargs", [{"tick_period": 0.0}, {"frame_period": -1.0}])
def test_clock_invalid(kwargs):
    """Test that non-positive periods are rejected."""
    with pytest.raises(ValueError):
        OpticalClock(**kwargs)
