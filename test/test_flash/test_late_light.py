"""Test that the late light filter works as intended."""

import numpy as np
import pytest

from opflash.data import Flash
from opflash.flash import (
    LATE_LIGHT_TAU,
    late_light_significance,
    mark_late_light,
    remove_late_light,
)


def make_flash(time, pe, width=1.0):
    """Builds a bare flash with the attributes used by the filter."""
    return Flash(time=time, total_pe=pe, time_width=width)


def test_significance_value():
    """Test the significance against a hand computation."""
    hyp = 100.0 * np.exp(-5.0 / LATE_LIGHT_TAU)
    expected = (0.5 - hyp) / np.sqrt(hyp)
    assert late_light_significance(100.0, 0.0, 1.0, 0.5, 5.0, 1.0) == pytest.approx(
        expected
    )


def test_significance_width_ratio():
    """Test that the hypothesis scales with the width ratio."""
    narrow = late_light_significance(100.0, 0.0, 2.0, 5.0, 2.0, 1.0)
    wide = late_light_significance(100.0, 0.0, 1.0, 5.0, 2.0, 1.0)
    assert narrow > wide


def test_significance_reverse_order():
    """Test that a later flash cannot explain an earlier one."""
    assert late_light_significance(100.0, 5.0, 1.0, 0.5, 0.0, 1.0) == 1e6


def test_significance_degenerate_width():
    """Test that a zero-width parent never explains another flash."""
    assert late_light_significance(100.0, 0.0, 0.0, 0.5, 5.0, 1.0) == np.inf
    assert late_light_significance(100.0, 0.0, 1.0, 0.5, 5.0, 0.0) == np.inf


def test_significance_monotone():
    """Test that a larger time gap strictly increases the significance."""
    gaps = np.linspace(0.0, 20.0, 41)
    values = [late_light_significance(100.0, 0.0, 1.0, 5.0, g, 1.0) for g in gaps]
    assert np.all(np.diff(values) > 0)


def test_remove_scenario_c():
    """Test that a faint flash shortly after a bright one is removed."""
    flashes = [make_flash(0.0, 100.0), make_flash(5.0, 0.5)]
    kept, assoc = remove_late_light(flashes, [[0, 1], [2]])
    assert kept == [flashes[0]]
    assert assoc == [[0, 1]]


def test_remove_scenario_d():
    """Test that a bright flash shortly after another one is kept."""
    flashes = [make_flash(0.0, 100.0), make_flash(5.0, 50.0)]
    kept, assoc = remove_late_light(flashes, [[0, 1], [2]])
    assert kept == flashes
    assert assoc == [[0, 1], [2]]


def test_remove_sorts_in_time():
    """Test that flashes and associations are reordered together."""
    flashes = [make_flash(8.0, 60.0), make_flash(-3.0, 80.0), make_flash(50.0, 40.0)]
    kept, assoc = remove_late_light(flashes, [[0], [1], [2]])
    assert [f.time for f in kept] == [-3.0, 8.0, 50.0]
    assert assoc == [[1], [0], [2]]


def test_remove_by_removed_parent():
    """Test that a flash marked for removal can still explain a later one."""
    times = np.array([0.0, 5.0, 5.5])
    pes = np.array([100.0, 8.0, 10.0])
    widths = np.array([1.0, 1.0, 1.0])

    # Flash 2 is too bright to be late light of flash 0, but it is consistent
    # with the tail of flash 1, itself late light of flash 0
    assert late_light_significance(100.0, 0.0, 1.0, 8.0, 5.0, 1.0) < 3.0
    assert late_light_significance(100.0, 0.0, 1.0, 10.0, 5.5, 1.0) >= 3.0
    assert late_light_significance(8.0, 5.0, 1.0, 10.0, 5.5, 1.0) < 3.0

    marked = mark_late_light(times, pes, widths, 3.0)
    np.testing.assert_array_equal(marked, [False, True, True])


def test_remove_empty():
    """Test that an empty frame goes through the filter."""
    assert remove_late_light([], []) == ([], [])
