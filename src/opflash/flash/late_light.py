"""Removal of flashes consistent with the late light of an earlier flash.

The slow component of the argon scintillation light decays exponentially
with a time constant of ~1.6 us. A dim flash shortly after a bright one is
tested against the hypothesis that it is the tail of the bright one.
"""

from typing import List, Sequence, Tuple

import numba as nb
import numpy as np

from opflash.data import Flash

__all__ = [
    "LATE_LIGHT_TAU",
    "LATE_LIGHT_CUTOFF",
    "late_light_significance",
    "mark_late_light",
    "remove_late_light",
]

# Decay constant of the slow scintillation component (us)
LATE_LIGHT_TAU = 1.6

# Flashes less significant than this above the late light hypothesis are removed
LATE_LIGHT_CUTOFF = 3.0


@nb.njit(cache=True)
def late_light_significance(
    i_pe: nb.float64,
    i_time: nb.float64,
    i_width: nb.float64,
    j_pe: nb.float64,
    j_time: nb.float64,
    j_width: nb.float64,
) -> nb.float64:
    """Significance of flash j above the late light expected from flash i.

    Parameters
    ----------
    i_pe : float
        Total PE of the earlier flash
    i_time : float
        Time of the earlier flash
    i_width : float
        Time width of the earlier flash
    j_pe : float
        Total PE of the later flash
    j_time : float
        Time of the later flash
    j_width : float
        Time width of the later flash

    Returns
    -------
    float
        Number of standard deviations by which flash j exceeds the late
        light hypothesis. Infinite when the hypothesis is degenerate.
    """
    # Light cannot come from a flash which happened later
    if i_time > j_time:
        return 1e6

    # A zero-width parent or a vanishing hypothesis can never explain a flash
    if i_width <= 0.0:
        return np.inf
    hyp_pe = i_pe * j_width / i_width * np.exp(-(j_time - i_time) / LATE_LIGHT_TAU)
    if hyp_pe <= 0.0:
        return np.inf

    return (j_pe - hyp_pe) / np.sqrt(hyp_pe)


@nb.njit(cache=True)
def mark_late_light(
    times: nb.float64[:],
    pes: nb.float64[:],
    widths: nb.float64[:],
    cutoff: nb.float64,
) -> nb.boolean[:]:
    """Flags the flashes explained by the late light of an earlier flash.

    Every flash is tested against every earlier flash, including earlier
    flashes which were themselves flagged.

    Parameters
    ----------
    times : np.ndarray
        (F) Flash times, in increasing order
    pes : np.ndarray
        (F) Flash total PE
    widths : np.ndarray
        (F) Flash time widths
    cutoff : float
        Significance below which a flash is flagged

    Returns
    -------
    np.ndarray
        (F) Boolean mask of the flashes to remove
    """
    num_flashes = len(times)
    marked = np.zeros(num_flashes, dtype=np.bool_)
    for i in range(num_flashes):
        for j in range(i + 1, num_flashes):
            if marked[j]:
                continue

            significance = late_light_significance(
                pes[i], times[i], widths[i], pes[j], times[j], widths[j]
            )
            if significance < cutoff:
                marked[j] = True

    return marked


def remove_late_light(
    flashes: Sequence[Flash],
    assoc: Sequence[Sequence[int]],
    cutoff: float = LATE_LIGHT_CUTOFF,
) -> Tuple[List[Flash], List[Sequence[int]]]:
    """Sort the flashes of a frame in time and drop the late light.

    The flashes and their hit associations are permuted together, the removal
    decisions are all made before anything is removed.

    Parameters
    ----------
    flashes : Sequence[Flash]
        Flashes of one frame
    assoc : Sequence[Sequence[int]]
        Hit indexes of each flash
    cutoff : float, default 3.
        Significance below which a flash is removed

    Returns
    -------
    List[Flash]
        Surviving flashes, ordered in time
    List[Sequence[int]]
        Hit indexes of each surviving flash
    """
    assert len(flashes) == len(assoc), "Need one hit association per flash."
    if len(flashes) == 0:
        return [], []

    # Order the flashes and their associations in time
    perm = np.argsort([f.time for f in flashes], kind="stable")
    flashes = [flashes[i] for i in perm]
    assoc = [assoc[i] for i in perm]

    # Decide which flashes to remove, then remove them
    marked = mark_late_light(
        np.array([f.time for f in flashes], dtype=np.float64),
        np.array([f.total_pe for f in flashes], dtype=np.float64),
        np.array([f.time_width for f in flashes], dtype=np.float64),
        float(cutoff),
    )
    keep = np.where(~marked)[0]

    return [flashes[i] for i in keep], [assoc[i] for i in keep]
