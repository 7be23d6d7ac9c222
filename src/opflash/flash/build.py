"""Aggregates the hits of a refined flash into a flash record."""

from typing import Sequence, Union

import numpy as np

from opflash.data import Flash, Hit
from opflash.geo import Geometry

__all__ = ["build_flash", "calculate_width"]


def calculate_width(
    sum_values: Union[float, np.ndarray],
    sum_squares: Union[float, np.ndarray],
    sum_weights: float,
) -> Union[float, np.ndarray]:
    """Width of a weighted distribution from its accumulated sums.

    Parameters
    ----------
    sum_values : Union[float, np.ndarray]
        Weighted sum of the values
    sum_squares : Union[float, np.ndarray]
        Weighted sum of the squared values
    sum_weights : float
        Sum of the weights

    Returns
    -------
    Union[float, np.ndarray]
        Width of the distribution
    """
    return np.sqrt(sum_squares * sum_weights + sum_values**2) / sum_weights


def build_flash(
    hit_ids: Sequence[int],
    hits: Sequence[Hit],
    geometry: Geometry,
    trigger_frame: int,
    frame: int,
    trig_coinc: float,
    flash_id: int = -1,
) -> Flash:
    """Builds a flash from the hits that make it up.

    Times, fast-to-total ratio, transverse position and wire-plane
    projections are PE-weighted averages over the hits.

    Parameters
    ----------
    hit_ids : Sequence[int]
        Indexes of the hits in the flash
    hits : Sequence[Hit]
        Hits of the frame
    geometry : Geometry
        Optical geometry (channel positions and wire planes)
    trigger_frame : int
        Frame which contains the beam gate
    frame : int
        Frame of the flash
    trig_coinc : float
        Half-width of the trigger coincidence window in microseconds
    flash_id : int, default -1
        Index of the flash in the list

    Returns
    -------
    Flash
        Flash object
    """
    flash_hits = [hits[i] for i in hit_ids]
    pe = np.array([h.pe for h in flash_hits], dtype=np.float64)
    times = np.array([h.peak_time for h in flash_hits], dtype=np.float64)

    # Threshold gating upstream guarantees a strictly positive PE count
    total_pe = float(np.sum(pe))
    assert total_pe > 0.0, "Cannot build a flash with no light in it."

    # Timing information
    time = float(np.dot(times, pe) / total_pe)
    time_abs = float(np.dot([h.peak_time_abs for h in flash_hits], pe) / total_pe)
    fast_to_total = float(np.dot([h.fast_to_total for h in flash_hits], pe) / total_pe)
    time_width = float(np.max(times) - np.min(times)) / 2.0

    # Light yield in each channel
    channels = np.array([h.channel for h in flash_hits], dtype=np.int64)
    pe_per_ch = np.zeros(geometry.num_channels, dtype=np.float64)
    np.add.at(pe_per_ch, channels, pe)

    # Transverse barycenter and width
    positions = np.array([geometry.channel_center(c) for c in channels])
    transverse = positions[:, 1:]
    sum_pos = np.dot(pe, transverse)
    sum_pos2 = np.dot(pe, transverse**2)
    center = sum_pos / total_pe
    width = calculate_width(sum_pos, sum_pos2, total_pe)

    # Projections on each of the wire planes
    wire_centers = np.zeros(geometry.num_planes, dtype=np.float64)
    wire_widths = np.zeros(geometry.num_planes, dtype=np.float64)
    for p in range(geometry.num_planes):
        wires = np.array(
            [geometry.nearest_wire(pos, p) for pos in positions], dtype=np.float64
        )
        sum_w, sum_w2 = np.dot(pe, wires), np.dot(pe, wires**2)
        wire_centers[p] = sum_w / total_pe
        wire_widths[p] = calculate_width(sum_w, sum_w2, total_pe)

    return Flash(
        id=flash_id,
        frame=frame,
        in_beam_frame=bool(frame == trigger_frame),
        on_beam_time=bool(abs(time) < trig_coinc),
        time=time,
        time_width=time_width,
        time_abs=time_abs,
        total_pe=total_pe,
        fast_to_total=fast_to_total,
        pe_per_ch=pe_per_ch,
        center=center,
        width=width,
        wire_centers=wire_centers,
        wire_widths=wire_widths,
    )
