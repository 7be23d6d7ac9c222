"""Optical flash finding.

The flash finder processes each readout frame independently:
- `hit`: converts waveform pulses into calibrated hits
- `accumulator`: bins the hit PE in time (two half-bin shifted accumulators)
- `assign`: greedily claims hits into coarse flashes, largest bin first
- `refine`: splits coarse flashes into time-compatible groups of hits
- `build`: aggregates each group of hits into a flash
- `late_light`: removes flashes explained by the tail of an earlier flash
- `finder`: strings all of the above together, frame by frame
"""

from .accumulator import Accumulator, DualAccumulator
from .assign import assign_hits_to_flashes, rank_flagged_bins
from .build import build_flash, calculate_width
from .claim import ClaimTable
from .finder import FlashFinder, FlashFinderResult
from .hit import construct_hit
from .late_light import (
    LATE_LIGHT_CUTOFF,
    LATE_LIGHT_TAU,
    late_light_significance,
    mark_late_light,
    remove_late_light,
)
from .refine import RefinedCandidate, grow_candidate, refine_hits_in_flash
