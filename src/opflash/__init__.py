"""Optical flash finder.

Clusters the optical hits recorded by the photodetectors of a liquid argon
detector into flashes, one readout frame at a time.
"""

from .clock import OpticalClock
from .data import Flash, Hit, Pulse, Waveform
from .flash import FlashFinder, FlashFinderResult
from .geo import Geometry, geo_factory
from .version import __version__
