"""Data structures used throughout the opflash package.

- `hit`: reconstructed optical hits (one pulse on one channel)
- `optical`: optical flashes (light-emission events)
- `pulse`: raw waveforms and the pulses found in them
"""

from .hit import *
from .optical import *
from .pulse import *
