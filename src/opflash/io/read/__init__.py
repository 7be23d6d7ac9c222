"""Readers which load optical data products from files.

- `HitCSVReader`: reconstructed optical hits stored in CSV files
- `WaveformHDF5Reader`: raw optical waveforms stored in HDF5 files
"""

from .base import *
from .csv import *
from .hdf5 import *
