"""Input/output tools: hit and waveform readers, flash writers."""

from .factories import reader_factory, writer_factory
from .read import HitCSVReader, ReaderBase, WaveformHDF5Reader
from .write import CSVWriter
