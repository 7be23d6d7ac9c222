"""Writers which store the reconstructed flashes to file."""

from .csv import *
