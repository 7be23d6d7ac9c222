"""Pulse reconstruction: turns optical waveforms into pulse descriptors."""

from .base import PulseRecoBase
from .factories import pulse_reco_factory
from .threshold import ThresholdPulseReco

__all__ = ["PulseRecoBase", "ThresholdPulseReco", "pulse_reco_factory"]
