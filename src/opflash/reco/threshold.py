"""Fixed-threshold pulse finder."""

from typing import List, Optional

import numba as nb
import numpy as np

from opflash.data import Pulse

from .base import PulseRecoBase

__all__ = ["ThresholdPulseReco"]


class ThresholdPulseReco(PulseRecoBase):
    """Finds pulses as contiguous runs of samples above a fixed threshold.

    The pedestal is estimated as the mean of the first few samples of the
    waveform. A pulse opens on the first sample at or above `adc_threshold`
    above pedestal and closes on the first sample back below `end_threshold`.

    .. code-block:: yaml

        reco:
          name: threshold
          adc_threshold: 3.0
          num_baseline: 8
    """

    name = "threshold"

    def __init__(
        self,
        adc_threshold: float = 3.0,
        end_threshold: Optional[float] = None,
        num_baseline: int = 8,
    ):
        """Initialize the pulse finder.

        Parameters
        ----------
        adc_threshold : float, default 3.0
            Amplitude above pedestal (ADC) needed to open a pulse
        end_threshold : float, optional
            Amplitude above pedestal (ADC) below which a pulse is closed. If not
            specified, the opening threshold is used.
        num_baseline : int, default 8
            Number of leading samples used to estimate the pedestal
        """
        if num_baseline < 1:
            raise ValueError("Must use at least one sample to estimate the pedestal.")

        self.adc_threshold = adc_threshold
        self.end_threshold = (
            end_threshold if end_threshold is not None else adc_threshold
        )
        self.num_baseline = num_baseline

    def reco(self, adcs: np.ndarray) -> List[Pulse]:
        """Find the pulses in one waveform.

        Parameters
        ----------
        adcs : np.ndarray
            (S) ADC samples of the waveform

        Returns
        -------
        List[Pulse]
            List of pulses, ordered in time
        """
        adcs = np.asarray(adcs, dtype=np.float64)
        if len(adcs) == 0:
            return []

        pedestal = np.mean(adcs[: self.num_baseline])
        params = find_pulses(adcs - pedestal, self.adc_threshold, self.end_threshold)

        return [
            Pulse(
                peak=float(peak),
                area=float(area),
                t_start=float(t_start),
                t_end=float(t_end),
                t_max=float(t_max),
            )
            for peak, area, t_start, t_end, t_max in params
        ]


@nb.njit(cache=True)
def find_pulses(
    signal: nb.float64[:], threshold: nb.float64, end_threshold: nb.float64
) -> nb.float64[:, :]:
    """Scans a pedestal-subtracted waveform for pulses.

    Parameters
    ----------
    signal : np.ndarray
        (S) Pedestal-subtracted samples
    threshold : float
        Amplitude needed to open a pulse
    end_threshold : float
        Amplitude below which an open pulse is closed

    Returns
    -------
    np.ndarray
        (P, 5) Pulse parameters as (peak, area, t_start, t_end, t_max)
    """
    pulses = np.empty((len(signal), 5), dtype=np.float64)
    num_pulses = 0
    active = False
    start, t_max = 0, 0
    peak, area = 0.0, 0.0
    for i in range(len(signal)):
        value = signal[i]
        if not active:
            if value >= threshold:
                active = True
                start, t_max = i, i
                peak, area = value, value

        elif value < end_threshold:
            # The pulse ended on the previous sample
            pulses[num_pulses, 0] = peak
            pulses[num_pulses, 1] = area
            pulses[num_pulses, 2] = start
            pulses[num_pulses, 3] = i - 1
            pulses[num_pulses, 4] = t_max
            num_pulses += 1
            active = False

        else:
            area += value
            if value > peak:
                peak, t_max = value, i

    # Close a pulse still open at the end of the waveform
    if active:
        pulses[num_pulses, 0] = peak
        pulses[num_pulses, 1] = area
        pulses[num_pulses, 2] = start
        pulses[num_pulses, 3] = len(signal) - 1
        pulses[num_pulses, 4] = t_max
        num_pulses += 1

    return pulses[:num_pulses]
