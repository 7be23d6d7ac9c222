"""Time-binned PE accumulators used to find candidate flash regions.

Two accumulators with the same bin width are filled from the same stream of
hits, the second one shifted by half a bin. A burst of light which straddles
a bin boundary of the first accumulator falls entirely within one bin of the
second, so it is never split in two below threshold. The double counting this
introduces is resolved when hits are claimed by flashes.
"""

from typing import List

import numpy as np

__all__ = ["Accumulator", "DualAccumulator"]


class Accumulator:
    """Time-binned running sum of PE, with the list of hits in each bin.

    Attributes
    ----------
    id : int
        Identifier of the accumulator, used to break ties between bins
    bin_width : float
        Width of one bin, in the units of the times provided to :meth:`index`
    offset : float
        Shift applied to the times before binning
    threshold : float
        PE sum above which a bin is flagged as a flash candidate
    binned_pe : np.ndarray
        (B) Summed PE in each bin
    contributors : List[List[int]]
        (B) Indexes of the hits which contributed to each bin
    flagged : List[int]
        Bins which crossed threshold, in the order they crossed it
    """

    def __init__(
        self,
        num_bins: int,
        bin_width: float,
        threshold: float,
        offset: float = 0.0,
        id: int = 0,
    ):
        """Initialize an empty accumulator.

        Parameters
        ----------
        num_bins : int
            Number of bins
        bin_width : float
            Width of one bin
        threshold : float
            PE sum above which a bin is flagged as a flash candidate
        offset : float, default 0.
            Shift applied to the times before binning
        id : int, default 0
            Identifier of the accumulator
        """
        if bin_width <= 0:
            raise ValueError(f"The bin width must be positive, got {bin_width}.")

        self.id = id
        self.bin_width = bin_width
        self.offset = offset
        self.threshold = threshold
        self.binned_pe = np.zeros(num_bins, dtype=np.float64)
        self.contributors = [[] for _ in range(num_bins)]
        self.flagged = []

    def __len__(self):
        """Number of bins in the accumulator."""
        return len(self.binned_pe)

    def index(self, time: float, origin: float = 0.0) -> int:
        """Bin index of a given time.

        Parameters
        ----------
        time : float
            Time to bin
        origin : float, default 0.
            Time which corresponds to the lower edge of the first bin

        Returns
        -------
        int
            Bin index
        """
        return int(np.floor((time - origin + self.offset) / self.bin_width))

    def contains(self, index: int) -> bool:
        """Whether a bin index falls within the accumulator."""
        return 0 <= index < len(self.binned_pe)

    def fill(self, index: int, hit_id: int, pe: float):
        """Add one hit to a bin.

        The bin is flagged when this hit makes its sum cross the threshold from
        below. A flagged bin is never flagged again, even when further hits
        keep adding to it.

        Parameters
        ----------
        index : int
            Bin index
        hit_id : int
            Index of the hit
        pe : float
            Number of PE of the hit
        """
        if not self.contains(index):
            raise IndexError(
                f"Bin {index} outside of the accumulator range [0, {len(self) - 1}]."
            )

        self.contributors[index].append(hit_id)
        self.binned_pe[index] += pe

        total = self.binned_pe[index]
        if total >= self.threshold and total - pe < self.threshold:
            self.flagged.append(index)


class DualAccumulator:
    """Pair of accumulators, the second one shifted by half a bin width.

    Attributes
    ----------
    accumulators : List[Accumulator]
        The unshifted (id 1) and shifted (id 2) accumulators
    """

    def __init__(self, num_bins: int, bin_width: float, threshold: float):
        """Initialize the two accumulators.

        Parameters
        ----------
        num_bins : int
            Number of bins in each accumulator
        bin_width : float
            Width of one bin
        threshold : float
            PE sum above which a bin is flagged as a flash candidate
        """
        self.accumulators: List[Accumulator] = [
            Accumulator(num_bins, bin_width, threshold, offset=0.0, id=1),
            Accumulator(num_bins, bin_width, threshold, offset=bin_width / 2, id=2),
        ]

    def __iter__(self):
        """Iterate over the two accumulators."""
        return iter(self.accumulators)

    def contains(self, time: float, origin: float = 0.0) -> bool:
        """Whether a time falls within the range of both accumulators.

        Parameters
        ----------
        time : float
            Time to bin
        origin : float, default 0.
            Time which corresponds to the lower edge of the first bin

        Returns
        -------
        bool
            `True` if the time can be binned by both accumulators
        """
        return all(acc.contains(acc.index(time, origin)) for acc in self.accumulators)

    def fill(self, time: float, hit_id: int, pe: float, origin: float = 0.0):
        """Add one hit to both accumulators.

        Parameters
        ----------
        time : float
            Time of the hit
        hit_id : int
            Index of the hit
        pe : float
            Number of PE of the hit
        origin : float, default 0.
            Time which corresponds to the lower edge of the first bin
        """
        for acc in self.accumulators:
            acc.fill(acc.index(time, origin), hit_id, pe)
