"""Greedy assignment of hits to coarse flashes, largest candidate first."""

from typing import Iterable, List, Optional, Sequence, Tuple

from opflash.data import Hit

from .accumulator import Accumulator
from .claim import ClaimTable

__all__ = ["assign_hits_to_flashes", "rank_flagged_bins"]


def rank_flagged_bins(
    accumulators: Iterable[Accumulator],
) -> List[Tuple[float, Accumulator, int]]:
    """Orders the flagged bins of all accumulators by decreasing size.

    The order is total: bins are sorted by decreasing summed PE, then by
    increasing accumulator ID, then by increasing bin index.

    Parameters
    ----------
    accumulators : Iterable[Accumulator]
        Filled accumulators

    Returns
    -------
    List[Tuple[float, Accumulator, int]]
        (summed PE, accumulator, bin index) of each flagged bin
    """
    ranked = []
    for acc in accumulators:
        for index in acc.flagged:
            ranked.append((float(acc.binned_pe[index]), acc, index))

    ranked.sort(key=lambda item: (-item[0], item[1].id, item[2]))

    return ranked


def assign_hits_to_flashes(
    accumulators: Iterable[Accumulator],
    hits: Sequence[Hit],
    threshold: float,
    claims: Optional[ClaimTable] = None,
) -> List[List[int]]:
    """Claims hits into coarse flashes, walking from the largest bin down.

    For each flagged bin, the hits which have not been claimed by a larger
    flash yet form a candidate. If the candidate still reaches the flash
    threshold, it becomes a coarse flash and claims its hits. Otherwise it is
    dropped and its hits stay available to smaller bins.

    Parameters
    ----------
    accumulators : Iterable[Accumulator]
        Filled accumulators
    hits : Sequence[Hit]
        Hits of the frame, indexed by the accumulator contributors
    threshold : float
        Minimum number of PE of a flash
    claims : ClaimTable, optional
        Ownership table of the hits. If not provided, every hit starts free.

    Returns
    -------
    List[List[int]]
        List of hit indexes in each coarse flash
    """
    if claims is None:
        claims = ClaimTable(len(hits))

    hits_per_flash = []
    for _, acc, index in rank_flagged_bins(accumulators):
        # Only consider hits which were not claimed by a larger flash
        candidate = claims.free(acc.contributors[index])
        if not candidate:
            continue

        # Drop the candidate if contention left it below threshold
        if sum(hits[i].pe for i in candidate) < threshold:
            continue

        claims.claim(candidate, len(hits_per_flash))
        hits_per_flash.append(candidate)

    return hits_per_flash
