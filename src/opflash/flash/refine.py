"""Splits coarse flashes into time-compatible refined flashes.

Hits are assumed to be wider than the photon travel time across the
detector, so hits which belong to the same flash overlap in time. Within a
coarse flash:
  1. Start with the biggest remaining hit
  2. Collect any hit which overlaps with the current flash window
  3. Widen the window to include the collected hits
  4. Repeat until no new hit is collected
  5. Keep the group if it reaches threshold, then start over
"""

from dataclasses import dataclass, field
from typing import List, Sequence

from opflash.data import Hit

from .claim import ClaimTable

__all__ = ["RefinedCandidate", "grow_candidate", "refine_hits_in_flash"]


@dataclass
class RefinedCandidate:
    """Group of hits being grown around a seed hit.

    Attributes
    ----------
    hit_ids : List[int]
        Indexes of the hits in the group, the seed first
    pe : float
        Summed PE of the hits in the group
    min_time : float
        Lower bound of the time window covered by the hits
    max_time : float
        Upper bound of the time window covered by the hits
    """

    hit_ids: List[int] = field(default_factory=list)
    pe: float = 0.0
    min_time: float = 0.0
    max_time: float = 0.0

    @classmethod
    def from_seed(cls, hit_id: int, hit: Hit):
        """Start a group from a single seed hit."""
        half_width = 0.5 * hit.width
        return cls(
            hit_ids=[hit_id],
            pe=hit.pe,
            min_time=hit.peak_time - half_width,
            max_time=hit.peak_time + half_width,
        )

    def __len__(self):
        """Number of hits in the group."""
        return len(self.hit_ids)

    @property
    def center(self) -> float:
        """Center of the time window."""
        return 0.5 * (self.max_time + self.min_time)

    @property
    def half_width(self) -> float:
        """Half of the time window span."""
        return 0.5 * (self.max_time - self.min_time)

    def is_compatible(self, hit: Hit, width_tolerance: float) -> bool:
        """Whether a hit overlaps with the current time window.

        Parameters
        ----------
        hit : Hit
            Hit to test
        width_tolerance : float
            Scale factor applied to the sum of the hit and window half-widths

        Returns
        -------
        bool
            `True` if the hit peak is close enough to the window center
        """
        distance = abs(hit.peak_time - self.center)
        return distance <= width_tolerance * (0.5 * hit.width + self.half_width)

    def add(self, hit_id: int, hit: Hit):
        """Add a hit to the group and widen the window to cover it."""
        half_width = 0.5 * hit.width
        self.hit_ids.append(hit_id)
        self.pe += hit.pe
        self.max_time = max(self.max_time, hit.peak_time + half_width)
        self.min_time = min(self.min_time, hit.peak_time - half_width)


def grow_candidate(
    candidate: RefinedCandidate,
    ranked_ids: Sequence[int],
    hits: Sequence[Hit],
    claims: ClaimTable,
    width_tolerance: float,
    owner: int,
) -> int:
    """Collect compatible free hits into a candidate until nothing changes.

    Each pass scans every hit, largest first. The window widens as soon as a
    hit is accepted, which affects the rest of the same pass.

    Parameters
    ----------
    candidate : RefinedCandidate
        Group to grow
    ranked_ids : Sequence[int]
        Hit indexes ordered by decreasing PE
    hits : Sequence[Hit]
        Hits of the frame
    claims : ClaimTable
        Ownership table of the hits
    width_tolerance : float
        Scale factor applied to the sum of the hit and window half-widths
    owner : int
        Owner identifier given to the collected hits

    Returns
    -------
    int
        Number of hits added to the candidate
    """
    num_start = len(candidate)
    num_hits = -1
    while num_hits < len(candidate):
        num_hits = len(candidate)
        for hit_id in ranked_ids:
            if not claims.is_free(hit_id):
                continue
            if not candidate.is_compatible(hits[hit_id], width_tolerance):
                continue

            candidate.add(hit_id, hits[hit_id])
            claims.claim([hit_id], owner)

    return len(candidate) - num_start


def refine_hits_in_flash(
    hit_ids: Sequence[int],
    hits: Sequence[Hit],
    width_tolerance: float,
    threshold: float,
) -> List[List[int]]:
    """Split the hits of one coarse flash into refined flashes.

    A grown group which falls short of threshold releases all of its hits
    but the seed, which stays consumed so that the procedure terminates. The
    released hits may then join a later group.

    Parameters
    ----------
    hit_ids : Sequence[int]
        Indexes of the hits in the coarse flash
    hits : Sequence[Hit]
        Hits of the frame
    width_tolerance : float
        Scale factor applied to the sum of the hit and window half-widths
    threshold : float
        Minimum number of PE of a flash

    Returns
    -------
    List[List[int]]
        List of hit indexes in each refined flash
    """
    # Rank the hits by decreasing PE (ties keep their order in the coarse flash)
    ranked_ids = sorted(hit_ids, key=lambda i: -hits[i].pe)

    claims = ClaimTable(len(hits))
    refined, owner = [], 0
    while True:
        # Seed with the largest hit which has not been used yet
        seed = next((i for i in ranked_ids if claims.is_free(i)), None)
        if seed is None:
            return refined

        candidate = RefinedCandidate.from_seed(seed, hits[seed])
        claims.claim([seed], owner)
        grow_candidate(candidate, ranked_ids, hits, claims, width_tolerance, owner)

        # Keep the group if it is large enough, release its hits otherwise
        if candidate.pe >= threshold:
            refined.append(candidate.hit_ids)
        elif len(candidate) > 1:
            claims.release(candidate.hit_ids[1:])

        owner += 1
