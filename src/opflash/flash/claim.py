"""Explicit ownership table of hits, shared by the greedy clustering passes."""

from typing import Iterable, List

import numpy as np

__all__ = ["ClaimTable"]


class ClaimTable:
    """Maps each hit index of a frame onto its owner (-1 if unclaimed).

    The owner is the index of the flash (or flash candidate) which holds
    exclusive claim on the hit. The first writer wins: claiming a hit which
    already has an owner leaves it untouched.

    Attributes
    ----------
    owners : np.ndarray
        (N) Owner of each hit, -1 if the hit is free
    """

    def __init__(self, num_hits: int):
        """Initialize a table in which every hit is free.

        Parameters
        ----------
        num_hits : int
            Number of hits in the frame
        """
        self.owners = np.full(num_hits, -1, dtype=np.int64)

    def __len__(self):
        """Number of hits tracked by the table."""
        return len(self.owners)

    def owner(self, hit_id: int) -> int:
        """Owner of a hit (-1 if it is free)."""
        return int(self.owners[hit_id])

    def is_free(self, hit_id: int) -> bool:
        """Whether a hit is not claimed by anybody."""
        return self.owners[hit_id] < 0

    def free(self, hit_ids: Iterable[int]) -> List[int]:
        """Subset of the provided hits which are not claimed yet, in order.

        Parameters
        ----------
        hit_ids : Iterable[int]
            Hit indexes

        Returns
        -------
        List[int]
            Hit indexes which are still free
        """
        return [i for i in hit_ids if self.owners[i] < 0]

    def claim(self, hit_ids: Iterable[int], owner: int):
        """Give ownership of the free hits among `hit_ids` to `owner`.

        Parameters
        ----------
        hit_ids : Iterable[int]
            Hit indexes
        owner : int
            Index of the claiming flash
        """
        for i in hit_ids:
            if self.owners[i] < 0:
                self.owners[i] = owner

    def release(self, hit_ids: Iterable[int]):
        """Make hits available again.

        Parameters
        ----------
        hit_ids : Iterable[int]
            Hit indexes
        """
        for i in hit_ids:
            self.owners[i] = -1

    def claimed_by(self, owner: int) -> np.ndarray:
        """Indexes of the hits owned by a given flash."""
        return np.where(self.owners == owner)[0]
