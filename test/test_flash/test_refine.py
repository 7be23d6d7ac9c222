"""Test that the refinement of coarse flashes works as intended."""

import pytest

from opflash.flash import (
    ClaimTable,
    RefinedCandidate,
    grow_candidate,
    refine_hits_in_flash,
)


class TestRefinedCandidate:
    """Test the window bookkeeping of a refined flash candidate."""

    def test_from_seed(self, make_hit):
        """Test that the window starts as the seed hit window."""
        candidate = RefinedCandidate.from_seed(3, make_hit(0, 10.0, 5.0, width=4.0))
        assert candidate.hit_ids == [3]
        assert candidate.pe == 5.0
        assert candidate.min_time == 8.0
        assert candidate.max_time == 12.0
        assert candidate.center == 10.0
        assert candidate.half_width == 2.0

    def test_compatible(self, make_hit):
        """Test the time overlap criterion."""
        candidate = RefinedCandidate.from_seed(0, make_hit(0, 10.0, 5.0, width=4.0))

        # Distance 4 against a tolerance of 1 x (2 + 2)
        assert candidate.is_compatible(make_hit(1, 14.0, width=4.0), 1.0)
        assert not candidate.is_compatible(make_hit(1, 14.1, width=4.0), 1.0)
        assert not candidate.is_compatible(make_hit(1, 14.0, width=4.0), 0.5)

    def test_add(self, make_hit):
        """Test that adding a hit widens the window."""
        candidate = RefinedCandidate.from_seed(0, make_hit(0, 10.0, 5.0, width=4.0))
        candidate.add(1, make_hit(1, 13.0, 2.0, width=4.0))
        assert candidate.hit_ids == [0, 1]
        assert candidate.pe == 7.0
        assert candidate.min_time == 8.0
        assert candidate.max_time == 15.0


def test_grow_chain(make_hit):
    """Test that growth follows a chain of overlapping hits."""
    # Each hit only overlaps with the window once the previous one was added
    hits = [make_hit(i, 4.0 * i, 10.0 - i, width=4.0) for i in range(4)]
    claims = ClaimTable(len(hits))
    candidate = RefinedCandidate.from_seed(0, hits[0])
    claims.claim([0], 0)

    added = grow_candidate(candidate, [0, 1, 2, 3], hits, claims, 1.0, 0)
    assert added == 3
    assert sorted(candidate.hit_ids) == [0, 1, 2, 3]
    assert claims.free(range(4)) == []


def test_grow_fixed_point(make_hit):
    """Test that growing a stable candidate again adds nothing."""
    hits = [
        make_hit(0, 0.0, 10.0),
        make_hit(1, 1.0, 5.0),
        make_hit(2, 50.0, 5.0),
    ]
    claims = ClaimTable(len(hits))
    candidate = RefinedCandidate.from_seed(0, hits[0])
    claims.claim([0], 0)

    grow_candidate(candidate, [0, 1, 2], hits, claims, 1.0, 0)
    hit_ids = list(candidate.hit_ids)
    window = (candidate.min_time, candidate.max_time)

    assert grow_candidate(candidate, [0, 1, 2], hits, claims, 1.0, 0) == 0
    assert candidate.hit_ids == hit_ids
    assert (candidate.min_time, candidate.max_time) == window


def test_refine_split(make_hit):
    """Test that a coarse flash with two distinct pulses of light is split."""
    hits = [
        make_hit(0, 0.0, 10.0),
        make_hit(1, 1.0, 5.0),
        make_hit(2, 30.0, 8.0),
        make_hit(3, 31.0, 4.0),
    ]
    refined = refine_hits_in_flash([0, 1, 2, 3], hits, 1.0, 10.0)
    assert refined == [[0, 1], [2, 3]]


def test_refine_discard_remainder(make_hit):
    """Test that hits which never reach threshold are dropped."""
    hits = [
        make_hit(0, 0.0, 10.0),
        make_hit(1, 1.0, 5.0),
        make_hit(2, 30.0, 3.0),
        make_hit(3, 31.0, 2.0),
    ]
    refined = refine_hits_in_flash([0, 1, 2, 3], hits, 1.0, 10.0)
    assert refined == [[0, 1]]


def test_refine_isolated_seed(make_hit):
    """Test that an isolated bright hit below threshold does not block others."""
    hits = [
        make_hit(0, 0.0, 6.0),
        make_hit(1, 30.0, 5.0),
        make_hit(2, 31.0, 5.0),
    ]
    refined = refine_hits_in_flash([0, 1, 2], hits, 1.0, 10.0)
    assert refined == [[1, 2]]


def test_refine_release_keeps_seed(make_hit):
    """Test that a failed seed is consumed while its companions are freed."""
    # The seed (hit 0) collects hit 1 but the pair is below threshold. Hit 1
    # is released and joins the group seeded by hit 2, which passes threshold.
    hits = [
        make_hit(0, 0.0, 5.0, width=8.0),
        make_hit(1, 3.0, 2.5, width=4.0),
        make_hit(2, 5.0, 4.0, width=4.0),
        make_hit(3, 5.5, 2.0, width=4.0),
    ]
    refined = refine_hits_in_flash([0, 1, 2, 3], hits, 0.5, 8.0)
    assert refined == [[2, 1, 3]]


@pytest.mark.parametrize("tolerance", [0.5, 1.0, 2.0])
def test_refine_threshold(make_hit, tolerance):
    """Test that every refined flash passes threshold and is exclusive."""
    hits = [make_hit(i % 8, 3.0 * i, 1.0 + (i % 5)) for i in range(20)]
    refined = refine_hits_in_flash(list(range(20)), hits, tolerance, 8.0)

    for hit_ids in refined:
        assert sum(hits[i].pe for i in hit_ids) >= 8.0

    used = [i for hit_ids in refined for i in hit_ids]
    assert len(used) == len(set(used))
