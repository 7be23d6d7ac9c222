"""Test that the greedy assignment of hits to coarse flashes works as intended."""

from opflash.flash import (
    Accumulator,
    ClaimTable,
    DualAccumulator,
    assign_hits_to_flashes,
    rank_flagged_bins,
)


def fill(dual, hits, origin=0.0):
    """Fills an accumulator pair with a list of hits."""
    for i, hit in enumerate(hits):
        dual.fill(hit.peak_time, i, hit.pe, origin=origin)


def test_rank_total_order():
    """Test that bins are ranked by PE, then accumulator ID, then bin index."""
    acc_a = Accumulator(5, 10.0, 1.0, id=1)
    acc_b = Accumulator(5, 10.0, 1.0, id=2)
    acc_a.fill(3, 0, 5.0)
    acc_a.fill(1, 1, 5.0)
    acc_b.fill(0, 2, 5.0)
    acc_b.fill(4, 3, 8.0)

    ranked = [(pe, acc.id, idx) for pe, acc, idx in rank_flagged_bins([acc_b, acc_a])]
    assert ranked == [(8.0, 2, 4), (5.0, 1, 1), (5.0, 1, 3), (5.0, 2, 0)]


def test_assign_single_flash(make_hit):
    """Test that two nearby hits form one coarse flash."""
    hits = [make_hit(0, 100.0, 5.0), make_hit(1, 102.0, 3.0)]
    dual = DualAccumulator(3, 10.0, 6.0)
    fill(dual, hits, origin=100.0)

    flashes = assign_hits_to_flashes(dual, hits, 6.0)
    assert len(flashes) == 1
    assert sorted(flashes[0]) == [0, 1]


def test_assign_below_threshold(make_hit):
    """Test that a lone dim hit does not make a flash."""
    hits = [make_hit(0, 0.0, 2.0)]
    dual = DualAccumulator(3, 10.0, 6.0)
    fill(dual, hits)

    assert assign_hits_to_flashes(dual, hits, 6.0) == []


def test_assign_exclusive(make_hit):
    """Test that no hit is claimed by two coarse flashes."""
    # Cluster straddling a bin boundary, plus a second, separate cluster
    hits = [
        make_hit(0, 8.0, 4.0),
        make_hit(1, 11.0, 4.0),
        make_hit(2, 12.0, 1.0),
        make_hit(3, 41.0, 7.0),
        make_hit(4, 42.0, 7.0),
    ]
    dual = DualAccumulator(6, 10.0, 6.0)
    fill(dual, hits)

    flashes = assign_hits_to_flashes(dual, hits, 6.0)
    claimed = [i for flash in flashes for i in flash]
    assert len(claimed) == len(set(claimed))

    # The largest bin is claimed first
    assert sorted(flashes[0]) == [3, 4]
    assert sorted(flashes[1]) == [0, 1, 2]

    # Every coarse flash passes threshold
    for flash in flashes:
        assert sum(hits[i].pe for i in flash) >= 6.0


def test_assign_contention(make_hit):
    """Test that a candidate left below threshold by contention is dropped."""
    # The shifted bin [5, 15) takes hits 0 and 1 first (PE 9). What is left of
    # the unshifted bin [10, 20) after that (hit 2, PE 3) is below threshold.
    hits = [make_hit(0, 6.0, 4.0), make_hit(1, 11.0, 5.0), make_hit(2, 16.0, 3.0)]
    dual = DualAccumulator(4, 10.0, 6.0)
    fill(dual, hits)

    flashes = assign_hits_to_flashes(dual, hits, 6.0)
    assert len(flashes) == 1
    assert sorted(flashes[0]) == [0, 1]


def test_assign_shared_claims(make_hit):
    """Test that hits already claimed by the caller are left alone."""
    hits = [make_hit(0, 1.0, 5.0), make_hit(1, 2.0, 5.0)]
    dual = DualAccumulator(2, 10.0, 6.0)
    fill(dual, hits)

    claims = ClaimTable(len(hits))
    claims.claim([1], 7)
    assert assign_hits_to_flashes(dual, hits, 6.0, claims) == []
    assert claims.owner(0) == -1
