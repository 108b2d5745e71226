"""Tests for the placement planner.

Validates that:
- Output is a pure function of (candidates, seed, constraints)
- Every accepted pair respects the centre-distance band
- The planner terminates on degenerate input
- Ids are unique and descriptors carry valid parameters
"""

import dataclasses
import logging

import pytest

from decor_gen.config import PlacementConstraints
from decor_gen.descriptors import AnchorCandidate, HangingCarpet, LaundryLine
from decor_gen.planner import (
    batch_id,
    describe_batch,
    edge_anchors,
    plan,
    plan_laundry_lines,
    plan_market_carpets,
    plan_pairs,
    pseudo_shuffle,
    target_count,
)
from decor_gen.primitives import CARPET_PRIMARY, CARPET_SECONDARY, planar_distance
from decor_gen.seeded import (
    combine_keys,
    derive_key,
    seeded_choice,
    seeded_phase,
    seeded_random,
)

SEEDS = range(0, 60)


# ---------------------------------------------------------------------------
# Example scenario
# ---------------------------------------------------------------------------


class TestTwoBuildings:
    def test_exactly_one_decoration(self, pair):
        batch = plan(pair, 42)
        assert len(batch) == 1
        assert isinstance(batch[0], HangingCarpet)

    def test_anchors_offset_inward_along_x(self, pair):
        (carpet,) = plan(pair, 42)
        xs = sorted([carpet.start[0], carpet.end[0]])
        assert xs == pytest.approx([1.75, 8.25])
        assert carpet.start[2] == 0.0 and carpet.end[2] == 0.0
        # two stories of 3 m, hung 0.2 m below the roof line
        assert carpet.start[1] == pytest.approx(5.8)
        assert carpet.end[1] == pytest.approx(5.8)
        assert carpet.length == pytest.approx(6.5)

    def test_rerun_is_identical(self, pair):
        a = plan(pair, 42)
        b = plan(list(pair), 42)
        assert a == b
        assert repr(a) == repr(b)
        assert describe_batch(a, seed=42) == describe_batch(b, seed=42)


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


class TestDeterminism:
    def test_same_seed_same_batch(self, street):
        for seed in SEEDS:
            assert plan(street, seed) == plan(street, seed)

    def test_caller_order_does_not_matter(self, street):
        for seed in SEEDS:
            assert plan(street, seed) == plan(list(reversed(street)), seed)

    def test_shuffle_is_a_permutation(self, street):
        shuffled = pseudo_shuffle(street, 7)
        assert sorted(shuffled, key=lambda c: c.position) == sorted(
            street, key=lambda c: c.position
        )

    def test_seeds_give_different_layouts(self, street):
        orders = {tuple(c.position for c in pseudo_shuffle(street, s)) for s in SEEDS}
        assert len(orders) > len(SEEDS) // 2


class TestDistanceBand:
    @pytest.mark.parametrize(
        "constraints",
        [
            PlacementConstraints(),
            PlacementConstraints(min_distance=4.0, max_distance=12.0, max_count=8),
            PlacementConstraints(min_distance=10.0, max_distance=15.0),
        ],
    )
    def test_pairs_inside_band(self, street, constraints):
        for seed in SEEDS:
            for p in plan_pairs(street, seed, constraints):
                d = planar_distance(p.first.position, p.second.position)
                assert d == pytest.approx(p.distance)
                assert constraints.min_distance <= d <= constraints.max_distance

    def test_span_shorter_than_centre_distance(self, street):
        for seed in SEEDS:
            for p in plan_pairs(street, seed):
                assert planar_distance(p.start, p.end) < p.distance


class TestTermination:
    @pytest.mark.parametrize("n", [0, 1])
    def test_too_few_candidates(self, n):
        cands = [AnchorCandidate(position=(0.0, 0.0, 0.0))][:n]
        assert plan(cands, 42) == []
        assert plan_pairs(cands, 42) == []

    def test_no_pair_in_band(self):
        far = [AnchorCandidate(position=(i * 100.0, 0.0, 0.0)) for i in range(10)]
        assert plan(far, 3) == []

    def test_all_too_close(self):
        near = [AnchorCandidate(position=(i * 0.5, 0.0, 0.0)) for i in range(10)]
        assert plan(near, 3) == []

    def test_attempt_budget(self, street):
        c = PlacementConstraints(min_distance=0.0, max_distance=1000.0, max_attempts=1)
        for seed in SEEDS:
            assert len(plan_pairs(street, seed, c)) <= 1


class TestCounts:
    def test_target_in_range(self):
        c = PlacementConstraints(min_count=2, max_count=6)
        seen = {target_count(s, c) for s in range(500)}
        assert seen == {2, 3, 4, 5, 6}

    def test_never_exceeds_target(self, street):
        c = PlacementConstraints(min_distance=0.0, max_distance=1000.0)
        for seed in SEEDS:
            assert len(plan(street, seed, c)) <= target_count(seed, c)

    def test_dense_street_reaches_target(self):
        # Every adjacent pair is in band, so the target is always reached
        row = [AnchorCandidate(position=(i * 10.0, 0.0, 0.0)) for i in range(12)]
        c = PlacementConstraints(min_distance=0.0, max_distance=1000.0)
        for seed in SEEDS:
            assert len(plan(row, seed, c)) == target_count(seed, c)


class TestEdgeAnchors:
    def test_coincident_structures(self):
        a = AnchorCandidate(position=(1.0, 0.0, 1.0))
        assert edge_anchors(a, a, PlacementConstraints()) is None

    def test_overlapping_structures(self):
        a = AnchorCandidate(position=(0.0, 0.0, 0.0))
        b = AnchorCandidate(position=(3.0, 0.0, 0.0))
        assert edge_anchors(a, b, PlacementConstraints()) is None

    def test_diagonal(self):
        a = AnchorCandidate(position=(0.0, 0.0, 0.0), story_count=1)
        b = AnchorCandidate(position=(6.0, 0.0, 8.0), story_count=3)
        start, end = edge_anchors(a, b, PlacementConstraints())
        assert start[0] == pytest.approx(0.6 * 1.75)
        assert start[2] == pytest.approx(0.8 * 1.75)
        assert end[0] == pytest.approx(6.0 - 0.6 * 1.75)
        assert start[1] == pytest.approx(2.8)
        assert end[1] == pytest.approx(8.8)


class TestBatches:
    def test_ids_unique(self, street):
        for seed in SEEDS:
            batch = plan(street, seed, PlacementConstraints(max_distance=30.0))
            ids = [d.id for d in batch]
            assert len(ids) == len(set(ids))

    def test_unknown_kind(self, street):
        with pytest.raises(KeyError):
            plan(street, 1, kind="fountain")

    def test_market_carpets(self, street):
        carpets = plan_market_carpets(street, 2, -1, session_seed=42)
        assert carpets == plan_market_carpets(street, 2, -1, session_seed=42)
        for c in carpets:
            assert isinstance(c, HangingCarpet)
            assert c.id.startswith("carpet-2--1-")

    def test_laundry_lines(self, street_factory):
        found = 0
        for session in range(40):
            street = street_factory(session, spacing=7.0)
            for line in plan_laundry_lines(street, 0, 0, session, district="HOVELS"):
                found += 1
                assert isinstance(line, LaundryLine)
                assert line.id.startswith("laundry-0-0-")
                assert all(0.0 <= item.t <= 1.0 for item in line.cloth_items)
        assert found > 0

    def test_laundry_density_thins_lines(self, street_factory):
        street = street_factory(3, spacing=7.0)
        dense = sum(
            len(plan_laundry_lines(street, x, 0, 1, district="HOVELS")) for x in range(40)
        )
        sparse = sum(
            len(plan_laundry_lines(street, x, 0, 1, district="WEALTHY")) for x in range(40)
        )
        assert dense > sparse

    def test_laundry_hangs_lower_than_carpets(self, pair):
        low = dataclasses.replace(
            PlacementConstraints(), height_fraction=0.65, roof_inset=0.0
        )
        (line,) = plan(pair, 42, kind="laundry_line", constraints=low)
        assert line.start[1] == pytest.approx(2 * 3.0 * 0.65)


class TestDescribe:
    def test_header(self, pair):
        batch = plan(pair, 42)
        text = describe_batch(batch, seed=42)
        lines = text.splitlines()
        assert lines[0] == f"Batch #{batch_id(42)} (seed=42)  1 decorations"
        assert "hanging_carpet" in lines[1]
        assert batch[0].id in lines[1]

    def test_empty(self):
        assert describe_batch([]) == "Batch  0 decorations"

    def test_batch_id(self):
        assert batch_id(42) == "00002a"
        assert len(batch_id(2**40 + 5)) == 6

    def test_float_seed_under_debug(self, pair, caplog):
        with caplog.at_level(logging.DEBUG, logger="decor_gen.planner"):
            batch = plan(pair, 42.5)
        assert len(batch) == 1
        assert f"Batch #{batch_id(42)} (seed=42.5)" in caplog.text
        assert batch_id(42.5) == batch_id(42)

    def test_float_seed_shortfall_log(self, caplog):
        lone = [AnchorCandidate(position=(0.0, 0.0, 0.0))]
        with caplog.at_level(logging.DEBUG, logger="decor_gen.planner"):
            assert plan_pairs(lone, 7.25) == []
        assert "seed=7.25: placed 0/" in caplog.text


class TestKeyDerivation:
    def test_visual_keys(self, pair):
        (carpet,) = plan(pair, 42)
        assert carpet.primary_color == seeded_choice(42 + 1000, CARPET_PRIMARY)
        assert carpet.secondary_color == seeded_choice(42 + 1001, CARPET_SECONDARY)

    def test_density_key(self, pair):
        half = dataclasses.replace(PlacementConstraints(), density=0.5)
        kept = 0
        for seed in SEEDS:
            roll = seeded_random(combine_keys(derive_key(seed, "density"), 0))
            placed = plan_pairs(pair, seed, half)
            assert len(placed) == (1 if roll < 0.5 else 0)
            kept += len(placed)
        assert 0 < kept < len(SEEDS)

    def test_garment_keys(self, pair):
        (line,) = plan(pair, 42, kind="laundry_line")
        key = 42 + 1000
        for i, item in enumerate(line.cloth_items):
            assert item.sway_phase == pytest.approx(seeded_phase(key + 40 + 2 * i))
            assert item.rotation == pytest.approx(
                (seeded_random(key + 41 + 2 * i) - 0.5) * 0.3
            )
