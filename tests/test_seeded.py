"""Tests for the deterministic scalar generator."""

import math

import pytest

from decor_gen.seeded import (
    TWO_PI,
    combine_keys,
    derive_key,
    seeded_chance,
    seeded_choice,
    seeded_index,
    seeded_phase,
    seeded_random,
    seeded_uniform,
    tile_seed,
)


class TestSeededRandom:
    def test_same_key_same_value(self):
        for key in [0, 1, 42, -7, 2**40, 123456789]:
            assert seeded_random(key) == seeded_random(key)

    def test_range(self):
        for key in range(-500, 2000):
            r = seeded_random(key)
            assert 0.0 <= r < 1.0, f"key {key} -> {r}"

    def test_integral_float_is_same_key(self):
        assert seeded_random(7) == seeded_random(7.0)
        assert seeded_random(-3) == seeded_random(-3.0)

    def test_real_keys(self):
        r = seeded_random(0.5)
        assert 0.0 <= r < 1.0
        assert r == seeded_random(0.5)
        assert r != seeded_random(0.25)

    def test_neighbouring_keys_differ(self):
        values = [seeded_random(k) for k in range(1000)]
        assert len(set(values)) == len(values)

    def test_roughly_uniform(self):
        values = [seeded_random(k) for k in range(20000)]
        mean = sum(values) / len(values)
        assert 0.48 < mean < 0.52, f"mean {mean}"
        low = sum(1 for v in values if v < 0.1)
        assert 1700 < low < 2300, f"{low} values below 0.1"

    def test_call_order_irrelevant(self):
        forward = [seeded_random(k) for k in range(50)]
        backward = [seeded_random(k) for k in reversed(range(50))]
        assert forward == backward[::-1]


class TestDerivedHelpers:
    def test_uniform_bounds(self):
        for k in range(500):
            v = seeded_uniform(k, -2.0, 3.0)
            assert -2.0 <= v < 3.0

    def test_index_bounds(self):
        for k in range(500):
            assert 0 <= seeded_index(k, 6) < 6

    @pytest.mark.parametrize("n", [0, -1])
    def test_index_rejects_empty_range(self, n):
        with pytest.raises(ValueError):
            seeded_index(1, n)

    def test_choice_hits_every_item(self):
        items = ("a", "b", "c", "d")
        seen = {seeded_choice(k, items) for k in range(200)}
        assert seen == set(items)

    def test_phase_range(self):
        for k in range(500):
            assert 0.0 <= seeded_phase(k) < TWO_PI

    def test_chance_extremes(self):
        assert not any(seeded_chance(k, 0.0) for k in range(200))
        assert all(seeded_chance(k, 1.0) for k in range(200))

    def test_chance_rate(self):
        hits = sum(seeded_chance(k, 0.3) for k in range(10000))
        assert 2700 < hits < 3300


class TestKeys:
    def test_combine_is_deterministic(self):
        assert combine_keys(1, 2, 3) == combine_keys(1, 2, 3)

    def test_combine_order_matters(self):
        assert combine_keys(1, 2) != combine_keys(2, 1)

    def test_derive_key_stable_and_tagged(self):
        assert derive_key(42, "shuffle") == derive_key(42, "shuffle")
        assert derive_key(42, "shuffle") != derive_key(42, "density")
        assert derive_key(42, "shuffle") != derive_key(43, "shuffle")

    def test_tile_seed_formula(self):
        assert tile_seed(0, 0, 0) == 0
        assert tile_seed(2, 3, 100) == 2 * 1000 + 3 * 13 + 100
        assert tile_seed(-1, 0, 5, salt=7777) == -1000 + 5 + 7777

    def test_tile_seed_neighbours_differ(self):
        seeds = {tile_seed(x, y, 42) for x in range(-5, 6) for y in range(-5, 6)}
        assert len(seeds) == 121
        assert not math.isnan(seeded_random(tile_seed(3, -4, 42)))
