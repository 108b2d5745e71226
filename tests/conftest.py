"""Shared fixtures: synthetic streets of anchor structures."""

import pytest

from decor_gen.descriptors import AnchorCandidate
from decor_gen.seeded import seeded_index, seeded_uniform


def make_street(seed: int = 0, grid: int = 4, spacing: float = 10.0):
    """Jittered grid of buildings, reproducible from the seed."""
    out = []
    for i in range(grid):
        for j in range(grid):
            k = seed + 100 * (i * grid + j)
            out.append(
                AnchorCandidate(
                    position=(
                        i * spacing + seeded_uniform(k, -2.0, 2.0),
                        0.0,
                        j * spacing + seeded_uniform(k + 1, -2.0, 2.0),
                    ),
                    size_scale=seeded_uniform(k + 2, 0.8, 1.2),
                    story_count=1 + seeded_index(k + 3, 3),
                )
            )
    return out


@pytest.fixture
def street():
    return make_street()


@pytest.fixture
def street_factory():
    """make_street itself, for tests that need several streets."""
    return make_street


@pytest.fixture
def pair():
    """The two-building example: 10 m apart along X."""
    return [
        AnchorCandidate(position=(0.0, 0.0, 0.0)),
        AnchorCandidate(position=(10.0, 0.0, 0.0)),
    ]
