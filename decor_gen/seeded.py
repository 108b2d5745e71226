"""Deterministic scalar generator: pure key -> [0, 1) mapping.

Every random decision in decoration layout is a pure function of an
integer (or real) key. There is no generator object to advance: callers
derive independent keys with explicit arithmetic off a base seed
(``seed + 1``, ``seed + 100 * index``, ...), so a decision can be
recomputed in isolation and skipping one branch never shifts another.

Goals:
    - Same key -> same value, on any platform, in any call order
    - Neighbouring keys are uncorrelated (64-bit avalanche mixer)
    - No wall clock, no OS entropy

Non-goals:
    - Cryptographic security

Usage:
    from decor_gen.seeded import seeded_random, seeded_choice

    r = seeded_random(seed + 2)
    color = seeded_choice(seed + 1, PALETTE)
"""

from __future__ import annotations

import math
import struct
import zlib
from typing import Sequence, TypeVar

T = TypeVar("T")

_MASK64 = 0xFFFFFFFFFFFFFFFF
_GOLDEN_GAMMA = 0x9E3779B97F4A7C15
_INV_2_53 = 1.0 / (1 << 53)

TWO_PI = 2.0 * math.pi


def _key_bits(key: int | float) -> int:
    """Canonical 64-bit pattern for a key.

    Integers (and floats holding an integral value) use two's complement,
    so ``7`` and ``7.0`` are the same key. Other reals use their IEEE-754
    bits.
    """
    if isinstance(key, float):
        if key.is_integer() and abs(key) < 2**63:
            return int(key) & _MASK64
        return struct.unpack("<Q", struct.pack("<d", key))[0]
    return int(key) & _MASK64


def _mix64(z: int) -> int:
    """splitmix64 finaliser: full avalanche over 64 bits."""
    z = (z + _GOLDEN_GAMMA) & _MASK64
    z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & _MASK64
    z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & _MASK64
    return z ^ (z >> 31)


def seeded_random(key: int | float) -> float:
    """Map a key to a reproducible float in [0, 1)."""
    return (_mix64(_key_bits(key)) >> 11) * _INV_2_53


def seeded_uniform(key: int | float, lo: float, hi: float) -> float:
    """Reproducible float in [lo, hi)."""
    return lo + (hi - lo) * seeded_random(key)


def seeded_index(key: int | float, n: int) -> int:
    """Reproducible index in [0, n). n must be positive."""
    if n <= 0:
        raise ValueError(f"seeded_index needs n > 0, got {n}")
    return min(int(seeded_random(key) * n), n - 1)


def seeded_choice(key: int | float, seq: Sequence[T]) -> T:
    """Reproducible pick from a non-empty sequence."""
    return seq[seeded_index(key, len(seq))]


def seeded_phase(key: int | float) -> float:
    """Reproducible angle in [0, 2*pi)."""
    return seeded_random(key) * TWO_PI


def seeded_chance(key: int | float, probability: float) -> bool:
    """True with the given probability, reproducibly."""
    return seeded_random(key) < probability


def combine_keys(*keys: int | float) -> int:
    """Fold several keys into one 64-bit key (order matters)."""
    h = 0
    for key in keys:
        h = _mix64(h ^ _key_bits(key))
    return h


def derive_key(seed: int, tag: str) -> int:
    """Stable sub-stream key for a named system.

    Uses crc32 (NEVER Python's built-in hash(), which is randomized per
    process).
    """
    crc = zlib.crc32(tag.encode("utf-8")) & 0xFFFFFFFF
    return (int(seed) ^ (crc << 16)) & _MASK64


def tile_seed(map_x: int, map_y: int, session_seed: int, salt: int = 0) -> int:
    """Composite seed for one map tile in one session."""
    return int(map_x) * 1000 + int(map_y) * 13 + int(session_seed) + int(salt)
