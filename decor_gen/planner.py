"""Placement planner: pairs anchor structures and emits decoration descriptors.

Given the structures on a map tile and a seed, the planner picks pairs of
structures a decoration can span, offsets the anchor points to the facing
edges, and asks a decoration kind (see decor_gen.decorations) to fill in
the visual parameters.

Pipeline:
  1. Target count from [min_count, max_count], keyed off the seed.
  2. Deterministic pseudo-shuffle: each structure's sort key hashes the
     seed with the structure's own content, so the order depends only on
     the candidate *set* and the seed, never on the caller's list order.
  3. Walk adjacent pairs in shuffled order; keep pairs whose planar
     centre distance is inside [min_distance, max_distance].
  4. Anchor points sit on each structure's edge facing the other one.
  5. One descriptor per accepted pair, visual keys offset by the running
     output index.
  6. Stop at the target count or when max_attempts pairs were examined.

Short input is not an error: too few structures, no pair in band or an
exhausted budget just return fewer descriptors (possibly none).

Usage:
    from decor_gen.planner import plan_market_carpets

    carpets = plan_market_carpets(buildings, map_x=2, map_y=-1, session_seed=42)
    print(describe_batch(carpets, seed=42))
"""

from __future__ import annotations

import dataclasses
import logging
import struct
import zlib
from dataclasses import dataclass
from typing import Sequence

from decor_gen import decorations
from decor_gen.config import PlacementConstraints
from decor_gen.decorations import hanging_carpet, laundry_line
from decor_gen.descriptors import (
    AnchorCandidate,
    DrapedDecoration,
    HangingCarpet,
    LaundryLine,
)
from decor_gen.primitives import Vec3, planar_direction, planar_distance
from decor_gen.seeded import (
    combine_keys,
    derive_key,
    seeded_chance,
    seeded_random,
    tile_seed,
)

log = logging.getLogger(__name__)

# Spacing between the key blocks of consecutive decorations in a batch.
# Kinds use offsets below this (laundry goes up to +100).
KEY_STRIDE = 1000

# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AnchorPair:
    """An accepted pair of structures and the anchors hung between them.

    Attributes:
        first, second: The two structures, in walk order
        distance: Planar centre-to-centre distance (inside the band)
        start: Anchor on first's edge, facing second
        end: Anchor on second's edge, facing first
        walk_index: Position of `first` in the shuffled order
    """

    first: AnchorCandidate
    second: AnchorCandidate
    distance: float
    start: Vec3
    end: Vec3
    walk_index: int


# ---------------------------------------------------------------------------
# Shuffle & sampling helpers
# ---------------------------------------------------------------------------


def _candidate_content(c: AnchorCandidate) -> tuple:
    x, y, z = c.position
    return (
        float(x),
        float(y),
        float(z),
        float(c.size_scale),
        int(c.story_count),
        float(c.orientation),
    )


def _candidate_crc(c: AnchorCandidate) -> int:
    """Stable content hash of a structure (crc32 over packed fields)."""
    packed = struct.pack("<ddddqd", *_candidate_content(c))
    return zlib.crc32(packed) & 0xFFFFFFFF


def pseudo_shuffle(
    candidates: Sequence[AnchorCandidate], seed: int
) -> list[AnchorCandidate]:
    """Seeded reorder that ignores the input order.

    Sort key = seeded_random(seed, structure hash); exact ties (identical
    structures) fall back to the structure's content.
    """
    base = derive_key(seed, "shuffle")
    return sorted(
        candidates,
        key=lambda c: (
            seeded_random(combine_keys(base, _candidate_crc(c))),
            _candidate_content(c),
        ),
    )


def target_count(seed: int, constraints: PlacementConstraints) -> int:
    """Number of decorations to aim for, in [min_count, max_count]."""
    spread = constraints.max_count - constraints.min_count + 1
    n = constraints.min_count + int(seeded_random(seed) * spread)
    return min(n, constraints.max_count)


def _extent(c: AnchorCandidate, constraints: PlacementConstraints) -> float:
    return constraints.base_size * float(c.size_scale)


def _anchor_height(c: AnchorCandidate, constraints: PlacementConstraints) -> float:
    stories = max(int(c.story_count), 1)
    top = stories * constraints.story_height * constraints.height_fraction
    return float(c.position[1]) + top - constraints.roof_inset


def edge_anchors(
    a: AnchorCandidate,
    b: AnchorCandidate,
    constraints: PlacementConstraints,
) -> tuple[Vec3, Vec3] | None:
    """Anchor points on the facing edges of two structures.

    Each anchor is offset from its structure's centre toward the other
    structure by extent * edge_fraction. Returns None when the structures
    coincide or overlap so much that the anchors would cross.
    """
    distance = planar_distance(a.position, b.position)
    dir_x, dir_z = planar_direction(a.position, b.position)
    if distance == 0.0:
        return None

    off_a = _extent(a, constraints) * constraints.edge_fraction
    off_b = _extent(b, constraints) * constraints.edge_fraction
    if off_a + off_b >= distance:
        return None

    start = (
        float(a.position[0]) + dir_x * off_a,
        _anchor_height(a, constraints),
        float(a.position[2]) + dir_z * off_a,
    )
    end = (
        float(b.position[0]) - dir_x * off_b,
        _anchor_height(b, constraints),
        float(b.position[2]) - dir_z * off_b,
    )
    return start, end


# ---------------------------------------------------------------------------
# Planner
# ---------------------------------------------------------------------------


def plan_pairs(
    candidates: Sequence[AnchorCandidate],
    seed: int,
    constraints: PlacementConstraints | None = None,
) -> list[AnchorPair]:
    """Select structure pairs and their anchors (steps 1-4, 6).

    Bounded: at most max_attempts pairs are examined, so this always
    terminates, including for 0 or 1 candidates.
    """
    if constraints is None:
        constraints = PlacementConstraints()

    target = target_count(seed, constraints)
    shuffled = pseudo_shuffle(candidates, seed)
    density_key = derive_key(seed, "density")

    pairs: list[AnchorPair] = []
    attempts = 0
    for i in range(len(shuffled) - 1):
        if len(pairs) >= target or attempts >= constraints.max_attempts:
            break
        attempts += 1

        first, second = shuffled[i], shuffled[i + 1]
        distance = planar_distance(first.position, second.position)
        if distance < constraints.min_distance or distance > constraints.max_distance:
            continue

        if constraints.density < 1.0 and not seeded_chance(
            combine_keys(density_key, i), constraints.density
        ):
            continue

        anchors = edge_anchors(first, second, constraints)
        if anchors is None:
            continue

        start, end = anchors
        pairs.append(
            AnchorPair(
                first=first,
                second=second,
                distance=distance,
                start=start,
                end=end,
                walk_index=i,
            )
        )

    if len(pairs) < target:
        log.debug(
            "seed=%s: placed %d/%d after %d attempts (%d candidates)",
            seed,
            len(pairs),
            target,
            attempts,
            len(candidates),
        )
    return pairs


def plan(
    candidates: Sequence[AnchorCandidate],
    seed: int,
    constraints: PlacementConstraints | None = None,
    kind: str = "hanging_carpet",
    params: object | None = None,
    id_prefix: str | None = None,
) -> list[DrapedDecoration]:
    """Plan a batch of draped decorations of one kind.

    Args:
        candidates: Structures on the tile (read-only).
        seed: Batch seed. Same (candidates, seed, constraints) -> equal output.
        constraints: Pairing rules. Defaults to the kind's CONSTRAINTS.
        kind: Decoration kind name (see decorations.list_kinds()).
        params: The kind's Params instance. Defaults to Params().
        id_prefix: Descriptor ids are "{id_prefix}-{k}". Defaults to the
            kind name with dashes.

    Raises:
        KeyError: Unknown kind.
    """
    kind_mod = decorations.get(kind)
    if constraints is None:
        constraints = kind_mod.CONSTRAINTS
    if params is None:
        params = kind_mod.Params()
    if id_prefix is None:
        id_prefix = kind.replace("_", "-")

    pairs = plan_pairs(candidates, seed, constraints)
    batch = [
        kind_mod.generate(
            f"{id_prefix}-{k}",
            pair.start,
            pair.end,
            seed + KEY_STRIDE * (k + 1),
            params,
        )
        for k, pair in enumerate(pairs)
    ]

    if log.isEnabledFor(logging.DEBUG):
        log.debug("%s", describe_batch(batch, seed=seed))
    return batch


def plan_market_carpets(
    candidates: Sequence[AnchorCandidate],
    map_x: int,
    map_y: int,
    session_seed: int,
    constraints: PlacementConstraints | None = None,
    params: hanging_carpet.Params | None = None,
) -> list[HangingCarpet]:
    """Hanging carpets for one market tile (targets 4-5 by default)."""
    seed = tile_seed(map_x, map_y, session_seed, hanging_carpet.SEED_SALT)
    return plan(
        candidates,
        seed,
        constraints=constraints,
        kind="hanging_carpet",
        params=params,
        id_prefix=f"carpet-{map_x}-{map_y}",
    )


def plan_laundry_lines(
    candidates: Sequence[AnchorCandidate],
    map_x: int,
    map_y: int,
    session_seed: int,
    district: str | None = None,
    constraints: PlacementConstraints | None = None,
) -> list[LaundryLine]:
    """Laundry lines for one tile, with the district's palette and density."""
    params = laundry_line.params_for_district(district)
    if constraints is None:
        constraints = laundry_line.CONSTRAINTS
    constraints = dataclasses.replace(constraints, density=params.density)
    seed = tile_seed(map_x, map_y, session_seed, laundry_line.SEED_SALT)
    return plan(
        candidates,
        seed,
        constraints=constraints,
        kind="laundry_line",
        params=params,
        id_prefix=f"laundry-{map_x}-{map_y}",
    )


# ---------------------------------------------------------------------------
# Batch description & identity
# ---------------------------------------------------------------------------


def batch_id(seed: int | float) -> str:
    """Short hex identifier for a batch seed (6 chars). Floats truncate."""
    return f"{int(seed) & 0xFFFFFF:06x}"


def describe_decoration(d: DrapedDecoration) -> str:
    """One-line description of a decoration."""
    sx, sy, sz = d.start
    ex, ey, ez = d.end
    head = (
        f"{d.kind} {d.id} ({sx:+.2f}, {sy:.2f}, {sz:+.2f}) -> "
        f"({ex:+.2f}, {ey:.2f}, {ez:+.2f})  span={d.length:.2f} sag={d.sag:.2f}"
    )
    if isinstance(d, HangingCarpet):
        return (
            f"{head}  ({d.pattern.value}, {d.primary_color}/{d.secondary_color}, "
            f"width={d.width:.2f})"
        )
    if isinstance(d, LaundryLine):
        kinds = ", ".join(item.cloth_type.value for item in d.cloth_items)
        return f"{head}  ({len(d.cloth_items)} items: {kinds})"
    return head


def describe_batch(
    batch: Sequence[DrapedDecoration],
    seed: int | float | None = None,
) -> str:
    """Multi-line textual description of a batch.

    Example output:
        Batch #00f1a9 (seed=61865)  2 decorations
          [0] hanging_carpet carpet-0-0-0 (+1.75, 5.80, +0.00) -> ...
          [1] hanging_carpet carpet-0-0-1 ...
    """
    lines = []

    if seed is not None:
        header = f"Batch #{batch_id(seed)} (seed={seed})  {len(batch)} decorations"
    else:
        header = f"Batch  {len(batch)} decorations"
    lines.append(header)

    for i, d in enumerate(batch):
        lines.append(f"  [{i}] {describe_decoration(d)}")

    return "\n".join(lines)
