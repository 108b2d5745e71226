"""Deterministic placement and wind animation of draped street decorations.

Hanging carpets and laundry lines are strung between pairs of buildings.
Every choice (which pairs, colors, patterns, garments, phases) is a pure
function of the tile coordinates and a session seed, so revisiting a tile
reproduces it exactly. Curves follow a closed-form catenary; wind motion
is a transient offset throttled by distance to the camera.

Usage:
    from decor_gen import AnchorCandidate, TileDecorations

    tiles = TileDecorations(session_seed=42)
    batch = tiles.enter_tile(3, -2, buildings, district="MARKET")
    for carpet in batch.carpets:
        points = carpet.polyline()       # (21, 3) curve samples

    tiles.frame(sim_time, camera_pos)   # once per rendered frame
"""

from decor_gen.animation import AnimationDriver, FrameStats, Offset
from decor_gen.config import DecorConfig, LodThresholds, PlacementConstraints
from decor_gen.descriptors import (
    AnchorCandidate,
    ClothItem,
    ClothType,
    HangingCarpet,
    LaundryLine,
    PatternType,
)
from decor_gen.ornaments import choose_ornaments
from decor_gen.planner import (
    describe_batch,
    plan,
    plan_laundry_lines,
    plan_market_carpets,
)
from decor_gen.tiles import DecorationBatch, TileDecorations

__all__ = [
    "AnchorCandidate",
    "AnimationDriver",
    "ClothItem",
    "ClothType",
    "DecorConfig",
    "DecorationBatch",
    "FrameStats",
    "HangingCarpet",
    "LaundryLine",
    "LodThresholds",
    "Offset",
    "PatternType",
    "PlacementConstraints",
    "TileDecorations",
    "choose_ornaments",
    "describe_batch",
    "plan",
    "plan_laundry_lines",
    "plan_market_carpets",
]
