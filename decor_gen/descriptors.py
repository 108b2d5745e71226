"""Decoration descriptors: frozen, renderer-agnostic records.

A descriptor carries everything a renderer needs to build meshes (anchor
points, curve parameters, per-attachment t/phase, chosen colors and
variants) so the renderer never re-derives any randomness.

Descriptors are frozen: anchors never move. Wind motion is a transient
per-frame offset computed by decor_gen.animation, never written back.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np

from decor_gen.catenary import (
    DEFAULT_SEGMENTS,
    MIN_SPAN,
    sample_point,
    sample_polyline,
)
from decor_gen.primitives import Vec3, planar_perpendicular


class PatternType(Enum):
    """Woven pattern on a hanging carpet."""

    GEOMETRIC = "geometric"
    MEDALLION = "medallion"
    STRIPED = "striped"


class ClothType(Enum):
    """Garment hung on a laundry line."""

    TUNIC = "tunic"
    SCARF = "scarf"
    SHEET = "sheet"
    CLOTH = "cloth"
    CHILD = "child"


@dataclass(frozen=True)
class AnchorCandidate:
    """A structure decorations can hang from (supplied by the world generator).

    Attributes:
        position: Footprint centre (x, y, z); y is ground level
        size_scale: Multiplier on the base horizontal extent
        story_count: Number of floors (sets roof height)
        orientation: Rotation about Y in radians
    """

    position: Vec3
    size_scale: float = 1.0
    story_count: int = 2
    orientation: float = 0.0


@dataclass(frozen=True)
class DrapedDecoration:
    """Common geometry of anything hung on a catenary between two anchors.

    Attributes:
        id: Unique within a generation batch
        start, end: Anchor points, fixed at creation
        length: Planar span (cached, floored at MIN_SPAN)
        sag: Curve shape parameter, strictly positive
        wind_phase: Shared phase so attachments move coherently
    """

    id: str
    start: Vec3
    end: Vec3
    length: float
    sag: float
    wind_phase: float

    kind = "draped"

    def __post_init__(self):
        if not self.id:
            raise ValueError("decoration id must be non-empty")
        if not self.length > 0:
            raise ValueError(f"{self.id}: length must be > 0, got {self.length}")
        if not self.sag > 0:
            raise ValueError(f"{self.id}: sag must be > 0, got {self.sag}")

    def point_at(self, t: float) -> Vec3:
        """Curve position at t in [0, 1]."""
        return sample_point(self.start, self.end, self.sag, t)

    def polyline(self, segments: int = DEFAULT_SEGMENTS) -> np.ndarray:
        """(segments+1, 3) array of curve samples for line rendering."""
        return sample_polyline(self.start, self.end, self.sag, segments)

    @property
    def midpoint(self) -> Vec3:
        """Midpoint of the anchor chord (used as the LOD reference point)."""
        return (
            (self.start[0] + self.end[0]) * 0.5,
            (self.start[1] + self.end[1]) * 0.5,
            (self.start[2] + self.end[2]) * 0.5,
        )

    @property
    def perpendicular(self) -> tuple[float, float]:
        """Unit planar normal to the span (wind pushes along this)."""
        return planar_perpendicular(self.start, self.end)


@dataclass(frozen=True)
class HangingCarpet(DrapedDecoration):
    """A patterned carpet displayed between two market buildings."""

    primary_color: str
    secondary_color: str
    pattern: PatternType
    width: float  # perpendicular to the suspension line

    kind = "hanging_carpet"


@dataclass(frozen=True)
class ClothItem:
    """One garment pegged to a laundry line.

    Attributes:
        cloth_type: Garment kind (sets size)
        t: Position along the line in [0, 1]
        color: CSS hex color
        size: (width, height) in meters
        sway_phase: Per-item phase offset for wind animation
        rotation: Baseline yaw in radians
    """

    cloth_type: ClothType
    t: float
    color: str
    size: tuple[float, float]
    sway_phase: float
    rotation: float

    def __post_init__(self):
        if not 0.0 <= self.t <= 1.0:
            raise ValueError(f"cloth item t must be in [0, 1], got {self.t}")


@dataclass(frozen=True)
class LaundryLine(DrapedDecoration):
    """A rope strung between buildings with garments drying on it."""

    cloth_items: tuple[ClothItem, ...]

    kind = "laundry_line"

    def item_position(self, item: ClothItem) -> Vec3:
        """Frozen base position of a garment (where its peg sits)."""
        return self.point_at(item.t)


@dataclass(frozen=True)
class AwningChoice:
    """A cloth awning: material pick plus fixed tilt and width."""

    striped: bool
    material_index: int
    tilt: float  # radians about X
    width_factor: float  # fraction of the facade width


@dataclass(frozen=True)
class NichePlacement:
    """A carved wall niche on one side of a building.

    Attributes:
        side: 0=front (+Z), 1=+X, 2=back (-Z), 3=-X
        lateral: Offset along the wall, as a fraction of building size
            (in [-0.25, 0.25))
        height: Offset from mid-height, as a fraction of building height
            (in [-0.1, 0.1))
    """

    side: int
    lateral: float
    height: float


@dataclass(frozen=True)
class MedallionPlacement:
    """A carved medallion; height is a fraction of building height above
    mid-height (in [0.15, 0.3)).
    """

    side: int
    height: float


@dataclass(frozen=True)
class OrnamentChoice:
    """Which facade ornaments a building shows, where, and their variants.

    Side indices: 0=front (+Z), 1=+X, 2=back (-Z), 3=-X.

    The door group (urns, potted plant, tile panel, lions) only appears on
    buildings with wealthy door ornaments; its variant fields are rolled
    regardless so they stay stable if the group is switched on.
    """

    ablaq_bands: bool = False
    muqarnas_corbels: bool = False
    niches: tuple[NichePlacement, ...] = ()
    medallions: tuple[MedallionPlacement, ...] = ()
    window_surround_sides: tuple[int, ...] = ()
    front_awning: AwningChoice | None = None
    rear_awning: AwningChoice | None = None
    roof_planters: bool = False

    door_ornaments: bool = False
    potted_plant: bool = False
    tile_panel: bool = False
    lion_sculptures: bool = False
    urn_variants: tuple[str, str] = ("vase", "vase")
    tile_pattern: str = "star8"
    lion_material: str = "stone"
    accent_color: str = ""

    @property
    def niche_sides(self) -> tuple[int, ...]:
        return tuple(n.side for n in self.niches)

    @property
    def medallion_sides(self) -> tuple[int, ...]:
        return tuple(m.side for m in self.medallions)


def min_span_length(length: float) -> float:
    """Floor a raw span so coincident anchors still give length > 0."""
    return max(float(length), MIN_SPAN)
