"""
Centralized configuration for decoration generation.

All placement constraints and animation thresholds in one place. The
distance bands and update intervals are empirically tuned, not derived;
treat them as knobs.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field

from decor_gen.catenary import DEFAULT_SEGMENTS


@dataclass(frozen=True)
class PlacementConstraints:
    """Spatial rules and search budget for pairing anchor structures.

    Invalid combinations are programmer errors and raise ValueError here,
    at configuration time, never per decoration.
    """

    # Planar centre-to-centre distance band for an accepted pair
    min_distance: float = 8.0
    max_distance: float = 20.0

    # Target output count is drawn from [min_count, max_count]
    min_count: int = 4
    max_count: int = 5

    # Pairs examined before giving up
    max_attempts: int = 50

    # Structure geometry
    base_size: float = 3.5  # horizontal extent at size_scale=1.0
    edge_fraction: float = 0.5  # anchor offset from centre, in extents
    story_height: float = 3.0
    height_fraction: float = 1.0  # 1.0 = roof line
    roof_inset: float = 0.2  # hang slightly below the roof edge

    # Probability that an in-band pair is actually used (laundry density)
    density: float = 1.0

    def __post_init__(self):
        if self.min_distance < 0:
            raise ValueError(f"min_distance must be >= 0, got {self.min_distance}")
        if self.min_distance > self.max_distance:
            raise ValueError(
                f"min_distance ({self.min_distance}) > max_distance ({self.max_distance})"
            )
        if not 1 <= self.min_count <= self.max_count:
            raise ValueError(
                f"need 1 <= min_count <= max_count, got {self.min_count}..{self.max_count}"
            )
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.base_size <= 0 or self.story_height <= 0:
            raise ValueError("base_size and story_height must be > 0")
        if not 0.0 < self.density <= 1.0:
            raise ValueError(f"density must be in (0, 1], got {self.density}")


@dataclass(frozen=True)
class LodThresholds:
    """Distance bands for throttling per-frame animation.

    Near band (dist <= near_distance): recompute every frame.
    Far band (near < dist <= cull_distance): at most every far_interval s.
    Very far (dist > cull_distance): at most every very_far_interval s.
    """

    near_distance: float = 60.0
    cull_distance: float = 90.0
    far_interval: float = 0.2
    very_far_interval: float = 0.5

    def __post_init__(self):
        if not 0 <= self.near_distance <= self.cull_distance:
            raise ValueError(
                f"need 0 <= near_distance <= cull_distance, "
                f"got {self.near_distance}, {self.cull_distance}"
            )
        if not 0 <= self.far_interval <= self.very_far_interval:
            raise ValueError(
                f"need 0 <= far_interval <= very_far_interval, "
                f"got {self.far_interval}, {self.very_far_interval}"
            )

    @property
    def near_sq(self) -> float:
        return self.near_distance * self.near_distance

    @property
    def cull_sq(self) -> float:
        return self.cull_distance * self.cull_distance

    def interval_for(self, dist_sq: float) -> float:
        """Minimum seconds between recomputes at a squared camera distance."""
        if dist_sq <= self.near_sq:
            return 0.0
        if dist_sq <= self.cull_sq:
            return self.far_interval
        return self.very_far_interval


# Carpets are large and read from further away
CARPET_LOD = LodThresholds(near_distance=70.0, cull_distance=100.0)


@dataclass(frozen=True)
class CurveConfig:
    """Rendering resolution for draped curves."""

    segments: int = DEFAULT_SEGMENTS
    carpet_strip_segments: int = 16  # vertex columns along a carpet

    def __post_init__(self):
        if self.segments < 1 or self.carpet_strip_segments < 1:
            raise ValueError("segment counts must be >= 1")


@dataclass
class DecorConfig:
    """Complete decoration configuration."""

    carpets: PlacementConstraints = field(default_factory=PlacementConstraints)
    laundry: PlacementConstraints = field(
        default_factory=lambda: PlacementConstraints(
            min_distance=4.0,
            max_distance=12.0,
            min_count=2,
            max_count=6,
            height_fraction=0.65,
            roof_inset=0.0,
        )
    )
    cloth_lod: LodThresholds = field(default_factory=LodThresholds)
    carpet_lod: LodThresholds = CARPET_LOD
    curve: CurveConfig = field(default_factory=CurveConfig)

    # District names that get hanging carpets instead of laundry
    carpet_districts: tuple[str, ...] = ("MARKET",)
    # Also string laundry across carpet districts
    laundry_with_carpets: bool = False

    def to_flat_dict(self) -> dict:
        """
        Convert to flat dict for logging.

        Prefixes each section's keys with section name.
        Example: carpets.min_distance -> "carpets/min_distance"
        """
        result = {}
        for section_name, section in [
            ("carpets", self.carpets),
            ("laundry", self.laundry),
            ("cloth_lod", self.cloth_lod),
            ("carpet_lod", self.carpet_lod),
            ("curve", self.curve),
        ]:
            for key, value in asdict(section).items():
                result[f"{section_name}/{key}"] = value
        result["carpet_districts"] = ",".join(self.carpet_districts)
        result["laundry_with_carpets"] = self.laundry_with_carpets
        return result

    @classmethod
    def for_market(cls) -> DecorConfig:
        """Dense market street: more carpets, closer buildings."""
        return cls(
            carpets=PlacementConstraints(
                min_distance=6.0,
                max_distance=20.0,
                min_count=5,
                max_count=7,
            ),
            laundry_with_carpets=True,
        )

    @classmethod
    def for_preview(cls) -> DecorConfig:
        """Loose limits for the preview CLI's synthetic grid."""
        return cls(
            carpets=PlacementConstraints(min_distance=4.0, max_distance=25.0),
            laundry=PlacementConstraints(
                min_distance=3.0,
                max_distance=15.0,
                min_count=3,
                max_count=6,
                height_fraction=0.65,
                roof_inset=0.0,
            ),
        )
