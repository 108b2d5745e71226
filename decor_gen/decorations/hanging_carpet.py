"""Hanging carpet: a rug merchant's wares strung between market buildings.

Carpets are kept taut to show their pattern, so they sag less than
laundry. Colors come from a Damascus/Persian palette.

Parameters:
    sag_base:        Sag at zero span
    sag_per_length:  Extra sag per meter of span
    min_width:       Narrowest carpet (perpendicular to the rope), meters
    width_range:     Added width at the top of the roll
    primary:         Palette for the field color
    secondary:       Palette for the pattern color
    geometric_below: Pattern roll under this -> geometric
    medallion_below: Pattern roll under this -> medallion, else striped
"""

from dataclasses import dataclass
from functools import lru_cache

from decor_gen.catenary import derive_sag, span_length
from decor_gen.config import PlacementConstraints
from decor_gen.descriptors import HangingCarpet, PatternType, min_span_length
from decor_gen.primitives import CARPET_PRIMARY, CARPET_SECONDARY, Vec3, as_vec3
from decor_gen.seeded import seeded_choice, seeded_phase, seeded_random

SEED_SALT = 7777
CONSTRAINTS = PlacementConstraints()


@dataclass(frozen=True)
class Params:
    sag_base: float = 0.15
    sag_per_length: float = 0.03
    min_width: float = 2.0
    width_range: float = 1.5
    primary: tuple[str, ...] = CARPET_PRIMARY
    secondary: tuple[str, ...] = CARPET_SECONDARY
    geometric_below: float = 0.4
    medallion_below: float = 0.7


def _pattern_for(roll: float, params: Params) -> PatternType:
    if roll < params.geometric_below:
        return PatternType.GEOMETRIC
    if roll < params.medallion_below:
        return PatternType.MEDALLION
    return PatternType.STRIPED


@lru_cache(maxsize=256)
def generate(
    id: str,
    start: Vec3,
    end: Vec3,
    seed: int,
    params: Params = Params(),
) -> HangingCarpet:
    """Generate one carpet between two anchors (keys seed+0 .. seed+4)."""
    start = as_vec3(start)
    end = as_vec3(end)
    length = min_span_length(span_length(start, end))
    return HangingCarpet(
        id=id,
        start=start,
        end=end,
        length=length,
        sag=derive_sag(length, params.sag_base, params.sag_per_length),
        wind_phase=seeded_phase(seed + 4),
        primary_color=seeded_choice(seed, params.primary),
        secondary_color=seeded_choice(seed + 1, params.secondary),
        pattern=_pattern_for(seeded_random(seed + 2), params),
        width=params.min_width + seeded_random(seed + 3) * params.width_range,
    )


# ---------------------------------------------------------------------------
# Named variations
# ---------------------------------------------------------------------------

VARIATIONS: dict[str, Params] = {
    "market": Params(),
    "prayer rugs": Params(
        min_width=1.0,
        width_range=0.5,
        geometric_below=0.2,
        medallion_below=0.9,
    ),
    "striped kilims": Params(
        sag_base=0.25,
        geometric_below=0.1,
        medallion_below=0.2,
    ),
}
