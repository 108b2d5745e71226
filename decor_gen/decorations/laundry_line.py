"""Laundry line: a rope between houses with garments pegged along it.

Items are evenly spaced along the rope. Each district has its own palette
and density (poorer quarters hang far more washing than wealthy ones);
those presets live in VARIATIONS, keyed by district name.

Parameters:
    sag_base:        Sag at zero span (natural rope slack)
    sag_per_length:  Extra sag per meter of span
    min_items:       Fewest garments on a line
    max_items:       Most garments on a line
    colors:          District garment palette
    density:         Fraction of in-band building pairs that get a line
"""

from dataclasses import dataclass
from functools import lru_cache

from decor_gen import primitives as pal
from decor_gen.catenary import derive_sag, span_length
from decor_gen.config import PlacementConstraints
from decor_gen.descriptors import ClothItem, ClothType, LaundryLine, min_span_length
from decor_gen.primitives import Vec3, as_vec3
from decor_gen.seeded import seeded_choice, seeded_phase, seeded_random

SEED_SALT = 4242
CONSTRAINTS = PlacementConstraints(
    min_distance=4.0,
    max_distance=12.0,
    min_count=2,
    max_count=6,
    height_fraction=0.65,
    roof_inset=0.0,
)

CLOTH_SIZES: dict[ClothType, tuple[float, float]] = {
    ClothType.TUNIC: (0.8, 1.2),
    ClothType.SCARF: (0.6, 0.6),
    ClothType.SHEET: (1.2, 1.4),
    ClothType.CLOTH: (0.5, 0.7),
    ClothType.CHILD: (0.5, 0.8),
}

_CLOTH_TYPES = tuple(ClothType)


@dataclass(frozen=True)
class Params:
    sag_base: float = 0.3
    sag_per_length: float = 0.05
    min_items: int = 3
    max_items: int = 7
    colors: tuple[str, ...] = pal.CLOTH_RESIDENTIAL
    density: float = 0.4


def make_cloth_item(cloth_type: ClothType, t: float, color: str, seed: int) -> ClothItem:
    """One garment; its phase and yaw come from keys seed and seed+1."""
    return ClothItem(
        cloth_type=cloth_type,
        t=t,
        color=color,
        size=CLOTH_SIZES[cloth_type],
        sway_phase=seeded_phase(seed),
        rotation=(seeded_random(seed + 1) - 0.5) * 0.3,
    )


@lru_cache(maxsize=256)
def generate(
    id: str,
    start: Vec3,
    end: Vec3,
    seed: int,
    params: Params = Params(),
) -> LaundryLine:
    """Generate a line and its garments.

    Keys: seed+10 item count, seed+20+i type, seed+30+i color,
    seed+40+2i (and +41+2i) per-item phase/yaw, seed+100 wind phase.
    """
    start = as_vec3(start)
    end = as_vec3(end)
    length = min_span_length(span_length(start, end))

    spread = params.max_items - params.min_items + 1
    n_items = params.min_items + int(seeded_random(seed + 10) * spread)
    n_items = min(n_items, params.max_items)

    items = []
    for i in range(n_items):
        t = (i + 1) / (n_items + 1)
        cloth_type = seeded_choice(seed + 20 + i, _CLOTH_TYPES)
        color = seeded_choice(seed + 30 + i, params.colors)
        items.append(make_cloth_item(cloth_type, t, color, seed + 40 + 2 * i))

    return LaundryLine(
        id=id,
        start=start,
        end=end,
        length=length,
        sag=derive_sag(length, params.sag_base, params.sag_per_length),
        wind_phase=seeded_phase(seed + 100),
        cloth_items=tuple(items),
    )


# ---------------------------------------------------------------------------
# District presets
# ---------------------------------------------------------------------------

VARIATIONS: dict[str, Params] = {
    "HOVELS": Params(colors=pal.CLOTH_HOVELS, density=0.7),
    "ALLEYS": Params(colors=pal.CLOTH_ALLEYS, density=0.6),
    "JEWISH_QUARTER": Params(colors=pal.CLOTH_ALLEYS, density=0.6),
    "CHRISTIAN_QUARTER": Params(colors=pal.CLOTH_ALLEYS, density=0.6),
    "RESIDENTIAL": Params(colors=pal.CLOTH_RESIDENTIAL, density=0.4),
    "MARKET": Params(colors=pal.CLOTH_MARKET, density=0.2),
    "WEALTHY": Params(colors=pal.CLOTH_WEALTHY, density=0.1),
    "CIVIC": Params(colors=pal.CLOTH_CIVIC, density=0.15),
    "UMAYYAD_MOSQUE": Params(colors=pal.CLOTH_MOSQUE, density=0.2),
    "SALHIYYA": Params(colors=pal.CLOTH_SALHIYYA, density=0.3),
    "OUTSKIRTS_FARMLAND": Params(colors=pal.CLOTH_FARMLAND, density=0.4),
    "OUTSKIRTS_DESERT": Params(colors=pal.CLOTH_DESERT, density=0.2),
    "MOUNTAIN_SHRINE": Params(colors=pal.CLOTH_SHRINE, density=0.2),
    "CARAVANSERAI": Params(colors=pal.CLOTH_CARAVANSERAI, density=0.3),
    "SOUTHERN_ROAD": Params(colors=pal.CLOTH_DESERT, density=0.3),
}


_UNKNOWN_DISTRICT = Params(colors=pal.CLOTH_RESIDENTIAL, density=0.3)


def params_for_district(district: str | None) -> Params:
    """District preset; unknown districts get residential colors at 0.3."""
    if district is None:
        return _UNKNOWN_DISTRICT
    return VARIATIONS.get(district, _UNKNOWN_DISTRICT)
