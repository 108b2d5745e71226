"""Building ornament selection: which facade details a building shows.

Pure function of the building's local seed and type. Each ornament is
gated by its own fixed key offset from ``local_seed`` so adding or
removing one ornament never changes another's outcome.

Side indices: 0=front (+Z), 1=+X, 2=back (-Z), 3=-X.
"""

from __future__ import annotations

from dataclasses import dataclass

from decor_gen.descriptors import (
    AwningChoice,
    MedallionPlacement,
    NichePlacement,
    OrnamentChoice,
)
from decor_gen.primitives import COBALT_BLUE, TURQUOISE
from decor_gen.seeded import seeded_index, seeded_random

SIDES = (0, 1, 2, 3)

# Plain awning materials; the last three are reserved for wealthy districts
PLAIN_AWNINGS = 9
ALL_AWNINGS = 12
STRIPED_AWNINGS = 4

TILE_PATTERNS = ("star8", "star6", "hexagonal")

# Building types that always get a front awning
_SHOPFRONT_TYPES = {"COMMERCIAL", "HOSPITALITY", "CIVIC"}


@dataclass(frozen=True)
class _AwningKeys:
    """Key offsets and ranges for one awning slot."""

    plain_index: int
    striped: int
    striped_index: int
    tilt: int
    width: int
    tilt_base: float
    tilt_range: float
    width_base: float
    width_range: float


FRONT_AWNING = _AwningKeys(
    plain_index=4,
    striped=5,
    striped_index=6,
    tilt=15,
    width=16,
    tilt_base=0.35,
    tilt_range=1.15,
    width_base=0.72,
    width_range=0.12,
)

REAR_AWNING = _AwningKeys(
    plain_index=62,
    striped=63,
    striped_index=64,
    tilt=66,
    width=67,
    tilt_base=0.3,
    tilt_range=1.0,
    width_base=0.55,
    width_range=0.1,
)


def choose_awning(local_seed: int, keys: _AwningKeys, district: str | None) -> AwningChoice:
    """Material, tilt and width for one awning."""
    striped = seeded_random(local_seed + keys.striped) > 0.5
    if striped:
        index = seeded_index(local_seed + keys.striped_index, STRIPED_AWNINGS)
    else:
        n = ALL_AWNINGS if district == "WEALTHY" else PLAIN_AWNINGS
        index = seeded_index(local_seed + keys.plain_index, n)
    return AwningChoice(
        striped=striped,
        material_index=index,
        tilt=keys.tilt_base + seeded_random(local_seed + keys.tilt) * keys.tilt_range,
        width_factor=keys.width_base
        + seeded_random(local_seed + keys.width) * keys.width_range,
    )


def choose_ornaments(
    local_seed: int,
    building_type: str,
    district: str | None = None,
    is_ornate: bool = False,
    door_side: int = 0,
    has_wealthy_door_ornaments: bool = False,
) -> OrnamentChoice:
    """Select facade ornaments for one building.

    Args:
        local_seed: Per-building seed (stable for the building's lifetime).
        building_type: "RESIDENTIAL", "COMMERCIAL", "RELIGIOUS", "CIVIC", ...
        district: District name; WEALTHY unlocks the richer awning cloths.
        is_ornate: Whether the building qualifies for carved stonework.
        door_side: Side the door is on (window surrounds skip it).
        has_wealthy_door_ornaments: Whether the doorway gets the urn, plant,
            tile panel and lion group.
    """

    def r(offset: int) -> float:
        return seeded_random(local_seed + offset)

    niches: tuple[NichePlacement, ...] = ()
    if is_ornate and r(221) > 0.8:
        sides = [s for s in SIDES if r(225 + s) > 0.5][:2]
        niches = tuple(
            NichePlacement(
                side=s,
                # front/back walls slide along X, side walls along Z
                lateral=(r((230 if s % 2 == 0 else 235) + s) - 0.5) * 0.5,
                height=-0.1 + r(240 + s) * 0.2,
            )
            for s in sides
        )

    medallions: tuple[MedallionPlacement, ...] = ()
    if is_ornate and r(251) > 0.77:
        medallions = tuple(
            MedallionPlacement(side=s, height=0.15 + r(260 + s) * 0.15)
            for s in SIDES
            if r(255 + s * 7) >= 0.6
        )

    surrounds: tuple[int, ...] = ()
    if is_ornate and r(271) > 0.7:
        surrounds = tuple(s for s in SIDES if s != door_side)[:2]

    front = None
    if building_type in _SHOPFRONT_TYPES or r(3) > 0.6:
        front = choose_awning(local_seed, FRONT_AWNING, district)

    rear = None
    if r(61) > 0.75:
        rear = choose_awning(local_seed, REAR_AWNING, district)

    return OrnamentChoice(
        ablaq_bands=is_ornate and r(201) > 0.75,
        muqarnas_corbels=is_ornate and r(211) > 0.78,
        niches=niches,
        medallions=medallions,
        window_surround_sides=surrounds,
        front_awning=front,
        rear_awning=rear,
        roof_planters=r(71) > 0.6,
        door_ornaments=has_wealthy_door_ornaments,
        potted_plant=has_wealthy_door_ornaments and r(127) > 0.45,
        tile_panel=has_wealthy_door_ornaments and r(129) > 0.5,
        lion_sculptures=has_wealthy_door_ornaments and r(131) > 0.75,
        urn_variants=(
            "amphora" if r(125) > 0.5 else "vase",
            "amphora" if r(126) > 0.5 else "vase",
        ),
        tile_pattern=TILE_PATTERNS[seeded_index(local_seed + 130, len(TILE_PATTERNS))],
        lion_material="bronze" if r(132) > 0.6 else "stone",
        accent_color=COBALT_BLUE if r(128) > 0.5 else TURQUOISE,
    )
