"""Distance-gated animation driver for draped decorations.

Wind motion is a sum of sinusoids over a combined phase
(sim_time + item phase + decoration wind phase). It is a purely additive
offset on top of the frozen base position; descriptors are never touched.

Per-frame trig for every garment in a big scene is the dominant cost, so
each instance is throttled by its distance to the camera:

    Near      dist <= near_distance          every frame
    Far       near < dist <= cull_distance   at most every far_interval s
    Very far  dist > cull_distance           at most every very_far_interval s

Each band has its own "time since last update" threshold; between updates
the last offset is reused, so a distant garment moves at a lower rate
instead of freezing or popping.

Usage:
    driver = AnimationDriver()
    for line in batch.laundry_lines:
        driver.register_laundry_line(line)

    # once per rendered frame
    driver.update(sim_time, camera_pos)
    offset = driver.offset(f"{line.id}/0")   # Offset for the first garment
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable

import numpy as np

from decor_gen.config import CARPET_LOD, LodThresholds
from decor_gen.descriptors import HangingCarpet, LaundryLine
from decor_gen.primitives import Vec3, as_vec3

log = logging.getLogger(__name__)

# Carpet wind (perpendicular billow, strongest at the free ends)
CARPET_WIND_SPEED = 0.4
CARPET_WIND_STRENGTH = 0.08

# Awning flap about its hinge
AWNING_FLAP = 0.05


@dataclass(frozen=True)
class SwayProfile:
    """Frequencies (rad/s of phase) and amplitudes of one wind response."""

    sway_x_freq: float
    sway_x_amp: float
    sway_z_freq: float
    sway_z_amp: float
    bounce_freq: float
    bounce_amp: float
    yaw_freq: float
    yaw_amp: float
    roll_freq: float
    roll_amp: float


CLOTH_SWAY = SwayProfile(
    sway_x_freq=1.2,
    sway_x_amp=0.15,
    sway_z_freq=1.5,
    sway_z_amp=0.08,
    bounce_freq=0.8,
    bounce_amp=0.08,
    yaw_freq=1.5,
    yaw_amp=0.1,
    roll_freq=1.3,
    roll_amp=0.05,
)


@dataclass(frozen=True)
class Offset:
    """Additive transform relative to a frozen base pose."""

    position: Vec3 = (0.0, 0.0, 0.0)
    yaw: float = 0.0
    roll: float = 0.0


def sway_offset(profile: SwayProfile, phase: float) -> Offset:
    """Wind offset for a combined phase (time + item phase + wind phase)."""
    return Offset(
        position=(
            math.sin(phase * profile.sway_x_freq) * profile.sway_x_amp,
            math.sin(phase * profile.bounce_freq) * profile.bounce_amp,
            math.cos(phase * profile.sway_z_freq) * profile.sway_z_amp,
        ),
        yaw=math.sin(phase * profile.yaw_freq) * profile.yaw_amp,
        roll=math.sin(phase * profile.roll_freq) * profile.roll_amp,
    )


def cloth_offset(line: LaundryLine, item_index: int, sim_time: float) -> Offset:
    """Offset for one garment on a line."""
    item = line.cloth_items[item_index]
    return sway_offset(CLOTH_SWAY, sim_time + item.sway_phase + line.wind_phase)


def carpet_sway(carpet: HangingCarpet, sim_time: float, t: float) -> Vec3:
    """Perpendicular billow of a carpet column at t along the rope.

    Zero at the centre, full strength at the ends; never vertical.
    """
    amount = (
        math.sin(sim_time * CARPET_WIND_SPEED + carpet.wind_phase + t * math.pi)
        * CARPET_WIND_STRENGTH
    )
    edge = abs(t - 0.5) * 2.0
    px, pz = carpet.perpendicular
    return (px * amount * edge, 0.0, pz * amount * edge)


def carpet_sway_offsets(
    carpet: HangingCarpet, sim_time: float, ts: np.ndarray
) -> np.ndarray:
    """Vectorised carpet_sway for an array of t values -> (N, 3)."""
    ts = np.asarray(ts, dtype=float)
    amount = (
        np.sin(sim_time * CARPET_WIND_SPEED + carpet.wind_phase + ts * np.pi)
        * CARPET_WIND_STRENGTH
    )
    scale = amount * np.abs(ts - 0.5) * 2.0
    px, pz = carpet.perpendicular
    out = np.zeros((len(ts), 3))
    out[:, 0] = px * scale
    out[:, 2] = pz * scale
    return out


def awning_flap(seed: float, sim_time: float) -> float:
    """Extra tilt (radians) of an awning about its hinge."""
    return math.sin(sim_time + seed) * AWNING_FLAP


# ---------------------------------------------------------------------------
# Driver
# ---------------------------------------------------------------------------


@dataclass
class AnimatedInstance:
    """One animated thing: where it is, how to animate it, when it last did.

    ``compute(sim_time)`` returns the offset (an Offset, a float or an
    array, depending on the decoration). ``last_update`` and ``offset`` are
    transient and local to this instance.
    """

    key: str
    anchor: Vec3
    compute: Callable[[float], Any]
    lod: LodThresholds
    last_update: float | None = None
    offset: Any = None

    def due(self, sim_time: float, dist_sq: float) -> bool:
        """Whether this frame should recompute the offset."""
        if self.last_update is None or sim_time < self.last_update:
            return True
        return sim_time - self.last_update >= self.lod.interval_for(dist_sq)

    def refresh(self, sim_time: float):
        self.offset = self.compute(sim_time)
        self.last_update = sim_time


@dataclass
class FrameStats:
    """How much work one update() did."""

    recomputed: int = 0
    reused: int = 0

    @property
    def total(self) -> int:
        return self.recomputed + self.reused


class AnimationDriver:
    """Updates every registered instance once per frame, gated by distance."""

    def __init__(
        self,
        cloth_lod: LodThresholds | None = None,
        carpet_lod: LodThresholds | None = None,
        carpet_columns: int = 16,
    ):
        self.cloth_lod = cloth_lod or LodThresholds()
        self.carpet_lod = carpet_lod or CARPET_LOD
        self.carpet_columns = carpet_columns
        self._instances: dict[str, AnimatedInstance] = {}
        self._anchors: np.ndarray | None = None
        self.last_stats = FrameStats()

    def __len__(self) -> int:
        return len(self._instances)

    def __contains__(self, key: str) -> bool:
        return key in self._instances

    # -------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------

    def register(
        self,
        key: str,
        anchor,
        compute: Callable[[float], Any],
        lod: LodThresholds | None = None,
    ) -> AnimatedInstance:
        """Register an instance. Keys must be unique."""
        if key in self._instances:
            raise ValueError(f"animated instance '{key}' already registered")
        inst = AnimatedInstance(
            key=key,
            anchor=as_vec3(anchor),
            compute=compute,
            lod=lod or self.cloth_lod,
        )
        self._instances[key] = inst
        self._anchors = None
        return inst

    def register_laundry_line(self, line: LaundryLine) -> list[AnimatedInstance]:
        """One instance per garment, keyed "{line.id}/{i}"."""
        return [
            self.register(
                f"{line.id}/{i}",
                line.item_position(item),
                partial(cloth_offset, line, i),
                self.cloth_lod,
            )
            for i, item in enumerate(line.cloth_items)
        ]

    def register_carpet(self, carpet: HangingCarpet) -> AnimatedInstance:
        """One instance per carpet; offset is a (columns+1, 3) array."""
        ts = np.linspace(0.0, 1.0, self.carpet_columns + 1)
        return self.register(
            carpet.id,
            carpet.midpoint,
            partial(carpet_sway_offsets, carpet, ts=ts),
            self.carpet_lod,
        )

    def register_awning(self, key: str, anchor, seed: float) -> AnimatedInstance:
        """Awning flap; offset is the extra tilt in radians."""
        return self.register(key, anchor, partial(awning_flap, seed), self.cloth_lod)

    def clear(self):
        """Drop every instance (the batch they belonged to is gone)."""
        self._instances.clear()
        self._anchors = None

    # -------------------------------------------------------------------
    # Per-frame
    # -------------------------------------------------------------------

    def update(self, sim_time: float, camera_pos) -> int:
        """Recompute the instances that are due this frame.

        Returns the number of instances recomputed; the full counts are kept
        in ``last_stats``.
        """
        stats = FrameStats()
        if not self._instances:
            self.last_stats = stats
            return 0

        if self._anchors is None:
            self._anchors = np.array(
                [inst.anchor for inst in self._instances.values()], dtype=float
            )
        delta = self._anchors - np.asarray(camera_pos, dtype=float)
        dist_sq = np.einsum("ij,ij->i", delta, delta)

        sim_time = float(sim_time)
        for inst, d2 in zip(self._instances.values(), dist_sq):
            if inst.due(sim_time, float(d2)):
                inst.refresh(sim_time)
                stats.recomputed += 1
            else:
                stats.reused += 1

        self.last_stats = stats
        log.debug(
            "t=%.3f: %d recomputed, %d reused", sim_time, stats.recomputed, stats.reused
        )
        return stats.recomputed

    def offset(self, key: str) -> Any:
        """Last computed offset for an instance (None before its first update)."""
        return self._instances[key].offset

    def instance(self, key: str) -> AnimatedInstance:
        return self._instances[key]

    def instances(self) -> list[AnimatedInstance]:
        return list(self._instances.values())
