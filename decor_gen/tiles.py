"""Per-tile decoration lifecycle.

Entering a map tile plans one batch of decorations for it and registers
them with a fresh animation driver. Everything belongs to the tile: on
leaving it (or changing the session seed) the batch, the driver and any
textures are dropped together, never patched in place.

Usage:
    tiles = TileDecorations(session_seed=42)
    batch = tiles.enter_tile(3, -2, buildings, district="MARKET")

    # every frame
    tiles.frame(sim_time, camera_pos)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np
from PIL import Image

from decor_gen.animation import AnimationDriver
from decor_gen.config import DecorConfig
from decor_gen.descriptors import (
    AnchorCandidate,
    DrapedDecoration,
    HangingCarpet,
    LaundryLine,
)
from decor_gen.decorations import hanging_carpet, laundry_line
from decor_gen.planner import plan_laundry_lines, plan_market_carpets
from decor_gen.seeded import tile_seed
from decor_gen.textures import TextureFactory, carpet_texture

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecorationBatch:
    """All decorations generated for one tile in one session.

    tile_seed is the unsalted tile key; carpet_seed and laundry_seed are the
    salted seeds each kind was actually planned with.
    """

    tile: tuple[int, int]
    tile_seed: int
    carpet_seed: int
    laundry_seed: int
    district: str | None = None
    carpets: tuple[HangingCarpet, ...] = ()
    laundry_lines: tuple[LaundryLine, ...] = ()

    def all(self) -> tuple[DrapedDecoration, ...]:
        return self.carpets + self.laundry_lines

    def __len__(self) -> int:
        return len(self.carpets) + len(self.laundry_lines)


class TileDecorations:
    """Owns the current tile's batch, its animation driver and textures."""

    def __init__(
        self,
        session_seed: int,
        config: DecorConfig | None = None,
        texture_factory: TextureFactory | None = None,
    ):
        self.session_seed = int(session_seed)
        self.config = config or DecorConfig()
        self.texture_factory = texture_factory
        self.batch: DecorationBatch | None = None
        self.driver: AnimationDriver | None = None
        self.textures: dict[str, Image.Image | None] = {}

    def build_batch(
        self,
        map_x: int,
        map_y: int,
        candidates: Sequence[AnchorCandidate],
        district: str | None = None,
    ) -> DecorationBatch:
        """Plan a batch without touching the current one."""
        cfg = self.config
        carpets: list[HangingCarpet] = []
        lines: list[LaundryLine] = []
        is_carpet_district = district in cfg.carpet_districts
        if is_carpet_district:
            carpets = plan_market_carpets(
                candidates, map_x, map_y, self.session_seed, constraints=cfg.carpets
            )
        if not is_carpet_district or cfg.laundry_with_carpets:
            lines = plan_laundry_lines(
                candidates,
                map_x,
                map_y,
                self.session_seed,
                district=district,
                constraints=cfg.laundry,
            )
        return DecorationBatch(
            tile=(map_x, map_y),
            tile_seed=tile_seed(map_x, map_y, self.session_seed),
            carpet_seed=tile_seed(
                map_x, map_y, self.session_seed, hanging_carpet.SEED_SALT
            ),
            laundry_seed=tile_seed(
                map_x, map_y, self.session_seed, laundry_line.SEED_SALT
            ),
            district=district,
            carpets=tuple(carpets),
            laundry_lines=tuple(lines),
        )

    def enter_tile(
        self,
        map_x: int,
        map_y: int,
        candidates: Sequence[AnchorCandidate],
        district: str | None = None,
    ) -> DecorationBatch:
        """Make (map_x, map_y) the current tile.

        Re-entering the current tile returns the existing batch unchanged
        (animation state included); any other tile replaces everything.
        """
        if self.batch is not None and self.batch.tile == (map_x, map_y):
            return self.batch

        self.leave_tile()
        batch = self.build_batch(map_x, map_y, candidates, district)

        driver = AnimationDriver(
            cloth_lod=self.config.cloth_lod,
            carpet_lod=self.config.carpet_lod,
            carpet_columns=self.config.curve.carpet_strip_segments,
        )
        for carpet in batch.carpets:
            driver.register_carpet(carpet)
        for line in batch.laundry_lines:
            driver.register_laundry_line(line)

        if self.texture_factory is not None:
            self.textures = {
                c.id: carpet_texture(c, self.texture_factory) for c in batch.carpets
            }

        self.batch = batch
        self.driver = driver
        log.info(
            "tile (%d, %d) %s: %d carpets, %d laundry lines, %d animated",
            map_x,
            map_y,
            district or "-",
            len(batch.carpets),
            len(batch.laundry_lines),
            len(driver),
        )
        return batch

    def leave_tile(self):
        """Drop the current batch, driver and textures."""
        if self.batch is not None:
            log.debug("leaving tile %s", self.batch.tile)
        self.batch = None
        self.driver = None
        self.textures = {}

    def reseed(self, session_seed: int):
        """Start a new session; the current tile's batch is discarded."""
        if int(session_seed) != self.session_seed:
            self.leave_tile()
            self.session_seed = int(session_seed)

    def curve_points(self) -> dict[str, np.ndarray]:
        """Sampled curve per decoration id, (curve.segments + 1, 3) each."""
        if self.batch is None:
            return {}
        segments = self.config.curve.segments
        return {d.id: d.polyline(segments) for d in self.batch.all()}

    def frame(self, sim_time: float, camera_pos) -> int:
        """Advance animation; returns how many instances were recomputed."""
        if self.driver is None:
            return 0
        return self.driver.update(sim_time, camera_pos)
