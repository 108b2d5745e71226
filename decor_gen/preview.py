"""Preview decoration batches from the command line.

Plans a batch on a synthetic grid of buildings, prints its description,
and optionally writes carpet pattern textures and simulates animation.

Usage:
    python -m decor_gen.preview --map-x 2 --map-y -1 --seed 42
    python -m decor_gen.preview --map-x 0 --map-y 0 --seed 7 --district MARKET \\
        --textures out/carpets
    python -m decor_gen.preview --map-x 0 --map-y 0 --seed 7 --frames 120 -v
"""

from __future__ import annotations

import argparse
import logging
import math
import sys
from pathlib import Path
from typing import Sequence

from PIL import Image, ImageDraw, ImageFont

from decor_gen import decorations
from decor_gen.config import DecorConfig
from decor_gen.descriptors import AnchorCandidate, HangingCarpet
from decor_gen.planner import describe_batch, plan
from decor_gen.seeded import seeded_index, seeded_uniform, tile_seed
from decor_gen.textures import PillowTextureFactory, carpet_texture
from decor_gen.tiles import TileDecorations

log = logging.getLogger(__name__)

# Synthetic street grid
GRID = 4
SPACING = 11.0
JITTER = 2.0

# Animation preview
FRAME_DT = 1.0 / 30.0
CAMERA_START = 160.0  # camera walks from here toward the tile centre

# Texture catalog
CELL = 256
LABEL_H = 28
BG_COLOR = (40, 42, 48)
LABEL_BG = (30, 32, 36)
LABEL_FG = (220, 220, 220)


def synthetic_candidates(seed: int, grid: int = GRID) -> list[AnchorCandidate]:
    """A jittered grid of buildings, reproducible from the seed."""
    out = []
    for i in range(grid):
        for j in range(grid):
            k = seed + 100 * (i * grid + j)
            out.append(
                AnchorCandidate(
                    position=(
                        i * SPACING + seeded_uniform(k, -JITTER, JITTER),
                        0.0,
                        j * SPACING + seeded_uniform(k + 1, -JITTER, JITTER),
                    ),
                    size_scale=seeded_uniform(k + 2, 0.8, 1.3),
                    story_count=1 + seeded_index(k + 3, 3),
                    orientation=seeded_uniform(k + 4, 0.0, math.pi),
                )
            )
    return out


def _try_load_font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Try to load a nice font, fall back to default."""
    candidates = [
        "/System/Library/Fonts/SFNSMono.ttf",
        "/System/Library/Fonts/Menlo.ttc",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    ]
    for path in candidates:
        if Path(path).exists():
            try:
                return ImageFont.truetype(path, size)
            except OSError:
                continue
    return ImageFont.load_default()


def write_textures(carpets: Sequence[HangingCarpet], out_dir: Path) -> list[Path]:
    """One PNG per carpet plus a labelled catalog grid."""
    out_dir.mkdir(parents=True, exist_ok=True)
    factory = PillowTextureFactory()
    written: list[Path] = []
    tiles: list[tuple[str, Image.Image]] = []

    for carpet in carpets:
        img = carpet_texture(carpet, factory)
        if img is None:
            continue
        path = out_dir / f"{carpet.id}.png"
        img.save(path)
        written.append(path)
        tiles.append((f"{carpet.id} ({carpet.pattern.value})", img))

    if not tiles:
        return written

    cols = min(4, len(tiles))
    rows = math.ceil(len(tiles) / cols)
    cell_h = CELL + LABEL_H
    grid = Image.new("RGB", (cols * CELL, rows * cell_h), BG_COLOR)
    draw = ImageDraw.Draw(grid)
    font = _try_load_font(14)

    for idx, (label, img) in enumerate(tiles):
        x = (idx % cols) * CELL
        y = (idx // cols) * cell_h
        grid.paste(img.resize((CELL, CELL)), (x, y))

        label_y = y + CELL
        draw.rectangle([x, label_y, x + CELL, label_y + LABEL_H], fill=LABEL_BG)
        bbox = font.getbbox(label)
        tx = x + (CELL - (bbox[2] - bbox[0])) // 2
        ty = label_y + (LABEL_H - (bbox[3] - bbox[1])) // 2
        draw.text((tx, ty), label, fill=LABEL_FG, font=font)

    catalog = out_dir / "catalog.png"
    grid.save(catalog)
    written.append(catalog)
    return written


def simulate(tiles: TileDecorations, frames: int, centre) -> int:
    """Walk the camera toward the tile for N frames; returns total recomputes."""
    cx, cy, cz = centre
    total = 0
    for f in range(frames):
        progress = f / max(frames - 1, 1)
        camera = (cx + CAMERA_START * (1.0 - progress), cy + 1.7, cz)
        n = tiles.frame(f * FRAME_DT, camera)
        total += n
        stats = tiles.driver.last_stats if tiles.driver else None
        if stats is not None:
            log.debug(
                "frame %d: camera x=%.1f, %d/%d recomputed",
                f,
                camera[0],
                stats.recomputed,
                stats.total,
            )
    return total


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Preview decoration batches")
    parser.add_argument("--map-x", type=int, required=True, help="Tile X")
    parser.add_argument("--map-y", type=int, required=True, help="Tile Y")
    parser.add_argument("--seed", type=int, required=True, help="Session seed")
    parser.add_argument(
        "--district", default=None, help="District name (MARKET gets carpets)"
    )
    parser.add_argument(
        "--kind",
        default=None,
        help="Plan a single decoration kind instead of the district's default",
    )
    parser.add_argument(
        "--textures", default=None, help="Write carpet pattern PNGs to this directory"
    )
    parser.add_argument(
        "--frames", type=int, default=0, help="Simulate N animation frames"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    _setup_logging(args.verbose)

    if args.kind is not None and args.kind not in decorations.list_kinds():
        print(
            f"Error: unknown kind '{args.kind}'. "
            f"Available: {', '.join(decorations.list_kinds())}",
            file=sys.stderr,
        )
        return 1

    config = DecorConfig.for_preview()
    seed = tile_seed(args.map_x, args.map_y, args.seed)
    candidates = synthetic_candidates(seed)

    if args.kind is not None:
        kind_mod = decorations.get(args.kind)
        kind_seed = tile_seed(args.map_x, args.map_y, args.seed, kind_mod.SEED_SALT)
        batch = plan(candidates, kind_seed, kind=args.kind)
        print(describe_batch(batch, seed=kind_seed))
        carpets = [d for d in batch if isinstance(d, HangingCarpet)]
    else:
        tiles = TileDecorations(args.seed, config)
        tile_batch = tiles.enter_tile(args.map_x, args.map_y, candidates, args.district)
        print(describe_batch(tile_batch.all(), seed=tile_batch.tile_seed))
        carpets = list(tile_batch.carpets)
        for decoration_id, points in tiles.curve_points().items():
            log.debug(
                "%s: lowest point y=%.2f over %d segments",
                decoration_id,
                points[:, 1].min(),
                len(points) - 1,
            )

        if args.frames > 0:
            centre = ((GRID - 1) * SPACING / 2, 0.0, (GRID - 1) * SPACING / 2)
            total = simulate(tiles, args.frames, centre)
            log.info(
                "%d frames, %d instances, %d recomputes (%.1f per frame)",
                args.frames,
                len(tiles.driver),
                total,
                total / args.frames,
            )

    if args.textures:
        written = write_textures(carpets, Path(args.textures))
        for path in written:
            print(f"  -> {path}")
        if not carpets:
            log.info("batch has no carpets, no textures written")

    return 0


if __name__ == "__main__":
    sys.exit(main())
