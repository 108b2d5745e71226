"""Carpet pattern textures, drawn through an injected canvas factory.

Texture creation is a capability the host provides, not something batch
generation depends on. ``carpet_texture`` takes a ``TextureFactory``; with
no factory, or when the factory cannot produce a canvas, it logs a warning
and returns None so the caller falls back to a flat color.

Patterns (drawn in the secondary color over a primary-color field):
    striped:    16 horizontal bands, every other one filled to 60% height
    geometric:  8x8 grid of diamonds, filled on even cells, outlined on odd
    medallion:  40 px border, 8 rays, central disc with a primary-color core

Usage:
    from decor_gen.textures import PillowTextureFactory, carpet_texture

    img = carpet_texture(carpet, PillowTextureFactory())
    if img is not None:
        img.save("carpet.png")
"""

from __future__ import annotations

import logging
import math
from typing import Protocol

from PIL import Image, ImageDraw

from decor_gen.descriptors import HangingCarpet, PatternType

log = logging.getLogger(__name__)

DEFAULT_SIZE = 512

STRIPE_COUNT = 16
STRIPE_FILL = 0.6

DIAMOND_GRID = 8
DIAMOND_HALF = 0.3  # half-diagonal, in cells
OUTLINE_WIDTH = 3

BORDER_WIDTH = 40  # at DEFAULT_SIZE
RAY_COUNT = 8
RAY_LENGTH = 1.5  # in medallion radii
RAY_WIDTH = 6  # at DEFAULT_SIZE
MEDALLION_RADIUS = 0.25  # of the shorter side


class TextureUnavailable(RuntimeError):
    """The host cannot create a drawable canvas right now."""


class TextureFactory(Protocol):
    def new_canvas(self, width: int, height: int, color: str) -> Image.Image:
        """Blank canvas filled with ``color``; raises TextureUnavailable."""
        ...


class PillowTextureFactory:
    """Canvas factory backed by in-memory Pillow images."""

    def __init__(self, mode: str = "RGB"):
        self.mode = mode

    def new_canvas(self, width: int, height: int, color: str) -> Image.Image:
        if width <= 0 or height <= 0:
            raise TextureUnavailable(f"bad canvas size {width}x{height}")
        try:
            return Image.new(self.mode, (width, height), color)
        except ValueError as e:
            raise TextureUnavailable(str(e)) from e


# ---------------------------------------------------------------------------
# Pattern painters
# ---------------------------------------------------------------------------


def _draw_striped(draw: ImageDraw.ImageDraw, w: int, h: int, color: str):
    band = h / STRIPE_COUNT
    for i in range(0, STRIPE_COUNT, 2):
        top = i * band
        draw.rectangle([0, top, w - 1, top + band * STRIPE_FILL - 1], fill=color)


def _draw_geometric(draw: ImageDraw.ImageDraw, w: int, h: int, color: str):
    cell_w = w / DIAMOND_GRID
    cell_h = h / DIAMOND_GRID
    for row in range(DIAMOND_GRID):
        for col in range(DIAMOND_GRID):
            x = col * cell_w + cell_w / 2
            y = row * cell_h + cell_h / 2
            diamond = [
                (x, y - cell_h * DIAMOND_HALF),
                (x + cell_w * DIAMOND_HALF, y),
                (x, y + cell_h * DIAMOND_HALF),
                (x - cell_w * DIAMOND_HALF, y),
            ]
            if (row + col) % 2 == 0:
                draw.polygon(diamond, fill=color)
            else:
                draw.polygon(diamond, outline=color, width=OUTLINE_WIDTH)


def _draw_medallion(
    draw: ImageDraw.ImageDraw, w: int, h: int, color: str, core_color: str
):
    scale = min(w, h) / DEFAULT_SIZE
    border = max(1, round(BORDER_WIDTH * scale))
    draw.rectangle([0, 0, w - 1, border - 1], fill=color)
    draw.rectangle([0, h - border, w - 1, h - 1], fill=color)
    draw.rectangle([0, 0, border - 1, h - 1], fill=color)
    draw.rectangle([w - border, 0, w - 1, h - 1], fill=color)

    cx, cy = w / 2, h / 2
    radius = min(w, h) * MEDALLION_RADIUS
    ray_width = max(1, round(RAY_WIDTH * scale))
    for i in range(RAY_COUNT):
        angle = i / RAY_COUNT * 2 * math.pi
        tip = (
            cx + math.cos(angle) * radius * RAY_LENGTH,
            cy + math.sin(angle) * radius * RAY_LENGTH,
        )
        draw.line([(cx, cy), tip], fill=color, width=ray_width)

    draw.ellipse([cx - radius, cy - radius, cx + radius, cy + radius], fill=color)
    core = radius * 0.5
    draw.ellipse([cx - core, cy - core, cx + core, cy + core], fill=core_color)


def paint_pattern(canvas: Image.Image, carpet: HangingCarpet) -> Image.Image:
    """Draw the carpet's pattern onto a canvas already filled with its field color."""
    w, h = canvas.size
    draw = ImageDraw.Draw(canvas)
    if carpet.pattern is PatternType.STRIPED:
        _draw_striped(draw, w, h, carpet.secondary_color)
    elif carpet.pattern is PatternType.GEOMETRIC:
        _draw_geometric(draw, w, h, carpet.secondary_color)
    elif carpet.pattern is PatternType.MEDALLION:
        _draw_medallion(draw, w, h, carpet.secondary_color, carpet.primary_color)
    return canvas


def carpet_texture(
    carpet: HangingCarpet,
    factory: TextureFactory | None = None,
    size: int = DEFAULT_SIZE,
) -> Image.Image | None:
    """Pattern texture for one carpet, or None when textures are unavailable."""
    if factory is None:
        log.warning("%s: no texture factory, using flat color", carpet.id)
        return None
    try:
        canvas = factory.new_canvas(size, size, carpet.primary_color)
    except (TextureUnavailable, OSError) as e:
        log.warning("%s: texture unavailable (%s), using flat color", carpet.id, e)
        return None
    return paint_pattern(canvas, carpet)
