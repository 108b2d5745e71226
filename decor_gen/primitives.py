"""Vector helpers and shared palettes for decoration generation.

Coordinate convention:
    - Y-up (matches the renderer)
    - "Planar" means the XZ ground plane; distances between structures
      and span lengths of draped objects are planar
    - Positions are plain (x, y, z) tuples so descriptors stay hashable

Colors are CSS hex strings; the renderer owns material construction.
"""

from __future__ import annotations

import math

import numpy as np

Vec3 = tuple[float, float, float]


def as_vec3(v) -> Vec3:
    """Coerce any 3-sequence (list, ndarray, tuple) to a float tuple."""
    x, y, z = v
    return (float(x), float(y), float(z))


def planar_distance(a: Vec3, b: Vec3) -> float:
    """Distance between two points projected onto the XZ plane."""
    return math.hypot(b[0] - a[0], b[2] - a[2])


def planar_direction(a: Vec3, b: Vec3) -> tuple[float, float]:
    """Unit (dx, dz) from a toward b. (0, 0) when the points coincide."""
    dx = b[0] - a[0]
    dz = b[2] - a[2]
    d = math.hypot(dx, dz)
    if d == 0.0:
        return (0.0, 0.0)
    return (dx / d, dz / d)


def planar_perpendicular(a: Vec3, b: Vec3) -> tuple[float, float]:
    """Unit planar normal to the segment a->b (rotated +90° about Y)."""
    dx, dz = planar_direction(a, b)
    return (-dz, dx)


def lerp3(a: Vec3, b: Vec3, t: float) -> Vec3:
    """Linear interpolation that is exact at t=0 and t=1."""
    s = 1.0 - t
    return (a[0] * s + b[0] * t, a[1] * s + b[1] * t, a[2] * s + b[2] * t)


def distance_sq(a, b) -> float:
    """Squared 3D distance (cheap; used for LOD gating)."""
    d = np.asarray(a, dtype=float) - np.asarray(b, dtype=float)
    return float(np.dot(d, d))


# ---------------------------------------------------------------------------
# Palettes (Damascus / Persian textile tradition)
# ---------------------------------------------------------------------------

CARPET_PRIMARY = (
    "#8b0000",  # deep red (most common)
    "#dc143c",  # crimson
    "#b8860b",  # dark goldenrod
    "#00008b",  # deep blue
    "#8b4513",  # saddle brown
    "#006400",  # dark green
)

CARPET_SECONDARY = (
    "#daa520",  # goldenrod accent
    "#f5deb3",  # wheat/cream
    "#4169e1",  # royal blue
    "#228b22",  # forest green
    "#cd853f",  # peru/tan
    "#8b0000",  # dark red
)

CLOTH_MARKET = ("#d8c8b8", "#c8b8a8", "#b8a898", "#a89888")
CLOTH_WEALTHY = ("#c85a4a", "#5a7a8a", "#8a6a9a", "#e8d8c8", "#d8c8b8")
CLOTH_HOVELS = ("#6a5a4a", "#8a7a6a", "#5a4a3a", "#7a6a5a")
CLOTH_ALLEYS = ("#7a6a5a", "#9a8a7a", "#6a5a4a", "#8a7a6a")
CLOTH_RESIDENTIAL = ("#d8c8b8", "#e8d8c8", "#c8b8a8", "#b8a898")
CLOTH_CIVIC = ("#c8b8a8", "#d8c8b8", "#b8a898")
CLOTH_MOSQUE = ("#e8d8c8", "#d8c8b8", "#c8b8a8")
CLOTH_SALHIYYA = ("#c8b8a8", "#b8a898", "#d8c8b8")
CLOTH_FARMLAND = ("#8a7a6a", "#9a8a7a", "#7a6a5a")
CLOTH_DESERT = ("#9a8872", "#a4937c", "#8f7f6b")
CLOTH_SHRINE = ("#b8a898", "#c8b8a8")
CLOTH_CARAVANSERAI = ("#a89888", "#b8a898", "#c8b8a8")

TERRACOTTA = "#b86a4a"
COBALT_BLUE = "#1a4a7a"
TURQUOISE = "#2a8a7a"
