"""Catenary curve model for draped ropes, cloth lines and carpets.

Closed-form approximation, not a rope simulation. Between two anchors the
planar (X, Z) coordinates are interpolated linearly; the height follows

    L    = planar span |end - start|
    a    = L / (2 * sag)
    x    = (t - 0.5) * L
    drop = a * (cosh(L / (2a)) - cosh(x / a))

i.e. the catenary a*(cosh(x/a) - 1) re-based so the drop is exactly zero
at both anchors and deepest at t = 0.5. Height is the linear interpolation
of the anchor heights minus the drop, so anchors at different heights are
honoured exactly.

``sag`` is the curve's shape parameter (L / 2a). It is always clamped into
[SAG_FLOOR, SAG_CEILING] before use: sag -> 0 sends a -> inf, and a very
large sag overflows cosh.
"""

from __future__ import annotations

import math

import numpy as np

from decor_gen.primitives import Vec3, lerp3, planar_distance

SAG_FLOOR = 1e-3
SAG_CEILING = 50.0
MIN_SPAN = 1e-6
DEFAULT_SEGMENTS = 20


def clamp_sag(sag: float) -> float:
    """Clamp a sag value into the numerically safe, strictly positive range."""
    sag = float(sag)
    if math.isnan(sag):
        return SAG_FLOOR
    return min(max(sag, SAG_FLOOR), SAG_CEILING)


def span_length(start: Vec3, end: Vec3) -> float:
    """Planar span between two anchors."""
    return planar_distance(start, end)


def derive_sag(length: float, base: float, per_length: float) -> float:
    """Sag that grows with span (longer ropes hang looser)."""
    return clamp_sag(base + per_length * length)


def droop(length: float, sag: float, t: float) -> float:
    """Vertical drop below the anchor chord at parameter t."""
    if length < MIN_SPAN:
        return 0.0
    sag = clamp_sag(sag)
    a = length / (2.0 * sag)
    x = (t - 0.5) * length
    # L / (2a) == sag, so the anchor term is cosh(sag)
    return a * (math.cosh(sag) - math.cosh(x / a))


def max_droop(length: float, sag: float) -> float:
    """Drop at the midpoint, the lowest point of a level span."""
    return droop(length, sag, 0.5)


def sample_point(start: Vec3, end: Vec3, sag: float, t: float) -> Vec3:
    """Point on the curve at t in [0, 1] (t is clamped)."""
    t = min(max(float(t), 0.0), 1.0)
    x, y, z = lerp3(start, end, t)
    if t == 0.0 or t == 1.0:
        return (x, y, z)
    return (x, y - droop(span_length(start, end), sag, t), z)


def sample_polyline(
    start: Vec3,
    end: Vec3,
    sag: float,
    segments: int = DEFAULT_SEGMENTS,
) -> np.ndarray:
    """Sample segments+1 uniform points along the curve.

    Returns an (segments+1, 3) float array; first row is ``start`` and the
    last row is ``end``.
    """
    segments = max(int(segments), 1)
    t = np.linspace(0.0, 1.0, segments + 1)
    p0 = np.asarray(start, dtype=float)
    p1 = np.asarray(end, dtype=float)
    points = np.outer(1.0 - t, p0) + np.outer(t, p1)

    length = span_length(start, end)
    if length >= MIN_SPAN:
        s = clamp_sag(sag)
        a = length / (2.0 * s)
        x = (t - 0.5) * length
        drop = a * (np.cosh(s) - np.cosh(x / a))
        drop[0] = 0.0
        drop[-1] = 0.0
        points[:, 1] -= drop

    points[0] = p0
    points[-1] = p1
    return points
