"""Draped decoration kinds, one module per kind.

A kind module is picked up automatically when it exports:

    Params       frozen dataclass of visual knobs (hashable, used as a cache key)
    generate     generate(id, start, end, seed, params) -> DrapedDecoration,
                 wrapped in @lru_cache
    CONSTRAINTS  PlacementConstraints the planner pairs buildings with
    SEED_SALT    added to the tile seed so kinds on one tile never share keys

and optionally VARIATIONS, a dict of named Params presets.

Every random field of a descriptor is drawn from decor_gen.seeded at a
fixed offset from ``seed``; nothing may advance a stateful RNG. Anchors
arrive already moved to the facing building edges.
"""

from __future__ import annotations

import importlib
import pkgutil

_REQUIRED = ("Params", "generate", "CONSTRAINTS", "SEED_SALT")

_kinds: dict[str, object] = {}

for _info in pkgutil.iter_modules(__path__):
    _mod = importlib.import_module(f".{_info.name}", __package__)
    if all(hasattr(_mod, attr) for attr in _REQUIRED):
        _kinds[_info.name] = _mod


def get(name: str):
    """Kind module by name. Raises KeyError naming the known kinds."""
    try:
        return _kinds[name]
    except KeyError:
        raise KeyError(
            f"unknown decoration kind '{name}' (known: {', '.join(list_kinds())})"
        ) from None


def list_kinds() -> list[str]:
    return sorted(_kinds)
