"""Progress curves for lifecycle fades.

An entering entity decelerates onto the floor (``ease_out``) and an exiting
one accelerates off it (``ease_in``). ``linear`` is the plain default for a
``Transition`` built without a curve.
"""
from __future__ import annotations

from typing import Callable

Curve = Callable[[float], float]

EASINGS: dict[str, Curve] = {
    "linear": lambda p: p,
    "ease_in": lambda p: p * p,
    "ease_out": lambda p: 1.0 - (1.0 - p) ** 2,
}


def ease(name: str, progress: float) -> float:
    """Eased value of ``progress``, clamped to [0, 1] first."""
    if name not in EASINGS:
        raise ValueError(f"Unknown easing {name!r}; expected one of {sorted(EASINGS)}")
    return EASINGS[name](min(max(progress, 0.0), 1.0))


def lerp(start: float, end: float, weight: float) -> float:
    return start + (end - start) * weight
