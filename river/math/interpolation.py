"""Scalar, vector and colour interpolation helpers."""
from __future__ import annotations

from typing import Any, Sequence

from pygame.math import Vector2, Vector3


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def lerp(start: float, end: float, t: float) -> float:
    return start * (1.0 - t) + end * t


def hex_to_color(value: int) -> Vector3:
    """Convert a 0xRRGGBB integer into a unit-range colour vector."""

    return Vector3(
        ((value >> 16) & 0xFF) / 255.0,
        ((value >> 8) & 0xFF) / 255.0,
        (value & 0xFF) / 255.0,
    )


def lerp_color(a: Vector3, b: Vector3, t: float) -> Vector3:
    t = clamp(t, 0.0, 1.0)
    return Vector3(a).lerp(b, t)


def mix_linear(a: Any, b: Any, w1: float, w2: float) -> Any:
    """Weighted sum ``a * w1 + b * w2``.

    Works for numbers, pygame vectors and (named) tuples of those; tuples are
    combined element-wise and rebuilt with their own type.
    """

    if isinstance(a, (Vector2, Vector3)):
        return a * w1 + b * w2
    if isinstance(a, tuple):
        mixed = [mix_linear(x, y, w1, w2) for x, y in zip(a, b)]
        if hasattr(a, "_fields"):
            return type(a)(*mixed)
        return tuple(mixed)
    return a * w1 + b * w2


def interpolate_keyframes(values: Sequence[Vector3], dayness: float) -> Vector3:
    """Blend ``(night, sunset, noon)`` keyframes for ``dayness`` in [-1, 1]."""

    night, sunset, noon = values
    if dayness > 0.0:
        return lerp_color(sunset, noon, dayness)
    return lerp_color(sunset, night, -dayness)


__all__ = ["clamp", "lerp", "hex_to_color", "lerp_color", "mix_linear", "interpolate_keyframes"]
