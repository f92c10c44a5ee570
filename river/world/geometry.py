"""River centreline sampling and path lookup helpers."""
from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace
from typing import Callable, List, Optional, Protocol, Sequence, TypeVar

import numpy as np
from pygame.math import Vector2

from river.math.seeding import derive_rng


@dataclass
class GeometrySample:
    """One centreline sample; ``position`` and vectors are (x, z) pairs."""

    position: Vector2
    tangent: Vector2
    normal: Vector2  # points to the right bank
    bank_dist: float
    arc_length: float


class GeometrySampler(Protocol):
    def sample(self, z_start: float, z_end: float, step: float) -> List[GeometrySample]:
        ...


class WidthSource(Protocol):
    def width_multiplier(self, z: float) -> float:
        ...


SampleT = TypeVar("SampleT", bound=GeometrySample)


class RiverCourse:
    """Seeded sinuous river used as the default :class:`GeometrySampler`.

    The centreline is a sum of sines in Z. Arc length is integrated at unit Z
    steps and a sample is emitted every ``step`` units of arc length. Bank
    distance is measured along the normal from the horizontal half width,
    optionally scaled by the blended width multiplier of a biome window.
    """

    BASE_WIDTH = 50.0
    INTEGRATION_STEP = 1.0
    WAVES = 3

    def __init__(self, seed: int = 0, width_source: Optional[WidthSource] = None) -> None:
        rng = derive_rng(seed, "river_course")
        self._amplitudes = np.array([rng.uniform(20.0, 60.0) / (k + 1) for k in range(self.WAVES)])
        self._frequencies = np.array([rng.uniform(0.002, 0.004) * (k + 1) for k in range(self.WAVES)])
        self._phases = np.array([rng.uniform(0.0, 2.0 * math.pi) for _ in range(self.WAVES)])
        self.width_source = width_source

    def center(self, z: float) -> float:
        return float(np.sum(self._amplitudes * np.sin(self._frequencies * z + self._phases)))

    def derivative(self, z: np.ndarray | float) -> np.ndarray:
        z = np.asarray(z, dtype=np.float64)
        terms = self._amplitudes * self._frequencies * np.cos(np.multiply.outer(z, self._frequencies) + self._phases)
        return terms.sum(axis=-1)

    def width(self, z: float) -> float:
        multiplier = self.width_source.width_multiplier(z) if self.width_source else 1.0
        return self.BASE_WIDTH * multiplier

    def sample_at(self, z: float, arc_length: float) -> GeometrySample:
        slope = float(self.derivative(z))
        norm = math.sqrt(slope * slope + 1.0)
        tangent = Vector2(slope / norm, 1.0 / norm)
        normal = Vector2(1.0 / norm, -slope / norm)
        return GeometrySample(
            position=Vector2(self.center(z), z),
            tangent=tangent,
            normal=normal,
            bank_dist=0.5 * self.width(z) / norm,
            arc_length=arc_length,
        )

    def sample(self, z_start: float, z_end: float, step: float) -> List[GeometrySample]:
        if step <= 0.0:
            return []
        direction = 1.0 if z_end > z_start else -1.0
        count = int(math.ceil(abs(z_end - z_start) / self.INTEGRATION_STEP))
        samples = [self.sample_at(z_start, 0.0)]
        if count == 0:
            return samples
        zs = z_start + direction * self.INTEGRATION_STEP * np.arange(count)
        ds = np.sqrt(1.0 + self.derivative(zs) ** 2) * self.INTEGRATION_STEP
        arc = np.cumsum(ds)
        next_target = step
        for i, accumulated in enumerate(arc):
            if accumulated >= next_target:
                z = z_start + direction * self.INTEGRATION_STEP * (i + 1)
                samples.append(self.sample_at(float(z), float(accumulated)))
                next_target += step
        return samples


def interpolate_sample(p1: SampleT, p2: SampleT, t: float) -> SampleT:
    """Linear interpolation of every numeric/vector field of two samples."""

    values = {}
    for item in fields(p1):
        a = getattr(p1, item.name)
        b = getattr(p2, item.name)
        if isinstance(a, Vector2):
            values[item.name] = a + (b - a) * t
        elif isinstance(a, (int, float)):
            values[item.name] = a + (b - a) * t
        else:
            values[item.name] = a
    return replace(p1, **values)


def path_point(points: Sequence[SampleT], index: float) -> SampleT:
    """Sample at a fractional ``index`` into ``points``."""

    if not points:
        raise IndexError("Path is empty")
    i = int(math.floor(index))
    if i < 0:
        return points[0]
    if i + 1 >= len(points):
        return points[-1]
    return interpolate_sample(points[i], points[i + 1], index - i)


def _binary_search(points: Sequence[SampleT], value: float, key: Callable[[SampleT], float]) -> float:
    if len(points) < 2:
        return 0.0
    ascending = key(points[-1]) > key(points[0])
    low = 0
    high = len(points) - 1
    while low <= high:
        mid = (low + high) // 2
        mid_value = key(points[mid])
        if mid_value == value:
            return float(mid)
        if (mid_value < value) == ascending:
            low = mid + 1
        else:
            high = mid - 1
    if high < 0:
        return 0.0
    if low >= len(points):
        return float(len(points) - 1)
    v1 = key(points[high])
    delta = key(points[low]) - v1
    t = 0.0 if delta == 0 else (value - v1) / delta
    return high + t


def path_index_by_arc_length(points: Sequence[SampleT], arc_length: float) -> float:
    return _binary_search(points, arc_length, lambda point: point.arc_length)


def path_index_by_z(points: Sequence[SampleT], z: float) -> float:
    """Fractional index for world ``z``; the path may run in either Z direction."""

    return _binary_search(points, z, lambda point: point.position.y)


__all__ = [
    "GeometrySample",
    "GeometrySampler",
    "RiverCourse",
    "interpolate_sample",
    "path_point",
    "path_index_by_arc_length",
    "path_index_by_z",
]
