"""Pattern logics that turn a pattern config into placements."""
from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, List, Optional, Sequence, Tuple

from river.layout.config import PatternConfig
from river.layout.model import LayoutBlock, PathPoint, Placement
from river.world.geometry import path_point

LEFT = "left"
RIGHT = "right"

PATH_HALF_WIDTH = 2.0
SLALOM_BOAT_CLEARANCE = 5.0
SLALOM_BANK_CLEARANCE = 2.0
SHORE_LAND_REACH = 15.0
CLUSTER_JITTER = 5.0

# (fractional path index, forced side or None)
Slot = Tuple[float, Optional[str]]


@dataclass
class PatternContext:
    """Where and how a pattern instance is applied."""

    path: Sequence[PathPoint]
    i_start: float
    i_end: float
    length: float  # distance units covered by [i_start, i_end]
    progress: float  # biome progress used for density and aggressiveness
    rng: random.Random
    water_tags: FrozenSet[str]
    block: LayoutBlock


def resolve_count(pattern: PatternConfig, length: float, progress: float, rng: random.Random) -> int:
    expected = max(0.0, (length / 100.0) * pattern.density_at(progress))
    whole = math.floor(expected)
    count = int(whole) + (1 if rng.random() < expected - whole else 0)
    if pattern.min_count is not None:
        count = max(count, pattern.min_count)
    if pattern.max_count is not None:
        count = min(count, pattern.max_count)
    return count


def default_side(place: str, point: PathPoint, rng: random.Random) -> str:
    if place == "path":
        return LEFT if rng.random() < 0.5 else RIGHT
    # keep clear of the travel line
    return LEFT if point.boat_offset > 0.0 else RIGHT


def lateral_range(place: str, point: PathPoint, side: str, is_water: bool) -> Tuple[float, float]:
    bank = point.bank_dist
    boat = point.boat_offset
    if place == "slalom":
        if side == RIGHT:
            low, high = boat + SLALOM_BOAT_CLEARANCE, bank - SLALOM_BANK_CLEARANCE
            return (low, high) if low <= high else (high, high)
        low, high = -bank + SLALOM_BANK_CLEARANCE, boat - SLALOM_BOAT_CLEARANCE
        return (low, high) if low <= high else (low, low)
    if place == "shore":
        if is_water:
            return (0.5 * bank, bank) if side == RIGHT else (-bank, -0.5 * bank)
        return (bank, bank + SHORE_LAND_REACH) if side == RIGHT else (-bank - SHORE_LAND_REACH, -bank)
    return (boat - PATH_HALF_WIDTH, boat + PATH_HALF_WIDTH)


def _scatter(ctx: PatternContext, count: int) -> List[Slot]:
    span = ctx.i_end - ctx.i_start
    return [(ctx.i_start + ctx.rng.random() * span, None) for _ in range(count)]


def _sequence(ctx: PatternContext, count: int) -> List[Slot]:
    span = ctx.i_end - ctx.i_start
    return [(ctx.i_start + (j + 0.5) * span / count, None) for j in range(count)]


def _staggered(ctx: PatternContext, count: int) -> List[Slot]:
    span = ctx.i_end - ctx.i_start
    return [(ctx.i_start + (j + 0.5) * span / count, LEFT if j % 2 == 0 else RIGHT) for j in range(count)]


def _gate(ctx: PatternContext, count: int) -> List[Slot]:
    span = ctx.i_end - ctx.i_start
    pairs = math.ceil(count / 2)
    return [(ctx.i_start + (j // 2 + 0.5) * span / pairs, LEFT if j % 2 == 0 else RIGHT) for j in range(count)]


def _cluster(ctx: PatternContext, count: int) -> List[Slot]:
    center = ctx.i_start + ctx.rng.random() * (ctx.i_end - ctx.i_start)
    slots: List[Slot] = []
    for _ in range(count):
        jitter = (ctx.rng.random() - 0.5) * CLUSTER_JITTER
        slots.append((max(ctx.i_start, min(ctx.i_end, center + jitter)), None))
    return slots


LOGIC_SLOTS: Dict[str, Callable[[PatternContext, int], List[Slot]]] = {
    "scatter": _scatter,
    "sequence": _sequence,
    "staggered": _staggered,
    "gate": _gate,
    "cluster": _cluster,
}


def place_one(
    ctx: PatternContext,
    place: str,
    tag: str,
    index: float,
    side: Optional[str] = None,
) -> Placement:
    """Resolve side, lateral range and aggressiveness for one entity and record it."""

    point = path_point(ctx.path, index)
    if side is None:
        side = default_side(place, point, ctx.rng)
    placement = Placement(index=index, range=lateral_range(place, point, side, tag in ctx.water_tags))
    if place == "shore":
        placement.aggressiveness = min(1.0, ctx.progress * 0.7 + ctx.rng.random() * 0.3)
    ctx.block.add(tag, placement)
    return placement


def apply_pattern(pattern: PatternConfig, ctx: PatternContext) -> int:
    """Place one instance of ``pattern`` into ``ctx.block``; returns the count placed."""

    if not pattern.tags or ctx.i_end <= ctx.i_start:
        return 0
    count = resolve_count(pattern, ctx.length, ctx.progress, ctx.rng)
    if count <= 0:
        return 0
    for index, side in LOGIC_SLOTS[pattern.logic](ctx, count):
        tag = ctx.rng.choice(pattern.tags)
        place_one(ctx, pattern.place, tag, index, side)
    return count


__all__ = [
    "PatternContext",
    "resolve_count",
    "default_side",
    "lateral_range",
    "place_one",
    "apply_pattern",
    "LOGIC_SLOTS",
    "LEFT",
    "RIGHT",
]
