import random

import pytest
from pygame.math import Vector2

from river.layout.config import PatternConfig
from river.layout.model import LayoutBlock, PathPoint
from river.layout.patterns import (
    CLUSTER_JITTER,
    LEFT,
    RIGHT,
    PatternContext,
    apply_pattern,
    default_side,
    lateral_range,
    resolve_count,
)


def _point(boat_offset: float = 0.0, bank_dist: float = 25.0) -> PathPoint:
    return PathPoint(
        position=Vector2(0.0, 0.0),
        tangent=Vector2(0.0, -1.0),
        normal=Vector2(1.0, 0.0),
        bank_dist=bank_dist,
        arc_length=0.0,
        boat_offset=boat_offset,
    )


def _path(count: int = 101, boat_offset: float = 0.0):
    return [
        PathPoint(
            position=Vector2(0.0, -float(i)),
            tangent=Vector2(0.0, -1.0),
            normal=Vector2(1.0, 0.0),
            bank_dist=25.0,
            arc_length=float(i),
            boat_offset=boat_offset,
        )
        for i in range(count)
    ]


def _context(seed: int = 1, boat_offset: float = 0.0, water_tags=frozenset()) -> PatternContext:
    path = _path(boat_offset=boat_offset)
    return PatternContext(
        path=path,
        i_start=0.0,
        i_end=100.0,
        length=100.0,
        progress=0.5,
        rng=random.Random(seed),
        water_tags=frozenset(water_tags),
        block=LayoutBlock(i_start=0, i_end=100),
    )


def _pattern(logic: str, place: str = "slalom", count: int = 4, tags=("rock",)) -> PatternConfig:
    return PatternConfig(
        name=logic,
        logic=logic,
        place=place,
        density=(1.0, 1.0),
        tags=tuple(tags),
        min_count=count,
        max_count=count,
    )


def test_resolve_count_uses_density_and_clamps() -> None:
    rng = random.Random(0)
    exact = PatternConfig("p", "scatter", "path", (2.0, 2.0), ("rock",))
    assert resolve_count(exact, 300.0, 0.3, rng) == 6
    floor = PatternConfig("p", "scatter", "path", (2.0, 2.0), ("rock",), min_count=10)
    assert resolve_count(floor, 300.0, 0.3, rng) == 10
    ceiling = PatternConfig("p", "scatter", "path", (2.0, 2.0), ("rock",), max_count=3)
    assert resolve_count(ceiling, 300.0, 0.3, rng) == 3


def test_resolve_count_rounds_fraction_randomly() -> None:
    pattern = PatternConfig("p", "scatter", "path", (1.0, 1.0), ("rock",))
    rng = random.Random(5)
    counts = {resolve_count(pattern, 150.0, 0.0, rng) for _ in range(200)}
    assert counts == {1, 2}


def test_density_is_interpolated_over_progress() -> None:
    pattern = PatternConfig("p", "scatter", "path", (0.5, 4.0), ("rock",))
    assert pattern.density_at(0.0) == pytest.approx(0.5)
    assert pattern.density_at(1.0) == pytest.approx(4.0)
    assert pattern.density_at(0.5) == pytest.approx(2.25)


def test_lateral_ranges_by_place() -> None:
    point = _point(boat_offset=5.0)
    assert lateral_range("slalom", point, RIGHT, False) == (10.0, 23.0)
    assert lateral_range("slalom", point, LEFT, False) == (-23.0, 0.0)
    assert lateral_range("shore", point, RIGHT, True) == (12.5, 25.0)
    assert lateral_range("shore", point, LEFT, True) == (-25.0, -12.5)
    assert lateral_range("shore", point, RIGHT, False) == (25.0, 40.0)
    assert lateral_range("shore", point, LEFT, False) == (-40.0, -25.0)
    assert lateral_range("path", point, LEFT, False) == (3.0, 7.0)


def test_slalom_range_collapses_against_the_bank() -> None:
    point = _point(boat_offset=22.0)
    assert lateral_range("slalom", point, RIGHT, False) == (23.0, 23.0)


def test_default_side_avoids_the_boat() -> None:
    rng = random.Random(0)
    assert default_side("slalom", _point(boat_offset=3.0), rng) == LEFT
    assert default_side("shore", _point(boat_offset=-3.0), rng) == RIGHT
    sides = {default_side("path", _point(), rng) for _ in range(50)}
    assert sides == {LEFT, RIGHT}


def test_sequence_is_evenly_spaced() -> None:
    ctx = _context()
    assert apply_pattern(_pattern("sequence"), ctx) == 4
    indices = [placement.index for placement in ctx.block.placements["rock"]]
    assert indices == pytest.approx([12.5, 37.5, 62.5, 87.5])


def test_staggered_alternates_sides() -> None:
    ctx = _context()
    apply_pattern(_pattern("staggered"), ctx)
    placements = ctx.block.placements["rock"]
    assert [p.range[1] < 0.0 for p in placements] == [True, False, True, False]


def test_gate_places_pairs_on_both_sides() -> None:
    ctx = _context()
    apply_pattern(_pattern("gate"), ctx)
    placements = ctx.block.placements["rock"]
    assert placements[0].index == placements[1].index
    assert placements[2].index == placements[3].index
    assert placements[0].index < placements[2].index
    assert placements[0].range[1] < 0.0 < placements[1].range[0]


def test_cluster_stays_tight() -> None:
    ctx = _context(seed=3)
    apply_pattern(_pattern("cluster", count=6), ctx)
    indices = [placement.index for placement in ctx.block.placements["rock"]]
    assert len(indices) == 6
    assert max(indices) - min(indices) <= CLUSTER_JITTER


def test_scatter_stays_in_range_and_picks_tags() -> None:
    ctx = _context(seed=8)
    apply_pattern(_pattern("scatter", place="path", count=40, tags=("bottle", "duckling")), ctx)
    assert set(ctx.block.placements) == {"bottle", "duckling"}
    for items in ctx.block.placements.values():
        for placement in items:
            assert 0.0 <= placement.index <= 100.0
            assert placement.aggressiveness is None


def test_shore_placements_carry_aggressiveness() -> None:
    ctx = _context(seed=2)
    apply_pattern(_pattern("scatter", place="shore", count=10, tags=("bear",)), ctx)
    for placement in ctx.block.placements["bear"]:
        assert 0.35 - 1e-9 <= placement.aggressiveness <= 0.65 + 1e-9


def test_degenerate_inputs_place_nothing() -> None:
    ctx = _context()
    assert apply_pattern(_pattern("scatter", tags=()), ctx) == 0
    ctx.i_end = ctx.i_start
    assert apply_pattern(_pattern("scatter"), ctx) == 0
    assert ctx.block.count() == 0
