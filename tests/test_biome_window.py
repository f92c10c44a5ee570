import random
from itertools import pairwise

import pytest
from pygame.math import Vector3

from river.engine.logger import quiet_logger
from river.engine.settings import WorldSettings
from river.world.biome_catalog import FILLER_BIOME, default_catalog
from river.world.biome_window import POSITIVE, BiomeDeck, BiomeSequence, BiomeWindow
from river.world.features import CatalogError, FeatureCatalog, FeatureHandle, FogRange


def _window(**settings) -> BiomeWindow:
    return BiomeWindow(default_catalog(), quiet_logger(), WorldSettings(**settings))


def _long_catalog() -> FeatureCatalog:
    return FeatureCatalog(
        [
            FeatureHandle(tag="calm", length=2000.0, ground=Vector3(0.2, 0.6, 0.2), fog=0.0),
            FeatureHandle(tag="storm", length=2000.0, ground=Vector3(0.4, 0.4, 0.8), fog=1.0),
        ]
    )


def _long_window() -> BiomeWindow:
    window = BiomeWindow(_long_catalog(), quiet_logger(), WorldSettings(filler_biome="calm"))
    window.ensure_window(0.0)
    return window


def test_window_stays_contiguous_while_moving() -> None:
    window = _window(seed=11)
    for center in (0.0, 3000.0, 9000.0, -4000.0, 500.0, -25000.0):
        window.ensure_window(center)
        instances = window.instances()
        for instance in instances:
            assert instance.z_min < instance.z_max
        for current, following in pairwise(instances):
            assert current.z_max == following.z_min


def test_window_covers_radius_with_spare_instance() -> None:
    window = _window(seed=3)
    for center in (0.0, 1234.5, 8000.0, -6000.0):
        window.ensure_window(center)
        instances = window.instances()
        assert instances[1].z_min <= center - BiomeWindow.WINDOW_RADIUS
        assert instances[-2].z_max >= center + BiomeWindow.WINDOW_RADIUS
        assert window.instance_at(center - BiomeWindow.WINDOW_RADIUS) in instances
        assert window.instance_at(center + BiomeWindow.WINDOW_RADIUS) in instances


def test_ensure_window_is_idempotent() -> None:
    window = _window()
    window.ensure_window(750.0)
    before = window.instances()
    window.ensure_window(750.0)
    window.update(750.0)
    after = window.instances()
    assert len(before) == len(after)
    assert all(a is b for a, b in zip(before, after))


def test_prune_drops_far_instances_with_hysteresis() -> None:
    window = _window(seed=5)
    window.ensure_window(0.0)
    origin = window.instances()[0]
    center = 20000.0
    window.ensure_window(center)
    instances = window.instances()
    assert origin not in instances
    assert instances[2].z_min >= center - BiomeWindow.PRUNE_RADIUS
    assert instances[-3].z_max <= center + BiomeWindow.PRUNE_RADIUS
    assert len(instances) < 16


def test_half_open_membership() -> None:
    window = _window(seed=21)
    window.ensure_window(0.0)
    instances = window.instances()
    assert window.instance_at(instances[0].z_min) is instances[0]
    for previous, instance in pairwise(instances):
        assert window.instance_at(instance.z_max) is instance
        assert window.instance_at(instance.z_min + 0.5) is instance
        assert window.instance_at(instance.z_min) is previous
        assert window.boundaries_at(instance.z_max) == (instance.z_min, instance.z_max)
        assert window.biome_tag_at(instance.z_max) == instance.tag


def test_out_of_window_query_returns_nearest_end() -> None:
    window = _window()
    window.ensure_window(0.0)
    instances = window.instances()
    assert window.instance_at(instances[0].z_min - 10000.0) is instances[0]
    assert window.instance_at(instances[-1].z_max + 1.0e6) is instances[-1]


def test_deck_alternates_filler_and_shuffled_types() -> None:
    catalog = default_catalog()
    deck = BiomeDeck(FILLER_BIOME, catalog.tags(), random.Random(3))
    sequence = BiomeSequence(POSITIVE, deck, catalog, world_seed=3)
    anchor = 0.0
    drawn = []
    for _ in range(10):
        instance = sequence.next(anchor)
        assert instance.z_min == anchor
        anchor = instance.z_max
        drawn.append(instance.tag)
    assert all(tag == FILLER_BIOME for tag in drawn[0::2])
    others = drawn[1::2]
    assert FILLER_BIOME not in others
    # one full permutation before any repeat
    assert sorted(others) == sorted(tag for tag in catalog.tags() if tag != FILLER_BIOME)


def test_fresh_window_alternates_in_both_directions() -> None:
    window = _window(seed=99)
    window.ensure_window(0.0, radius=15000.0)
    instances = window.instances()
    positive = [instance for instance in instances if instance.z_min >= 0.0]
    negative = [instance for instance in reversed(instances) if instance.z_max <= 0.0]
    for side in (positive, negative):
        tags = [instance.tag for instance in side[:10]]
        assert len(tags) == 10
        assert all(tag == FILLER_BIOME for tag in tags[0::2])
        assert all(tag != FILLER_BIOME for tag in tags[1::2])


def test_window_is_deterministic_per_seed() -> None:
    first = _window(seed=42)
    second = _window(seed=42)
    first.ensure_window(0.0, radius=10000.0)
    second.ensure_window(0.0, radius=10000.0)
    assert [(i.tag, i.z_min, i.z_max, i.seed) for i in first.instances()] == [
        (i.tag, i.z_min, i.z_max, i.seed) for i in second.instances()
    ]


def test_debug_biome_forces_single_type() -> None:
    window = _window(debug_biome="swamp")
    window.ensure_window(0.0)
    assert {instance.tag for instance in window.instances()} == {"swamp"}


def test_unknown_filler_is_rejected() -> None:
    with pytest.raises(CatalogError):
        _window(filler_biome="volcano")


def test_blend_weights_at_and_near_boundary() -> None:
    window = _window()
    window.ensure_window(0.0)
    at_boundary = window.mixture(0.0)
    assert at_boundary.first.z_max == 0.0
    assert at_boundary.second.z_min == 0.0
    assert at_boundary.w1 == pytest.approx(0.5)
    assert at_boundary.w2 == pytest.approx(0.5)

    inside = window.mixture(10.0)
    assert inside.first.z_min == 0.0
    assert inside.w1 == pytest.approx(0.7)
    assert inside.w2 == pytest.approx(0.3)

    mirrored = window.mixture(-10.0)
    assert mirrored.w1 == pytest.approx(0.7)

    interior = window.mixture(300.0)
    assert interior.first is interior.second
    assert (interior.w1, interior.w2) == (1.0, 0.0)


def test_blended_environment_attributes() -> None:
    window = _long_window()
    assert window.fog_density(2000.0) == pytest.approx(0.5)
    assert window.fog_density(2010.0) == pytest.approx(0.7)
    assert window.fog_density(1990.0) == pytest.approx(0.3)
    assert window.fog_density(1000.0) == pytest.approx(0.0)

    color = window.ground_color(2000.0)
    assert color.x == pytest.approx(0.3)
    assert color.z == pytest.approx(0.5)

    fog_range = window.fog_range(2000.0)
    assert isinstance(fog_range, FogRange)
    assert fog_range.far == pytest.approx(800.0)

    assert window.biome_factor(2010.0, "storm") == pytest.approx(0.7)
    assert window.biome_factor(2010.0, "calm") == pytest.approx(0.3)
    assert window.biome_factor(1000.0, "storm") == 0.0

    picked = window.blended_attribute(2000.0, lambda f1, f2, w1, w2: (f1.tag, f2.tag, w1))
    assert picked[:2] == ("calm", "storm")


def test_feature_segments_tile_the_range() -> None:
    window = _window(seed=8)
    window.ensure_window(0.0)
    for start, end in ((-1500.0, 1800.0), (1800.0, -1500.0), (-10.0, 10.0), (250.0, 250.0)):
        segments = window.feature_segments(start, end)
        assert segments
        assert segments[0].z_min == start
        assert segments[-1].z_max == end
        for current, following in pairwise(segments):
            assert current.z_max == following.z_min
        for segment in segments:
            middle = 0.5 * (segment.z_min + segment.z_max)
            assert segment.features is window.instance_at(middle).features


def test_range_inside_one_biome_is_one_segment() -> None:
    window = _long_window()
    segments = window.feature_segments(-500.0, -1000.0)
    assert len(segments) == 1
    segment = segments[0]
    assert (segment.z_min, segment.z_max) == (-500.0, -1000.0)
    assert (segment.biome_z_min, segment.biome_z_max) == (-2000.0, 0.0)
    assert segment.features is window.catalog.get("calm")
