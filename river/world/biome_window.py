"""Sliding window of biome instances along the river's Z axis.

The window grows on demand in both directions from two independent seeded
generators and prunes far-away instances with hysteresis: an end instance is
only dropped once the third instance from that end already lies beyond the
prune radius, so queries just inside the window never regenerate history.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple, TypeVar

from pygame.math import Vector3

from river.engine.logger import GameLogger
from river.engine.settings import WorldSettings
from river.layout.engine import PathLayoutEngine
from river.layout.model import BoatPathLayout
from river.math.interpolation import lerp, mix_linear
from river.math.seeding import derive_rng, hash_seed
from river.world.features import FeatureCatalog, FeatureHandle, FogRange, SkyGradient

T = TypeVar("T")

NEGATIVE = -1
POSITIVE = 1


@dataclass(frozen=True, eq=False)
class BiomeInstance:
    """One materialised biome occupying ``(z_min, z_max]``."""

    tag: str
    z_min: float
    z_max: float
    features: FeatureHandle
    index: int = 0
    direction: int = POSITIVE
    seed: int = 0
    _cache: Dict[str, BoatPathLayout] = field(default_factory=dict, repr=False)

    @property
    def length(self) -> float:
        return self.z_max - self.z_min

    def rng(self) -> random.Random:
        return random.Random(self.seed)

    @property
    def has_layout(self) -> bool:
        return "layout" in self._cache

    def get_layout(self, engine: PathLayoutEngine) -> BoatPathLayout:
        """Build the boat path layout on first access and keep it for the instance's lifetime."""

        layout = self._cache.get("layout")
        if layout is None:
            config = self.features.layout_config()
            layout = engine.create_layout((self.z_min, self.z_max), config, self.rng())
            self._cache["layout"] = layout
        return layout


class BiomeDeck:
    """Shuffle-and-draw source of biome tags.

    Even draws return the filler tag; odd draws pop from a shuffled permutation
    of the remaining tags, reshuffled whenever it runs out.
    """

    def __init__(self, filler: str, tags: Sequence[str], rng: random.Random) -> None:
        self.filler = filler
        self._tags = [tag for tag in tags if tag != filler]
        self._rng = rng
        self._pile: List[str] = []
        self._draws = 0

    @property
    def draws(self) -> int:
        return self._draws

    def draw(self) -> str:
        if self._draws % 2 == 0 or not self._tags:
            tag = self.filler
        else:
            if not self._pile:
                self._pile = list(self._tags)
                self._rng.shuffle(self._pile)
            tag = self._pile.pop()
        self._draws += 1
        return tag


class BiomeSequence:
    """Per-direction generator chaining new instances onto an anchor boundary."""

    def __init__(self, direction: int, deck: BiomeDeck, catalog: FeatureCatalog, world_seed: int) -> None:
        self.direction = direction
        self.deck = deck
        self.catalog = catalog
        self.world_seed = world_seed
        self._counts: Dict[str, int] = {}

    def next(self, anchor: float) -> BiomeInstance:
        tag = self.deck.draw()
        handle = self.catalog.get(tag)
        index = self._counts.get(tag, 0)
        self._counts[tag] = index + 1
        if self.direction > 0:
            z_min, z_max = anchor, anchor + handle.length
        else:
            z_min, z_max = anchor - handle.length, anchor
        return BiomeInstance(
            tag=tag,
            z_min=z_min,
            z_max=z_max,
            features=handle,
            index=index,
            direction=self.direction,
            seed=hash_seed(self.world_seed, self.direction, tag, index),
        )


@dataclass(frozen=True)
class FeatureSegment:
    """Part of a query range owned by one instance, in walk order."""

    features: FeatureHandle
    z_min: float  # where the walk entered the instance
    z_max: float  # where the walk left it
    biome_z_min: float
    biome_z_max: float
    instance: BiomeInstance


class BiomeMixture(NamedTuple):
    first: BiomeInstance
    second: BiomeInstance
    w1: float
    w2: float


class BiomeWindow:
    """Active biome instances covering a moving window of Z."""

    WINDOW_RADIUS = 2000.0
    PRUNE_RADIUS = 2500.0
    TRANSITION_WIDTH = 50.0
    NUDGE = 0.001

    def __init__(
        self,
        catalog: FeatureCatalog,
        logger: GameLogger,
        settings: Optional[WorldSettings] = None,
    ) -> None:
        self.settings = settings or WorldSettings()
        self.catalog = catalog
        self._log = logger.channel("biomes")
        filler = self.settings.filler_biome
        tags = list(self.settings.enabled_biomes or catalog.tags())
        if self.settings.debug_biome:
            filler = self.settings.debug_biome
            tags = [filler]
            self._log.info("Debug biome '%s' forced for every instance", filler)
        catalog.get(filler)
        for tag in tags:
            catalog.get(tag)
        seed = self.settings.seed
        self._negative = BiomeSequence(
            NEGATIVE, BiomeDeck(filler, tags, derive_rng(seed, "deck", NEGATIVE)), catalog, seed
        )
        self._positive = BiomeSequence(
            POSITIVE, BiomeDeck(filler, tags, derive_rng(seed, "deck", POSITIVE)), catalog, seed
        )
        self._instances: List[BiomeInstance] = []

    # ------------------------------------------------------------------
    # Window maintenance
    # ------------------------------------------------------------------
    def ensure_window(self, center_z: float, radius: float = WINDOW_RADIUS) -> None:
        """Cover ``[center_z - radius, center_z + radius]`` with one spare instance per side."""

        low = center_z - radius
        high = center_z + radius
        prune = radius + (self.PRUNE_RADIUS - self.WINDOW_RADIUS)
        instances = self._instances
        before = len(instances)
        if not instances:
            instances.append(self._negative.next(0.0))

        while len(instances) < 2 or instances[1].z_min > low:
            instances.insert(0, self._negative.next(instances[0].z_min))
        while len(instances) < 2 or instances[-2].z_max < high:
            instances.append(self._positive.next(instances[-1].z_max))
        grown = len(instances) - before

        pruned = 0
        while len(instances) > 2 and instances[2].z_min < center_z - prune:
            instances.pop(0)
            pruned += 1
        while len(instances) > 2 and instances[-3].z_max > center_z + prune:
            instances.pop()
            pruned += 1

        if grown > 0 or pruned > 0:
            self._log.debug(
                "Window at %.1f: +%d/-%d instances, now [%.1f, %.1f] (%d)",
                center_z,
                grown,
                pruned,
                instances[0].z_min,
                instances[-1].z_max,
                len(instances),
            )

    def update(self, z: float) -> None:
        self.ensure_window(z)

    def ensure_range(self, z_start: float, z_end: float) -> None:
        center = 0.5 * (z_start + z_end)
        self.ensure_window(center, max(self.WINDOW_RADIUS, 0.5 * abs(z_end - z_start)))

    def instances(self) -> Tuple[BiomeInstance, ...]:
        return tuple(self._instances)

    def __len__(self) -> int:
        return len(self._instances)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def _index_at(self, z: float) -> int:
        if not self._instances:
            self._log.warning("Query at %.1f before the window was built", z)
            self.ensure_window(z)
        instances = self._instances
        if z < instances[0].z_min or z > instances[-1].z_max:
            self._log.warning(
                "Query at %.1f outside active window [%.1f, %.1f]",
                z,
                instances[0].z_min,
                instances[-1].z_max,
            )
        if z <= instances[0].z_min:
            return 0
        if z > instances[-1].z_max:
            return len(instances) - 1
        low, high = 0, len(instances) - 1
        while low < high:
            mid = (low + high) // 2
            if instances[mid].z_max < z:
                low = mid + 1
            else:
                high = mid
        return low

    def instance_at(self, z: float) -> BiomeInstance:
        return self._instances[self._index_at(z)]

    def boundaries_at(self, z: float) -> Tuple[float, float]:
        instance = self.instance_at(z)
        return instance.z_min, instance.z_max

    def biome_tag_at(self, z: float) -> str:
        return self.instance_at(z).tag

    def feature_segments(self, z_start: float, z_end: float) -> List[FeatureSegment]:
        """Split ``[z_start, z_end]`` into per-instance pieces walking from start to end."""

        if z_start == z_end:
            instance = self.instance_at(z_start)
            return [self._segment(instance, z_start, z_end)]
        direction = 1.0 if z_end > z_start else -1.0
        segments: List[FeatureSegment] = []
        cursor = z_start
        while cursor != z_end:
            instance = self.instance_at(cursor + direction * self.NUDGE)
            if direction > 0:
                end = min(z_end, instance.z_max)
            else:
                end = max(z_end, instance.z_min)
            if (end - cursor) * direction <= 0.0:
                # Past the materialised set: the end instance owns the rest.
                end = z_end
            segments.append(self._segment(instance, cursor, end))
            cursor = end
        return segments

    @staticmethod
    def _segment(instance: BiomeInstance, start: float, end: float) -> FeatureSegment:
        return FeatureSegment(
            features=instance.features,
            z_min=start,
            z_max=end,
            biome_z_min=instance.z_min,
            biome_z_max=instance.z_max,
            instance=instance,
        )

    # ------------------------------------------------------------------
    # Blending
    # ------------------------------------------------------------------
    def mixture(self, z: float) -> BiomeMixture:
        """Owning instance, the neighbour across the nearest boundary and their weights."""

        index = self._index_at(z)
        instance = self._instances[index]
        half = 0.5 * self.TRANSITION_WIDTH
        to_min = z - instance.z_min
        to_max = instance.z_max - z
        if to_min < half:
            other = self._instances[index - 1] if index > 0 else instance
            w1 = lerp(0.5, 1.0, max(0.0, to_min) / half)
        elif to_max < half:
            other = self._instances[index + 1] if index + 1 < len(self._instances) else instance
            w1 = lerp(0.5, 1.0, max(0.0, to_max) / half)
        else:
            return BiomeMixture(instance, instance, 1.0, 0.0)
        return BiomeMixture(instance, other, w1, 1.0 - w1)

    def blended_attribute(self, z: float, mix: Callable[[FeatureHandle, FeatureHandle, float, float], T]) -> T:
        first, second, w1, w2 = self.mixture(z)
        return mix(first.features, second.features, w1, w2)

    def _blend(self, z: float, attribute: Callable[[FeatureHandle], Any]) -> Any:
        return self.blended_attribute(
            z, lambda f1, f2, w1, w2: mix_linear(attribute(f1), attribute(f2), w1, w2)
        )

    def fog_density(self, z: float) -> float:
        return self._blend(z, FeatureHandle.fog_density)

    def fog_range(self, z: float) -> FogRange:
        return self._blend(z, FeatureHandle.fog_range)

    def ground_color(self, z: float) -> Vector3:
        return self._blend(z, FeatureHandle.ground_color)

    def screen_tint(self, z: float) -> Vector3:
        return self._blend(z, FeatureHandle.screen_tint)

    def sky_gradient(self, z: float, dayness: float) -> SkyGradient:
        return self._blend(z, lambda features: features.sky_gradient(dayness))

    def amplitude_multiplier(self, z: float) -> float:
        return self._blend(z, FeatureHandle.amplitude_multiplier)

    def width_multiplier(self, z: float) -> float:
        return self._blend(z, FeatureHandle.width_multiplier)

    def biome_factor(self, z: float, tag: str) -> float:
        """Blended weight of biome ``tag`` at ``z`` in [0, 1]."""

        first, second, w1, w2 = self.mixture(z)
        factor = w1 if first.tag == tag else 0.0
        if second.tag == tag:
            factor += w2
        return factor


__all__ = [
    "BiomeWindow",
    "BiomeInstance",
    "BiomeDeck",
    "BiomeSequence",
    "BiomeMixture",
    "FeatureSegment",
    "NEGATIVE",
    "POSITIVE",
]
