"""Incremental conversion of biome layouts into spawn requests for a Z chunk."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from pygame.math import Vector2

from river.engine.logger import GameLogger
from river.engine.loop import StepStatus
from river.layout.engine import PathLayoutEngine
from river.layout.model import BoatPathLayout, PathPoint, Placement
from river.world.biome_window import BiomeWindow, FeatureSegment
from river.world.geometry import path_index_by_z, path_point


@dataclass(frozen=True)
class SpawnRequest:
    """Everything a spawner needs to instantiate one placed entity."""

    tag: str
    point: PathPoint
    lateral_range: Tuple[float, float]
    aggressiveness: Optional[float]
    biome_tag: str
    biome_z_min: float
    biome_z_max: float

    def position(self, lateral: float) -> Vector2:
        """World (x, z) at ``lateral`` units along the path normal."""

        return self.point.position + self.point.normal * lateral


class PopulationJob:
    """Resumable walk over the placements that fall inside ``[z_start, z_end]``.

    Each :meth:`step` hands at most ``budget`` requests to ``sink`` and keeps
    an explicit cursor (segment, entry) so the next call continues exactly
    where the previous one stopped.
    """

    def __init__(
        self,
        window: BiomeWindow,
        engine: PathLayoutEngine,
        z_start: float,
        z_end: float,
        sink: Callable[[SpawnRequest], None],
        logger: GameLogger,
    ) -> None:
        self.window = window
        self.engine = engine
        self.z_start = z_start
        self.z_end = z_end
        self.sink = sink
        self._log = logger.channel("population")
        window.ensure_range(z_start, z_end)
        self._segments: List[FeatureSegment] = window.feature_segments(z_start, z_end)
        self._segment_index = 0
        self._layout: Optional[BoatPathLayout] = None
        self._entries: List[Tuple[str, Placement]] = []
        self._entry_index = 0
        self._loaded = False
        self.emitted = 0
        self._log.debug(
            "Population job [%.1f, %.1f] over %d segment(s)", z_start, z_end, len(self._segments)
        )

    @property
    def done(self) -> bool:
        return not self._has_pending()

    def step(self, budget: int) -> StepStatus:
        processed = 0
        while processed < budget and self._has_pending():
            tag, placement = self._entries[self._entry_index]
            self._entry_index += 1
            self._emit(tag, placement)
            processed += 1
        if self._has_pending():
            return StepStatus.MORE
        self._log.debug("Population job [%.1f, %.1f] finished: %d request(s)", self.z_start, self.z_end, self.emitted)
        return StepStatus.DONE

    def _has_pending(self) -> bool:
        while self._segment_index < len(self._segments):
            if not self._loaded:
                self._load_segment(self._segments[self._segment_index])
            if self._entry_index < len(self._entries):
                return True
            self._segment_index += 1
            self._loaded = False
        return False

    def _load_segment(self, segment: FeatureSegment) -> None:
        layout = segment.instance.get_layout(self.engine)
        self._layout = layout
        self._entry_index = 0
        self._loaded = True
        if len(layout.path) < 2:
            self._entries = []
            return
        first = path_index_by_z(layout.path, segment.z_min)
        second = path_index_by_z(layout.path, segment.z_max)
        low, high = min(first, second), max(first, second)
        # The path ends at the biome's z_min; the chunk reaching it owns the last index.
        closing = min(segment.z_min, segment.z_max) <= segment.biome_z_min
        self._entries = [
            (tag, p)
            for tag, p in layout.placements()
            if low <= p.index < high or (closing and p.index == high)
        ]

    def _emit(self, tag: str, placement: Placement) -> None:
        segment = self._segments[self._segment_index]
        instance = segment.instance
        request = SpawnRequest(
            tag=tag,
            point=path_point(self._layout.path, placement.index),
            lateral_range=placement.range,
            aggressiveness=placement.aggressiveness,
            biome_tag=instance.tag,
            biome_z_min=instance.z_min,
            biome_z_max=instance.z_max,
        )
        self.sink(request)
        self.emitted += 1


__all__ = ["SpawnRequest", "PopulationJob"]
