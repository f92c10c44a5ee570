"""Boat path weaving and track/stage based placement layout for one biome."""
from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from river.engine.logger import GameLogger
from river.layout.config import LayoutConfig, PatternConfig, StageConfig, TrackConfig
from river.layout.model import BoatPathLayout, LayoutBlock, PathPoint
from river.layout.patterns import LEFT, RIGHT, PatternContext, apply_pattern, place_one
from river.math.interpolation import lerp
from river.world.geometry import GeometrySampler, path_index_by_arc_length


@dataclass
class GeneratedStage:
    """A stage instance; ``start``/``end`` are biome progress fractions."""

    config: StageConfig
    patterns: Tuple[PatternConfig, ...]
    start: float
    end: float


class PathLayoutEngine:
    """Build a :class:`BoatPathLayout` from river samples and a layout config.

    Generation never raises: short sample ranges, empty tracks and patterns
    without candidates simply produce empty stages, blocks or placement lists.
    """

    SAMPLE_STEP = 10.0
    MARGIN = 5.0
    WEAVE_AMPLITUDE = 0.7
    MAX_STAGES_PER_TRACK = 256

    def __init__(self, sampler: GeometrySampler, logger: GameLogger, sample_step: float = SAMPLE_STEP) -> None:
        self.sampler = sampler
        self.sample_step = sample_step
        self._log = logger.channel("layout")

    def create_layout(
        self,
        z_range: Tuple[float, float],
        config: LayoutConfig,
        rng: random.Random,
    ) -> BoatPathLayout:
        z_min, z_max = z_range
        # Direction of travel is -Z, so the path starts at z_max.
        samples = self.sampler.sample(z_max, z_min, self.sample_step)
        path = [
            PathPoint(
                position=s.position,
                tangent=s.tangent,
                normal=s.normal,
                bank_dist=s.bank_dist,
                arc_length=s.arc_length,
            )
            for s in samples
        ]
        if len(path) < 2 or path[-1].arc_length <= 0.0:
            self._log.debug("Biome [%.1f, %.1f] too short for a layout (%d samples)", z_min, z_max, len(path))
            return BoatPathLayout.empty(path)

        total = path[-1].arc_length
        generated = [self.generate_stages(track, config, total, rng) for track in config.tracks]
        crossings = self.crossings(generated[0] if generated else [], config, total)
        self.weave(path, crossings)
        sections = self._partition(path, crossings, config, generated, rng)
        layout = BoatPathLayout(path=path, sections=sections)
        self._log.info(
            "Layout for [%.1f, %.1f]: %d points, %d blocks, %d placements",
            z_min,
            z_max,
            len(path),
            len(sections),
            sum(block.count() for block in sections),
        )
        return layout

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------
    def generate_stages(
        self,
        track: TrackConfig,
        config: LayoutConfig,
        total_arc_length: float,
        rng: random.Random,
    ) -> List[GeneratedStage]:
        if not track.procedural or total_arc_length <= 0.0:
            return []
        stages: List[GeneratedStage] = []
        cursor = 0.0
        while cursor < 1.0 and len(stages) < self.MAX_STAGES_PER_TRACK:
            eligible = [stage for stage in track.stages if stage.contains(cursor)]
            if not eligible:
                upcoming = [s.progress_range[0] for s in track.stages if s.progress_range[0] > cursor]
                if not upcoming:
                    break
                cursor = min(upcoming)
                continue
            stage = rng.choice(eligible)
            patterns = self._draw_patterns(stage, config, rng)
            length = self._stage_length(stage, patterns, cursor, total_arc_length, rng)
            if length <= 0.0:
                self._log.debug("Track '%s' stopped at zero-length stage '%s'", track.name, stage.name)
                break
            end = cursor + length / total_arc_length
            stages.append(GeneratedStage(config=stage, patterns=patterns, start=cursor, end=end))
            cursor = end

        if stages:
            # Land the last stage exactly on its configured upper bound.
            scale = stages[-1].config.progress_range[1] / stages[-1].end
            for generated in stages:
                generated.start *= scale
                generated.end *= scale
        return stages

    def _draw_patterns(self, stage: StageConfig, config: LayoutConfig, rng: random.Random) -> Tuple[PatternConfig, ...]:
        drawn: List[PatternConfig] = []
        for choices in stage.choice_sets:
            if not choices:
                continue
            weights = [max(0.0, choice.weight) for choice in choices]
            if sum(weights) <= 0.0:
                choice = rng.choice(choices)
            else:
                choice = rng.choices(choices, weights=weights)[0]
            drawn.append(config.patterns[choice.pattern])
        return tuple(drawn)

    def _stage_length(
        self,
        stage: StageConfig,
        patterns: Sequence[PatternConfig],
        cursor: float,
        total_arc_length: float,
        rng: random.Random,
    ) -> float:
        lengths = []
        for pattern in patterns:
            density = pattern.density_at(cursor)
            if density <= 0.0:
                continue
            min_count = pattern.min_count if pattern.min_count and pattern.min_count > 0 else 1
            lengths.append(min_count / (density / 100.0))
        if not lengths:
            return (stage.progress_range[1] - cursor) * total_arc_length
        shortest = min(lengths)
        longest = max(lengths)
        return rng.uniform(longest, max(2.0 * shortest, longest))

    # ------------------------------------------------------------------
    # Weaving
    # ------------------------------------------------------------------
    def crossings(self, stages: Sequence[GeneratedStage], config: LayoutConfig, total_arc_length: float) -> List[float]:
        """Progress fractions where the boat path crosses the centreline."""

        if stages:
            points = [0.0] + [stage.end for stage in stages]
        else:
            points = [0.0]
            cursor = 0.0
            while cursor < 1.0:
                segment = lerp(config.weave_length[0], config.weave_length[1], cursor)
                cursor = min(1.0, cursor + segment / total_arc_length)
                points.append(cursor)
        crossings = sorted({min(1.0, max(0.0, p)) for p in points})
        if crossings[0] > 0.0:
            crossings.insert(0, 0.0)
        if crossings[-1] < 1.0:
            crossings.append(1.0)
        return crossings

    def weave(self, path: List[PathPoint], crossings: Sequence[float]) -> None:
        total = path[-1].arc_length
        side = 1.0
        k = 0
        for point in path:
            progress = point.arc_length / total
            while k < len(crossings) - 2 and progress > crossings[k + 1]:
                k += 1
                side = -side
            start, end = crossings[k], crossings[k + 1]
            segment = (progress - start) / (end - start) if end > start else 0.0
            segment = max(0.0, min(1.0, segment))
            width = max(0.0, point.bank_dist - self.MARGIN)
            point.boat_offset = math.sin(segment * math.pi) * side * self.WEAVE_AMPLITUDE * width

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------
    def _partition(
        self,
        path: List[PathPoint],
        crossings: Sequence[float],
        config: LayoutConfig,
        generated: Sequence[List[GeneratedStage]],
        rng: random.Random,
    ) -> List[LayoutBlock]:
        total = path[-1].arc_length
        last = len(path) - 1

        def index_at(progress: float) -> float:
            return path_index_by_arc_length(path, progress * total)

        bounds = [int(round(index_at(c))) for c in crossings]
        bounds[0] = 0
        bounds[-1] = last
        for k in range(1, len(bounds)):
            bounds[k] = min(last, max(bounds[k], bounds[k - 1]))

        sections: List[LayoutBlock] = []
        for k in range(len(crossings) - 1):
            block = LayoutBlock(i_start=bounds[k], i_end=bounds[k + 1])
            low, high = crossings[k], crossings[k + 1]
            closing = k == len(crossings) - 2
            for track, stages in zip(config.tracks, generated):
                for stage in stages:
                    start = max(low, stage.start)
                    end = min(high, stage.end)
                    if end <= start:
                        continue
                    context = PatternContext(
                        path=path,
                        i_start=index_at(start),
                        i_end=index_at(end),
                        length=(end - start) * total,
                        progress=0.5 * (start + end),
                        rng=rng,
                        water_tags=config.water_entity_tags,
                        block=block,
                    )
                    for pattern in stage.patterns:
                        apply_pattern(pattern, context)
                for explicit in track.placements:
                    if not (low <= explicit.at < high or (closing and explicit.at == high)):
                        continue
                    context = self._point_context(path, explicit.at, index_at(explicit.at), total, config, rng, block)
                    side = LEFT if rng.random() < 0.5 else RIGHT
                    place_one(context, explicit.place, explicit.tag, context.i_start, side)
            sections.append(block)
        return sections

    @staticmethod
    def _point_context(
        path: List[PathPoint],
        progress: float,
        index: float,
        total: float,
        config: LayoutConfig,
        rng: random.Random,
        block: LayoutBlock,
    ) -> PatternContext:
        return PatternContext(
            path=path,
            i_start=index,
            i_end=index,
            length=total,
            progress=progress,
            rng=rng,
            water_tags=config.water_entity_tags,
            block=block,
        )


__all__ = ["PathLayoutEngine", "GeneratedStage"]
