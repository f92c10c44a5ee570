"""Declarative layout configuration: patterns, stages and tracks."""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional, Sequence, Tuple

LOGICS = ("scatter", "sequence", "gate", "staggered", "cluster")
PLACES = ("path", "slalom", "shore")


class LayoutConfigError(ValueError):
    """Raised when a layout configuration cannot be built."""


@dataclass(frozen=True)
class PatternConfig:
    """A reusable distribution rule.

    ``density`` is the expected number of instances per 100 units at the start
    and at the end of the biome.
    """

    name: str
    logic: str
    place: str
    density: Tuple[float, float]
    tags: Tuple[str, ...]
    min_count: Optional[int] = None
    max_count: Optional[int] = None

    def density_at(self, progress: float) -> float:
        start, end = self.density
        return start + progress * (end - start)

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any]) -> "PatternConfig":
        logic = data.get("logic", "scatter")
        place = data.get("place", "path")
        if logic not in LOGICS:
            raise LayoutConfigError(f"Pattern '{name}' has unknown logic '{logic}'")
        if place not in PLACES:
            raise LayoutConfigError(f"Pattern '{name}' has unknown place '{place}'")
        density = tuple(float(v) for v in data.get("density", (1.0, 1.0)))
        if len(density) != 2 or min(density) < 0.0:
            raise LayoutConfigError(f"Pattern '{name}' density must be two non-negative numbers")
        min_count = data.get("minCount")
        max_count = data.get("maxCount")
        if min_count is not None and max_count is not None and min_count > max_count:
            raise LayoutConfigError(f"Pattern '{name}' has minCount above maxCount")
        return cls(
            name=name,
            logic=logic,
            place=place,
            density=density,
            tags=tuple(data.get("tags", ())),
            min_count=None if min_count is None else int(min_count),
            max_count=None if max_count is None else int(max_count),
        )


@dataclass(frozen=True)
class PatternChoice:
    pattern: str
    weight: float = 1.0


@dataclass(frozen=True)
class StageConfig:
    """Procedural rule-set eligible within ``progress_range`` of the biome.

    One pattern is drawn from every entry of ``choice_sets`` each time the
    stage is instantiated.
    """

    name: str
    progress_range: Tuple[float, float]
    choice_sets: Tuple[Tuple[PatternChoice, ...], ...]

    def contains(self, progress: float) -> bool:
        return self.progress_range[0] <= progress < self.progress_range[1]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StageConfig":
        name = data.get("name", "stage")
        low, high = (float(v) for v in data.get("progress", (0.0, 1.0)))
        if not 0.0 <= low <= high <= 1.0:
            raise LayoutConfigError(f"Stage '{name}' progress range [{low}, {high}] is invalid")
        choice_sets = tuple(
            tuple(PatternChoice(entry["pattern"], float(entry.get("weight", 1.0))) for entry in choices)
            for choices in data.get("patterns", ())
        )
        return cls(name=name, progress_range=(low, high), choice_sets=choice_sets)


@dataclass(frozen=True)
class ExplicitPlacementConfig:
    """A unique, non-procedural placement at biome progress ``at``."""

    name: str
    place: str
    at: float
    tag: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ExplicitPlacementConfig":
        name = data.get("name", data["tag"])
        place = data.get("place", "shore")
        at = float(data["at"])
        if place not in PLACES:
            raise LayoutConfigError(f"Placement '{name}' has unknown place '{place}'")
        if not 0.0 <= at <= 1.0:
            raise LayoutConfigError(f"Placement '{name}' must sit in [0, 1], got {at}")
        return cls(name=name, place=place, at=at, tag=data["tag"])


@dataclass(frozen=True)
class TrackConfig:
    name: str
    stages: Tuple[StageConfig, ...] = ()
    placements: Tuple[ExplicitPlacementConfig, ...] = ()

    @property
    def procedural(self) -> bool:
        return bool(self.stages)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TrackConfig":
        name = data.get("name", "track")
        if data.get("stages") and data.get("placements"):
            raise LayoutConfigError(f"Track '{name}' mixes procedural stages and explicit placements")
        return cls(
            name=name,
            stages=tuple(StageConfig.from_dict(stage) for stage in data.get("stages", ())),
            placements=tuple(ExplicitPlacementConfig.from_dict(p) for p in data.get("placements", ())),
        )


@dataclass(frozen=True)
class LayoutConfig:
    patterns: Mapping[str, PatternConfig]
    tracks: Tuple[TrackConfig, ...]
    water_entity_tags: FrozenSet[str] = frozenset()
    weave_length: Tuple[float, float] = (200.0, 100.0)

    def __post_init__(self) -> None:
        object.__setattr__(self, "patterns", MappingProxyType(dict(self.patterns)))
        for track in self.tracks:
            for stage in track.stages:
                for choices in stage.choice_sets:
                    for choice in choices:
                        if choice.pattern not in self.patterns:
                            raise LayoutConfigError(
                                f"Stage '{stage.name}' of track '{track.name}' "
                                f"references unknown pattern '{choice.pattern}'"
                            )
        if min(self.weave_length) <= 0.0:
            raise LayoutConfigError("weaveLength entries must be positive")

    @classmethod
    def empty(cls) -> "LayoutConfig":
        return cls(patterns={}, tracks=())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LayoutConfig":
        patterns: Dict[str, PatternConfig] = {
            name: PatternConfig.from_dict(name, entry) for name, entry in data.get("patterns", {}).items()
        }
        weave: Sequence[float] = data.get("weaveLength", (200.0, 100.0))
        return cls(
            patterns=patterns,
            tracks=tuple(TrackConfig.from_dict(track) for track in data.get("tracks", ())),
            water_entity_tags=frozenset(data.get("waterEntityTags", ())),
            weave_length=(float(weave[0]), float(weave[1])),
        )


__all__ = [
    "LOGICS",
    "PLACES",
    "LayoutConfig",
    "LayoutConfigError",
    "PatternConfig",
    "PatternChoice",
    "StageConfig",
    "TrackConfig",
    "ExplicitPlacementConfig",
]
