"""Generated layout data: path points, placements and layout blocks."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from river.world.geometry import GeometrySample


@dataclass
class PathPoint(GeometrySample):
    """Geometry sample plus the signed lateral offset of the boat path."""

    boat_offset: float = 0.0


@dataclass
class Placement:
    index: float  # fractional index into the layout path
    range: Tuple[float, float]  # lateral offset range along the normal
    aggressiveness: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"index": self.index, "range": list(self.range)}
        if self.aggressiveness is not None:
            data["aggressiveness"] = self.aggressiveness
        return data


@dataclass
class LayoutBlock:
    i_start: int
    i_end: int
    placements: Dict[str, List[Placement]] = field(default_factory=dict)

    def add(self, tag: str, placement: Placement) -> None:
        self.placements.setdefault(tag, []).append(placement)

    def count(self) -> int:
        return sum(len(items) for items in self.placements.values())


@dataclass
class BoatPathLayout:
    path: List[PathPoint]
    sections: List[LayoutBlock]

    @classmethod
    def empty(cls, path: Optional[List[PathPoint]] = None) -> "BoatPathLayout":
        return cls(path=path or [], sections=[])

    def placements(self) -> Iterator[Tuple[str, Placement]]:
        for block in self.sections:
            for tag, items in block.placements.items():
                for placement in items:
                    yield tag, placement

    def total_arc_length(self) -> float:
        return self.path[-1].arc_length if self.path else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "arc_length": self.total_arc_length(),
            "points": len(self.path),
            "sections": [
                {
                    "i_start": block.i_start,
                    "i_end": block.i_end,
                    "placements": {
                        tag: [placement.to_dict() for placement in items]
                        for tag, items in block.placements.items()
                    },
                }
                for block in self.sections
            ],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)


__all__ = ["PathPoint", "Placement", "LayoutBlock", "BoatPathLayout"]
