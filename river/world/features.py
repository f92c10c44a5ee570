"""Per-biome feature handles and the registry that selects them by tag."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, NamedTuple, Optional, Tuple

from pygame.math import Vector3

from river.layout.config import LayoutConfig
from river.math.interpolation import hex_to_color, interpolate_keyframes


class FogRange(NamedTuple):
    near: float
    far: float


class SkyGradient(NamedTuple):
    top: Vector3
    bottom: Vector3


# [night, sunset, noon]
DEFAULT_SKY_TOP = (0x1A1A3A, 0x967BB6, 0x4488FF)
DEFAULT_SKY_BOTTOM = (0x2D2D44, 0xFF9966, 0xCCDDFF)


class CatalogError(ValueError):
    """Raised when a biome definition is malformed or registered twice."""


@dataclass(frozen=True, eq=False)
class FeatureHandle:
    """Data and strategies for one biome type.

    Colours are unit-range ``Vector3``. The layout factory is called once per
    biome instance; instances cache what it produces.
    """

    tag: str
    length: float
    ground: Vector3
    tint: Optional[Vector3] = None
    fog: float = 0.0
    fog_near_far: FogRange = FogRange(100.0, 800.0)
    sky_top: Tuple[Vector3, Vector3, Vector3] = field(
        default_factory=lambda: tuple(hex_to_color(c) for c in DEFAULT_SKY_TOP)
    )
    sky_bottom: Tuple[Vector3, Vector3, Vector3] = field(
        default_factory=lambda: tuple(hex_to_color(c) for c in DEFAULT_SKY_BOTTOM)
    )
    amplitude: float = 1.0
    width: float = 1.0
    layout_factory: Optional[Callable[[], LayoutConfig]] = field(default=None, compare=False, repr=False)
    decoration: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.length <= 0.0:
            raise CatalogError(f"Biome '{self.tag}' needs a positive length, got {self.length}")

    def ground_color(self) -> Vector3:
        return Vector3(self.ground)

    def screen_tint(self) -> Vector3:
        return Vector3(self.tint if self.tint is not None else self.ground)

    def sky_gradient(self, dayness: float) -> SkyGradient:
        return SkyGradient(
            top=interpolate_keyframes(self.sky_top, dayness),
            bottom=interpolate_keyframes(self.sky_bottom, dayness),
        )

    def fog_density(self) -> float:
        return self.fog

    def fog_range(self) -> FogRange:
        return self.fog_near_far

    def amplitude_multiplier(self) -> float:
        return self.amplitude

    def width_multiplier(self) -> float:
        return self.width

    def layout_config(self) -> LayoutConfig:
        if self.layout_factory is None:
            return LayoutConfig.empty()
        return self.layout_factory()

    def decoration_config(self) -> Mapping[str, Any]:
        return self.decoration

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FeatureHandle":
        tag = data["id"]
        layout_data = data.get("layout")
        layout = LayoutConfig.from_dict(layout_data) if layout_data else LayoutConfig.empty()
        sky = data.get("sky", {})
        fog_range = data.get("fogRange", (100.0, 800.0))
        tint = data.get("screenTint")
        return cls(
            tag=tag,
            length=float(data["length"]),
            ground=hex_to_color(data["groundColor"]),
            tint=hex_to_color(tint) if tint is not None else None,
            fog=float(data.get("fogDensity", 0.0)),
            fog_near_far=FogRange(float(fog_range[0]), float(fog_range[1])),
            sky_top=tuple(hex_to_color(c) for c in sky.get("top", DEFAULT_SKY_TOP)),
            sky_bottom=tuple(hex_to_color(c) for c in sky.get("bottom", DEFAULT_SKY_BOTTOM)),
            amplitude=float(data.get("amplitudeMultiplier", 1.0)),
            width=float(data.get("widthMultiplier", 1.0)),
            layout_factory=lambda: layout,
            decoration=dict(data.get("decoration", {})),
        )


class FeatureCatalog:
    """Registry of feature handles keyed by biome tag."""

    def __init__(self, handles: Iterable[FeatureHandle] = ()) -> None:
        self._handles: Dict[str, FeatureHandle] = {}
        for handle in handles:
            self.register(handle)

    def register(self, handle: FeatureHandle) -> None:
        if handle.tag in self._handles:
            raise CatalogError(f"Biome '{handle.tag}' is already registered")
        self._handles[handle.tag] = handle

    def get(self, tag: str) -> FeatureHandle:
        try:
            return self._handles[tag]
        except KeyError:
            raise CatalogError(f"Biome '{tag}' is not registered") from None

    def __contains__(self, tag: object) -> bool:
        return tag in self._handles

    def tags(self) -> List[str]:
        return list(self._handles)

    def subset(self, tags: Iterable[str]) -> "FeatureCatalog":
        return FeatureCatalog(self.get(tag) for tag in tags)


__all__ = ["FeatureHandle", "FeatureCatalog", "CatalogError", "FogRange", "SkyGradient"]
