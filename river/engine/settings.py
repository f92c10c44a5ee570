"""World generation settings loaded from settings.json."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

SETTINGS_PATH = Path("settings.json")


@dataclass(frozen=True)
class WorldSettings:
    """Tunables shared by the biome window, layout engine and population jobs."""

    seed: int = 1337
    filler_biome: str = "happy"
    debug_biome: Optional[str] = None
    enabled_biomes: Tuple[str, ...] = field(default_factory=tuple)
    sample_step: float = 10.0
    population_budget: int = 10

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorldSettings":
        defaults = cls()
        budget = int(data.get("populationBudget", defaults.population_budget))
        step = float(data.get("sampleStep", defaults.sample_step))
        return cls(
            seed=int(data.get("seed", defaults.seed)),
            filler_biome=str(data.get("fillerBiome", defaults.filler_biome)),
            debug_biome=data.get("debugBiome") or None,
            enabled_biomes=tuple(data.get("enabledBiomes", ())),
            sample_step=step if step > 0.0 else defaults.sample_step,
            population_budget=max(1, budget),
        )

    @classmethod
    def from_settings(cls, settings_path: Optional[Path] = None) -> "WorldSettings":
        settings_path = settings_path or SETTINGS_PATH
        if not settings_path.exists():
            return cls()
        try:
            data = json.loads(settings_path.read_text())
        except json.JSONDecodeError:
            return cls()
        if not isinstance(data, dict):
            return cls()
        return cls.from_dict(data.get("world", {}))


__all__ = ["WorldSettings", "SETTINGS_PATH"]
