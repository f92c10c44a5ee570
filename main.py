"""Headless preview of the river biome window and boat path layouts."""
from __future__ import annotations

import cProfile
import io
import json
import pstats
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List

from river.engine.logger import init_logger
from river.engine.loop import StepDriver
from river.engine.settings import WorldSettings
from river.layout.engine import PathLayoutEngine
from river.world.biome_catalog import default_catalog
from river.world.biome_window import BiomeWindow
from river.world.geometry import RiverCourse
from river.world.population import PopulationJob, SpawnRequest

SETTINGS_PATH = Path("settings.json")
PREVIEW_CHUNK = 1000.0


def describe_window(window: BiomeWindow, engine: PathLayoutEngine) -> List[Dict[str, Any]]:
    summary = []
    for instance in window.instances():
        layout = instance.get_layout(engine)
        tags = Counter(tag for tag, _ in layout.placements())
        summary.append(
            {
                "tag": instance.tag,
                "z": [round(instance.z_min, 1), round(instance.z_max, 1)],
                "arc_length": round(layout.total_arc_length(), 1),
                "blocks": len(layout.sections),
                "placements": dict(sorted(tags.items())),
            }
        )
    return summary


def main() -> None:
    settings = WorldSettings.from_settings(SETTINGS_PATH)
    logger = init_logger(SETTINGS_PATH)
    window = BiomeWindow(default_catalog(), logger, settings)
    course = RiverCourse(seed=settings.seed, width_source=window)
    engine = PathLayoutEngine(course, logger, sample_step=settings.sample_step)

    window.ensure_window(0.0)
    requests: List[SpawnRequest] = []
    job = PopulationJob(window, engine, 0.0, -PREVIEW_CHUNK, requests.append, logger)
    driver = StepDriver(budget=settings.population_budget)

    profiler = cProfile.Profile()
    try:
        profiler.enable()
        steps = driver.run(job)
    finally:
        profiler.disable()

    report = {
        "seed": settings.seed,
        "window": describe_window(window, engine),
        "population": {
            "chunk": [0.0, -PREVIEW_CHUNK],
            "steps": steps,
            "requests": len(requests),
            "by_tag": dict(sorted(Counter(request.tag for request in requests).items())),
        },
    }
    print(json.dumps(report, indent=2))

    stats_stream = io.StringIO()
    stats = pstats.Stats(profiler, stream=stats_stream)
    stats.strip_dirs().sort_stats("cumulative").print_stats(15)
    print("\nProfiler results (top 15 cumulative):")
    print(stats_stream.getvalue())


if __name__ == "__main__":
    main()
