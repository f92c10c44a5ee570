"""Built-in biome definitions.

Entries use the same camelCase schema as ``FeatureHandle.from_dict`` so that
external biome packs can be loaded from JSON with no translation step.
"""
from __future__ import annotations

from typing import Any, Dict, List

from river.world.features import FeatureCatalog, FeatureHandle

FILLER_BIOME = "happy"

# Layout tables. Entity tags are free-form strings resolved by the spawner.
DESERT_LAYOUT: Dict[str, Any] = {
    "patterns": {
        "animal_corridor": {
            "logic": "sequence",
            "place": "shore",
            "density": [0.5, 4.0],
            "tags": ["alligator", "monkey"],
        },
        "hippo_pod": {
            "logic": "cluster",
            "place": "shore",
            "density": [0.3, 2.0],
            "tags": ["hippo"],
            "minCount": 2,
        },
        "rocky_slalom": {
            "logic": "sequence",
            "place": "slalom",
            "density": [0.5, 2.0],
            "tags": ["rock"],
        },
        "rock_stagger": {
            "logic": "staggered",
            "place": "slalom",
            "density": [0.5, 2.0],
            "tags": ["rock"],
            "minCount": 3,
        },
        "bottle_cluster": {
            "logic": "cluster",
            "place": "path",
            "density": [1.5, 0.5],
            "tags": ["bottle"],
            "minCount": 3,
        },
    },
    "tracks": [
        {
            "name": "main",
            "stages": [
                {
                    "name": "intro",
                    "progress": [0.0, 0.4],
                    "patterns": [
                        [{"pattern": "rocky_slalom", "weight": 1}, {"pattern": "rock_stagger", "weight": 1}],
                    ],
                },
                {
                    "name": "gauntlet",
                    "progress": [0.3, 0.9],
                    "patterns": [
                        [{"pattern": "animal_corridor", "weight": 2}, {"pattern": "hippo_pod", "weight": 1}],
                        [{"pattern": "rocky_slalom", "weight": 1}, {"pattern": "rock_stagger", "weight": 1}],
                    ],
                },
            ],
        },
        {
            "name": "unique_elements",
            "placements": [{"name": "dock", "place": "shore", "at": 0.95, "tag": "pier"}],
        },
        {
            "name": "rewards",
            "stages": [
                {
                    "name": "bottles",
                    "progress": [0.0, 0.9],
                    "patterns": [[{"pattern": "bottle_cluster", "weight": 1}]],
                }
            ],
        },
    ],
    "waterEntityTags": ["hippo"],
}

FOREST_LAYOUT: Dict[str, Any] = {
    "patterns": {
        "log_slalom": {"logic": "scatter", "place": "slalom", "density": [3.0, 3.0], "tags": ["log"]},
        "rock_gates": {
            "logic": "gate",
            "place": "slalom",
            "density": [2.0, 2.0],
            "tags": ["rock"],
            "minCount": 2,
        },
        "piers": {
            "logic": "staggered",
            "place": "shore",
            "density": [0.001, 0.001],
            "tags": ["pier"],
            "minCount": 2,
        },
        "grass_patches": {"logic": "scatter", "place": "shore", "density": [2.0, 2.0], "tags": ["water_grass"]},
        "moose": {"logic": "cluster", "place": "shore", "density": [0.3, 3.0], "tags": ["moose"]},
        "bear": {"logic": "cluster", "place": "shore", "density": [0.3, 3.0], "tags": ["brown_bear"]},
        "duckling_train": {
            "logic": "cluster",
            "place": "path",
            "density": [0.5, 1.5],
            "tags": ["duckling"],
            "minCount": 3,
        },
        "bottle_train": {
            "logic": "cluster",
            "place": "path",
            "density": [0.5, 1.5],
            "tags": ["bottle"],
            "minCount": 3,
        },
    },
    "tracks": [
        {
            "name": "obstacles",
            "stages": [
                {
                    "name": "arrival",
                    "progress": [0.0, 0.2],
                    "patterns": [[{"pattern": "log_slalom"}, {"pattern": "rock_gates"}]],
                },
                {
                    "name": "grass_and_piers",
                    "progress": [0.2, 0.7],
                    "patterns": [[{"pattern": "grass_patches", "weight": 2}, {"pattern": "piers"}]],
                },
            ],
        },
        {
            "name": "animals",
            "stages": [
                {
                    "name": "forest_mix",
                    "progress": [0.2, 0.8],
                    "patterns": [[{"pattern": "moose"}, {"pattern": "bear"}]],
                }
            ],
        },
        {
            "name": "path_life",
            "stages": [
                {
                    "name": "ducklings",
                    "progress": [0.3, 1.0],
                    "patterns": [[{"pattern": "duckling_train"}, {"pattern": "bottle_train"}]],
                }
            ],
        },
    ],
    "weaveLength": [200, 100],
}

ICE_LAYOUT: Dict[str, Any] = {
    "patterns": {
        "icebergs": {"logic": "scatter", "place": "slalom", "density": [20.0, 20.0], "tags": ["iceberg"]},
        "buoys": {"logic": "scatter", "place": "shore", "density": [0.3, 0.5], "tags": ["buoy"]},
        "bottles": {
            "logic": "cluster",
            "place": "path",
            "density": [1.5, 0.5],
            "tags": ["bottle"],
            "minCount": 3,
        },
        "animals": {
            "logic": "scatter",
            "place": "shore",
            "density": [0.5, 0.5],
            "tags": ["polar_bear", "penguin_kayak"],
        },
    },
    "tracks": [
        {"name": "rewards", "stages": [{"name": "bottles", "patterns": [[{"pattern": "bottles"}]]}]},
        {"name": "obstacles", "stages": [{"name": "buoys", "patterns": [[{"pattern": "buoys"}]]}]},
        {"name": "animals", "stages": [{"name": "animals", "patterns": [[{"pattern": "animals"}]]}]},
        {"name": "bergs", "stages": [{"name": "icebergs", "patterns": [[{"pattern": "icebergs"}]]}]},
    ],
    "waterEntityTags": ["penguin_kayak"],
    "weaveLength": [200, 100],
}

SWAMP_LAYOUT: Dict[str, Any] = {
    "patterns": {
        "dense_shore_mangroves": {
            "logic": "scatter",
            "place": "shore",
            "density": [20.0, 40.0],
            "tags": ["mangrove"],
            "minCount": 15,
        },
        "clear_channel_bottles": {"logic": "sequence", "place": "path", "density": [0.5, 0.5], "tags": ["bottle"]},
        "log_scatter": {"logic": "scatter", "place": "slalom", "density": [0.5, 2.0], "tags": ["log"]},
        "alligator_ambush": {"logic": "scatter", "place": "path", "density": [0.2, 0.6], "tags": ["alligator"]},
        "grass_patches": {"logic": "scatter", "place": "shore", "density": [1.5, 3.0], "tags": ["water_grass"]},
    },
    "tracks": [
        {
            "name": "vegetation",
            "stages": [
                {
                    "name": "ramp_up",
                    "progress": [0.0, 0.2],
                    "patterns": [[{"pattern": "dense_shore_mangroves"}]],
                },
                {
                    "name": "full_jungle",
                    "progress": [0.2, 1.0],
                    "patterns": [[{"pattern": "dense_shore_mangroves"}]],
                },
            ],
        },
        {
            "name": "obstacles",
            "stages": [
                {
                    "name": "standard",
                    "progress": [0.0, 1.0],
                    "patterns": [[{"pattern": "log_scatter", "weight": 3}, {"pattern": "grass_patches", "weight": 1.5}]],
                }
            ],
        },
        {
            "name": "rewards",
            "stages": [
                {
                    "name": "bottles",
                    "progress": [0.0, 1.0],
                    "patterns": [[{"pattern": "clear_channel_bottles"}]],
                }
            ],
        },
        {
            "name": "threats",
            "stages": [
                {
                    "name": "alligators",
                    "progress": [0.2, 1.0],
                    "patterns": [[{"pattern": "alligator_ambush"}]],
                }
            ],
        },
    ],
    "waterEntityTags": ["alligator"],
}

JURASSIC_LAYOUT: Dict[str, Any] = {
    "patterns": {
        "scattered_rocks": {"logic": "scatter", "place": "slalom", "density": [1.0, 3.0], "tags": ["rock"]},
        "staggered_logs": {
            "logic": "staggered",
            "place": "slalom",
            "density": [0.5, 1.5],
            "tags": ["log"],
            "minCount": 4,
        },
        "dino_scatter": {"logic": "scatter", "place": "shore", "density": [0.5, 1.5], "tags": ["trex", "triceratops"]},
        "ptero_scatter": {"logic": "scatter", "place": "shore", "density": [0.5, 1.5], "tags": ["pterodactyl"]},
        "bronto_migration": {"logic": "sequence", "place": "shore", "density": [0.4, 0.4], "tags": ["brontosaurus"]},
        "bottle_hunt": {"logic": "scatter", "place": "path", "density": [0.25, 0.5], "tags": ["bottle"]},
        "grass_patches": {"logic": "scatter", "place": "shore", "density": [1.5, 3.0], "tags": ["water_grass"]},
    },
    "tracks": [
        {
            "name": "obstacles",
            "stages": [
                {
                    "name": "danger_zone",
                    "progress": [0.0, 1.0],
                    "patterns": [
                        [
                            {"pattern": "scattered_rocks", "weight": 1.0},
                            {"pattern": "staggered_logs", "weight": 0.5},
                            {"pattern": "grass_patches", "weight": 1.5},
                        ],
                        [
                            {"pattern": "dino_scatter", "weight": 1.0},
                            {"pattern": "bronto_migration", "weight": 0.4},
                        ],
                        [{"pattern": "ptero_scatter", "weight": 1.0}],
                    ],
                }
            ],
        },
        {
            "name": "collectables",
            "stages": [
                {
                    "name": "bottles",
                    "progress": [0.0, 1.0],
                    "patterns": [[{"pattern": "bottle_hunt"}]],
                }
            ],
        },
    ],
    "waterEntityTags": ["brontosaurus"],
}

BIOMES: List[Dict[str, Any]] = [
    {
        "id": FILLER_BIOME,
        "length": 600,
        "groundColor": 0x33AA33,
        "screenTint": 0xE6F2FF,
        "amplitudeMultiplier": 0.5,
    },
    {
        "id": "desert",
        "length": 2000,
        "groundColor": 0xCC8822,
        "sky": {
            "top": [0x04193C, 0x05559C, 0x058FEA],
            "bottom": [0x024B82, 0xAFD9AE, 0x53BAF5],
        },
        "layout": DESERT_LAYOUT,
    },
    {
        "id": "forest",
        "length": 2000,
        "groundColor": 0x115511,
        "screenTint": 0x115511,
        "layout": FOREST_LAYOUT,
    },
    {
        "id": "ice",
        "length": 1000,
        "groundColor": 0xEEFFFF,
        "screenTint": 0xEEFFFF,
        "fogDensity": 0.9,
        "fogRange": [0, 400],
        "widthMultiplier": 2.3,
        "layout": ICE_LAYOUT,
    },
    {
        "id": "swamp",
        "length": 1600,
        "groundColor": 0x2B241C,
        "screenTint": 0xB0A0D0,
        "fogDensity": 0.9,
        "fogRange": [0, 300],
        "sky": {
            "top": [0xF5674C, 0xB99D95, 0xCFCFF3],
            "bottom": [0xF5674C, 0xF5674C, 0xBBC1F1],
        },
        "amplitudeMultiplier": 0.1,
        "widthMultiplier": 5.0,
        "layout": SWAMP_LAYOUT,
        "decoration": {"riverMaterial": "swamp"},
    },
    {
        "id": "jurassic",
        "length": 2000,
        "groundColor": 0x2E4B2E,
        "fogDensity": 0.3,
        "fogRange": [50, 600],
        "sky": {
            "top": [0x101510, 0x667755, 0x88AA88],
            "bottom": [0x151A15, 0x889977, 0xAABB99],
        },
        "widthMultiplier": 1.7,
        "layout": JURASSIC_LAYOUT,
    },
]


def default_catalog() -> FeatureCatalog:
    """Registry holding every built-in biome."""

    return FeatureCatalog(FeatureHandle.from_dict(entry) for entry in BIOMES)


__all__ = ["BIOMES", "FILLER_BIOME", "default_catalog"]
