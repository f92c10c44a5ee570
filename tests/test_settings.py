import json
import logging

import pytest
from pygame.math import Vector3

from river.engine.logger import DEFAULT_CHANNELS, GameLogger, LoggerConfig, quiet_logger
from river.engine.settings import WorldSettings
from river.math.interpolation import hex_to_color, interpolate_keyframes, mix_linear
from river.math.seeding import derive_rng, hash_seed
from river.world.features import FogRange


def test_world_settings_defaults_when_missing(tmp_path) -> None:
    assert WorldSettings.from_settings(tmp_path / "missing.json") == WorldSettings()


def test_world_settings_defaults_when_malformed(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{not json")
    assert WorldSettings.from_settings(path) == WorldSettings()
    path.write_text("[1, 2, 3]")
    assert WorldSettings.from_settings(path) == WorldSettings()


def test_world_settings_reads_world_section(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps(
            {
                "world": {
                    "seed": 7,
                    "fillerBiome": "calm",
                    "debugBiome": "swamp",
                    "enabledBiomes": ["calm", "swamp"],
                    "sampleStep": 0,
                    "populationBudget": -4,
                }
            }
        )
    )
    settings = WorldSettings.from_settings(path)
    assert settings.seed == 7
    assert settings.filler_biome == "calm"
    assert settings.debug_biome == "swamp"
    assert settings.enabled_biomes == ("calm", "swamp")
    assert settings.sample_step == WorldSettings().sample_step
    assert settings.population_budget == 1


def test_logger_config_from_settings(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"logLevel": "debug", "logChannels": {"population": True}}))
    config = LoggerConfig.from_settings(path)
    assert config.level == logging.DEBUG
    assert config.channels["population"] is True
    assert config.channels["biomes"] is DEFAULT_CHANNELS["biomes"]
    missing = LoggerConfig.from_settings(tmp_path / "missing.json")
    assert missing.level == logging.INFO
    assert missing.channels == DEFAULT_CHANNELS


def test_channels_gate_records(caplog) -> None:
    logger = GameLogger(LoggerConfig(level=logging.DEBUG, channels={"layout": True, "biomes": False}))
    with caplog.at_level(logging.DEBUG, logger="river"):
        logger.channel("layout").info("layout built")
        logger.channel("biomes").warning("window miss")
        logger.channel("unknown").error("never shown")
    assert "layout built" in caplog.text
    assert "window miss" not in caplog.text
    assert "never shown" not in caplog.text
    logger.set_enabled("biomes", True)
    assert logger.channel("biomes").enabled


def test_quiet_logger_disables_everything() -> None:
    logger = quiet_logger()
    assert not any(logger.channel(name).enabled for name in DEFAULT_CHANNELS)


def test_seeds_are_stable() -> None:
    assert hash_seed(1337, -1, "desert", 0) == hash_seed(1337, -1, "desert", 0)
    assert hash_seed(1337, -1, "desert", 0) != hash_seed(1337, 1, "desert", 0)
    assert derive_rng("a", 1).random() == derive_rng("a", 1).random()


def test_mix_linear_handles_numbers_vectors_and_named_tuples() -> None:
    assert mix_linear(2.0, 4.0, 0.75, 0.25) == pytest.approx(2.5)
    mixed = mix_linear(Vector3(1.0, 0.0, 0.0), Vector3(0.0, 1.0, 0.0), 0.5, 0.5)
    assert (mixed.x, mixed.y, mixed.z) == pytest.approx((0.5, 0.5, 0.0))
    fog = mix_linear(FogRange(0.0, 400.0), FogRange(100.0, 800.0), 0.5, 0.5)
    assert isinstance(fog, FogRange)
    assert tuple(fog) == pytest.approx((50.0, 600.0))


def test_keyframes_follow_dayness() -> None:
    night, sunset, noon = hex_to_color(0x000000), hex_to_color(0x808080), hex_to_color(0xFFFFFF)
    frames = (night, sunset, noon)
    assert tuple(interpolate_keyframes(frames, 1.0)) == pytest.approx(tuple(noon))
    assert tuple(interpolate_keyframes(frames, -1.0)) == pytest.approx(tuple(night))
    assert tuple(interpolate_keyframes(frames, 0.0)) == pytest.approx(tuple(sunset))
    assert interpolate_keyframes(frames, 0.5).x == pytest.approx(0.5 * (sunset.x + noon.x))
