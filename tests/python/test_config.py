from __future__ import annotations

import pytest
from pytest import approx

from murmuration.config import FlightConfig, SimulationConfig, SkyConfig, load_config, validate_config
from murmuration.sim.core.rules import FlightRules


def test_defaults_match_named_constants():
    rules = FlightRules.from_config(SimulationConfig())
    assert rules.speed == 5.0
    assert rules.rotation_speed_max == 0.05
    assert rules.zone_avoid_sq == approx(400.0)
    assert rules.zone_align_sq == approx(3600.0)
    assert rules.influence_weights == (1.0, 0.95, 0.90, 0.70, 0.40, 0.10)
    assert rules.influence_weights_sum == approx(4.05)
    assert rules.max_rank == 6
    assert rules.lookahead_ticks == 5.0


def test_weight_defaults_are_not_shared():
    a = FlightConfig()
    b = FlightConfig()
    a.influence_weights.append(0.05)
    assert len(b.influence_weights) == 6


def test_from_yaml_reads_nested_sections(tmp_path):
    path = tmp_path / "flock.yaml"
    path.write_text(
        "\n".join(
            [
                "population: 64",
                "seed: 9",
                "sky:",
                "  width: 640",
                "  height: 480",
                "flight:",
                "  speed: 3",
                "  influence_weights: [1, 0.5]",
                "  neighborhood_cache: false",
            ]
        )
    )
    config = SimulationConfig.from_yaml(path)
    assert config.population == 64
    assert config.seed == 9
    assert config.sky.width == 640
    assert config.flight.speed == 3
    assert config.flight.influence_weights == [1.0, 0.5]
    assert config.flight.neighborhood_cache is False
    assert config.flight.rotation_speed_max == 0.05


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert SimulationConfig.from_yaml(path) == SimulationConfig()


def test_unknown_keys_are_rejected():
    with pytest.raises(TypeError):
        load_config({"flight": {"turbo": True}})


@pytest.mark.parametrize(
    "config",
    [
        SimulationConfig(sky=SkyConfig(width=-1.0)),
        SimulationConfig(population=-3),
        SimulationConfig(reference_fps=0.0),
        SimulationConfig(flight=FlightConfig(speed=0.0)),
        SimulationConfig(flight=FlightConfig(rotation_speed_max=-0.1)),
        SimulationConfig(flight=FlightConfig(zone_avoid_radius=30.0, zone_align_radius=30.0)),
        SimulationConfig(flight=FlightConfig(influence_weights=[])),
        SimulationConfig(flight=FlightConfig(influence_weights=[1.0, -0.5])),
        SimulationConfig(flight=FlightConfig(influence_weights=[0.0, 0.0])),
        SimulationConfig(flight=FlightConfig(lookahead_ticks=-1.0)),
        SimulationConfig(sky=SkyConfig(width=4.0, height=4.0), flight=FlightConfig(speed=50.0)),
        SimulationConfig(sky=SkyConfig(width=300.0, height=5.0)),
    ],
)
def test_validate_rejects_invalid_constants(config):
    with pytest.raises(ValueError):
        validate_config(config)


def test_validate_accepts_defaults():
    validate_config(SimulationConfig())


def test_max_delta_is_smaller_sky_dimension_over_speed():
    config = SimulationConfig(sky=SkyConfig(width=300.0, height=200.0), flight=FlightConfig(speed=4.0))
    assert FlightRules.from_config(config).max_delta == approx(50.0)
