"""Tests for parameter validation and the YAML loader."""

import pytest

from agentic_engine import AgenticEngine
from agentic_engine.config import load_config, load_parameters
from agentic_engine.core.parameters import EngineParameters


def test_defaults():
    params = EngineParameters()
    assert params.state_dim == 4
    assert params.gamma_fixed == 0.092
    assert params.chi_pc == 0.869
    assert params.dt == 0.01


@pytest.mark.parametrize(
    "overrides",
    [
        {"state_dim": 0},
        {"ws_degree": 3},
        {"gamma_fixed": 1.5},
        {"dt": 0.0},
        {"velocity_damping": 1.0},
        {"noise_scale": -0.1},
        {"seed": -1},
    ],
)
def test_invalid_parameters_rejected(overrides):
    with pytest.raises(ValueError):
        EngineParameters(**overrides)


def test_dict_round_trip():
    params = EngineParameters(seed=5, consensus_gain=0.2)
    assert EngineParameters.from_dict(params.to_dict()) == params


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(ValueError, match="warp_factor"):
        EngineParameters.from_dict({"warp_factor": 9})


def test_load_engine_section(tmp_path):
    path = tmp_path / "engine.yaml"
    path.write_text("engine:\n  seed: 7\n  noise_scale: 0.0\n  ws_degree: 6\n")
    params = load_parameters(path)
    assert params.seed == 7
    assert params.noise_scale == 0.0
    assert params.ws_degree == 6
    assert params.state_dim == 4, "Unspecified keys keep their defaults"


def test_load_flat_mapping(tmp_path):
    path = tmp_path / "flat.yaml"
    path.write_text("consensus_gain: 0.25\n")
    assert load_parameters(str(path)).consensus_gain == 0.25


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path) == {}
    assert load_parameters(path) == EngineParameters()


def test_bad_configs(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_parameters(tmp_path / "missing.yaml")

    listing = tmp_path / "list.yaml"
    listing.write_text("- 1\n- 2\n")
    with pytest.raises(ValueError):
        load_parameters(listing)

    unknown = tmp_path / "unknown.yaml"
    unknown.write_text("engine:\n  warp_factor: 9\n")
    with pytest.raises(ValueError):
        load_parameters(unknown)

    invalid = tmp_path / "invalid.yaml"
    invalid.write_text("engine:\n  dt: -1.0\n")
    with pytest.raises(ValueError):
        load_parameters(invalid)


def test_engine_from_config(tmp_path):
    path = tmp_path / "engine.yaml"
    path.write_text("engine:\n  seed: 13\n  state_dim: 2\n")
    engine = AgenticEngine.from_config(path)
    assert engine.seed == 13
    system = engine.create_system(3, "ring")
    assert system.dynamics.dimension == 6
    assert AgenticEngine.from_config(path, seed=99).seed == 99
