"""Tests for system assembly and the simultaneous-update stepper."""

import numpy as np
import pytest

from agentic_engine.core.parameters import EngineParameters
from agentic_engine.core.state import AgentState
from agentic_engine.core.system import MultiAgentSystem, assemble_system
from agentic_engine.core.dynamics import interaction_force, step_system
from agentic_engine.errors import DegenerateInputError


def _place(system: MultiAgentSystem, positions) -> None:
    for agent, position in zip(system.agent_list(), positions):
        agent.state = agent.state.copy_with(
            position=tuple(position),
            velocity=tuple(0.0 for _ in position),
        )


def test_assembly_wires_connections_from_topology(params, rng):
    system = assemble_system(8, "ring", "continuous", rng, params)
    ids = system.agent_ids()
    assert ids[0] == "agent-0000"
    for i, agent in enumerate(system.agent_list()):
        expected = {ids[j] for j in system.topology.neighbors(i)}
        assert agent.connections == expected, f"{agent.id} connections differ from adjacency"
    assert system.dynamics.dimension == 8 * params.state_dim
    assert np.allclose(np.diag(system.dynamics.jacobian), params.jacobian_diagonal)
    assert system.time == 0.0 and system.step_count == 0


def test_assembly_rejects_bad_sizes(params, rng):
    with pytest.raises(DegenerateInputError):
        assemble_system(0, "ring", "continuous", rng, params)
    with pytest.raises(DegenerateInputError):
        assemble_system(params.max_agents + 1, "ring", "continuous", rng, params)
    with pytest.raises(DegenerateInputError):
        assemble_system(5, "ring", "chaotic", rng, params)


def test_isolated_deterministic_agent_stays_put(params, rng):
    """No neighbours and no noise: zero force, zero velocity, fixed position."""
    system = assemble_system(1, "ring", "continuous", rng, params, policy_kind="deterministic")
    before = system.agent_list()[0].state
    step_system(system, 0.01, rng, params)
    after = system.agent_list()[0].state
    assert after.position == before.position
    assert after.velocity == (0.0,) * params.state_dim
    assert after.utility == 0.0


def test_two_agent_attraction(rng):
    params = EngineParameters(state_dim=2, noise_scale=0.0)
    system = assemble_system(2, "complete", "continuous", rng, params, policy_kind="deterministic")
    _place(system, [(0.0, 0.0), (0.5, -0.5)])
    step_system(system, 0.01, rng, params)
    a, b = system.agent_list()
    # F = gain · (x_j − x_i), v = F, x += v·dt
    assert a.state.velocity == pytest.approx((0.05, -0.05))
    assert a.state.position == pytest.approx((0.0005, -0.0005))
    assert b.state.position == pytest.approx((0.4995, -0.4995))
    # utility ← 0.9·0 + 0.1·mean neighbour resources
    assert a.state.utility == pytest.approx(0.1)


def test_short_range_repulsion():
    params = EngineParameters(consensus_gain=0.0, repulsion_radius=0.1, repulsion_strength=0.05)
    force = interaction_force(np.array([0.0, 0.0]), np.array([[0.05, 0.5]]), params)
    assert force == pytest.approx([-0.05, 0.0])


def test_update_order_does_not_leak(params):
    """Reversing agent iteration order gives bit-identical results."""
    a = assemble_system(12, "small-world", "continuous", np.random.default_rng(5), params,
                        policy_kind="deterministic")
    b = assemble_system(12, "small-world", "continuous", np.random.default_rng(5), params,
                        policy_kind="deterministic")
    b.agents = dict(reversed(list(b.agents.items())))
    step_rng = np.random.default_rng(0)
    for _ in range(5):
        step_system(a, 0.01, step_rng, params)
        step_system(b, 0.01, step_rng, params)
    for agent_id, agent in a.agents.items():
        assert b.agents[agent_id].state == agent.state, f"{agent_id} diverged"


def test_positions_stay_bounded(rng):
    params = EngineParameters(consensus_gain=5.0, noise_scale=1.0)
    system = assemble_system(10, "complete", "continuous", rng, params)
    for _ in range(50):
        step_system(system, 0.1, rng, params)
    positions = np.array([a.state.position for a in system.agent_list()])
    assert np.all(np.abs(positions) <= params.position_bound)


def test_step_advances_clock_and_records_actions(params, rng):
    system = assemble_system(4, "ring", "continuous", rng, params)
    step_system(system, 0.01, rng, params)
    step_system(system, 0.01, rng, params)
    assert system.step_count == 2
    assert system.time == pytest.approx(0.02)
    assert system.metrics.coherence.time == pytest.approx(0.02)
    for agent in system.agent_list():
        history = agent.memory.history
        assert len(history) == 2
        assert history[-1].kind == "move"


def test_coherence_tracks_speed(rng):
    params = EngineParameters(state_dim=2, noise_scale=0.0)
    system = assemble_system(2, "complete", "continuous", rng, params, policy_kind="deterministic")
    _place(system, [(0.0, 0.0), (0.5, -0.5)])
    step_system(system, 0.01, rng, params)
    agent = system.agent_list()[0]
    speed = agent.state.speed()
    assert agent.coherence.gamma == pytest.approx(params.gamma_fixed + 0.1 * speed)
    assert agent.coherence.lambda_ == pytest.approx(1.0 - agent.coherence.gamma)


def test_non_positive_dt_rejected(params, rng):
    system = assemble_system(3, "ring", "continuous", rng, params)
    with pytest.raises(DegenerateInputError):
        step_system(system, 0.0, rng, params)


def test_empty_system_is_a_no_op(params, rng):
    system = assemble_system(2, "ring", "continuous", rng, params)
    system.agents = {}
    metrics = system.metrics
    assert step_system(system, 0.01, rng, params) is metrics
    assert system.step_count == 0
