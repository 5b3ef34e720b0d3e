"""
Dynamics stepper.

Per-agent update (all reads come from the pre-step snapshot):

    F_i   = Σ_{j ∈ N(i)} [ g·(x_j − x_i) − s·sign(x_j − x_i)·1{|x_j − x_i| < r} ]
            + T·σ·U(−0.5, 0.5)                     (stochastic policies only)
    v_i  ← ρ·v_i + F_i
    x_i  ← clip(x_i + v_i·dt, −b, b)
    u_i  ← (1 − α)·u_i + α·mean_{j ∈ N(i)} resources_j     (0 without neighbours)
    γ_i   = min(1, γ₀ + κ·‖v_i‖),  λ_i = max(λ_min, 1 − γ_i)

Simultaneous update: every new state is written into a fresh buffer and the
whole population is swapped in once all agents have been computed, so update
order never leaks into the result.  Random draws happen in agent order.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Tuple

import numpy as np

from ..errors import DegenerateInputError
from .agent import Agent, AgentAction, PolicyKind
from .metrics import compute_collective_metrics
from .parameters import EngineParameters
from .state import AgentState, CoherenceMetrics, CollectiveMetrics
from .system import MultiAgentSystem


def interaction_force(
    position: np.ndarray,
    neighbor_positions: np.ndarray,
    params: EngineParameters,
) -> np.ndarray:
    """Consensus attraction plus short-range repulsion from all neighbours.

    Args:
        position:           (d,) position of the agent.
        neighbor_positions: (k, d) positions of its neighbours.
        params:             Coupling constants.

    Returns:
        (d,) force vector; zero when k == 0.
    """
    if neighbor_positions.shape[0] == 0:
        return np.zeros_like(position)
    diff = neighbor_positions - position
    attraction = params.consensus_gain * diff
    close = np.abs(diff) < params.repulsion_radius
    repulsion = params.repulsion_strength * np.sign(diff) * close
    return np.sum(attraction - repulsion, axis=0)


def update_agent(
    agent: Agent,
    neighbor_states: List[AgentState],
    dt: float,
    rng: np.random.Generator,
    params: EngineParameters,
    time: float = 0.0,
) -> Tuple[AgentState, CoherenceMetrics, np.ndarray]:
    """Compute one agent's next state without mutating anything.

    Returns:
        (new_state, new_coherence, applied_force)
    """
    state = agent.state
    position = state.position_array()
    d = position.shape[0]
    if neighbor_states:
        neighbor_positions = np.array([s.position for s in neighbor_states], dtype=np.float64)
    else:
        neighbor_positions = np.zeros((0, d), dtype=np.float64)

    force = interaction_force(position, neighbor_positions, params)

    if agent.policy.kind is PolicyKind.STOCHASTIC:
        temperature = agent.policy.parameter("temperature", 1.0)
        force = force + temperature * params.noise_scale * (rng.random(d) - 0.5)

    velocity = params.velocity_damping * state.velocity_array() + force
    bound = params.position_bound
    position = np.clip(position + velocity * dt, -bound, bound)

    if neighbor_states:
        neighbor_resources = float(np.mean([s.resources for s in neighbor_states]))
    else:
        neighbor_resources = 0.0
    alpha = params.utility_smoothing
    utility = (1.0 - alpha) * state.utility + alpha * neighbor_resources

    new_state = state.copy_with(
        position=tuple(float(x) for x in position),
        velocity=tuple(float(v) for v in velocity),
        utility=float(utility),
    )

    speed = float(np.linalg.norm(velocity))
    gamma = min(1.0, params.gamma_fixed + params.gamma_velocity_gain * speed)
    lam = max(params.lambda_floor, 1.0 - gamma)
    coherence = CoherenceMetrics.from_components(
        lam, agent.coherence.phi, gamma, time=time, epsilon=params.gamma_epsilon
    )
    return new_state, coherence, force


def step_system(
    system: MultiAgentSystem,
    dt: float,
    rng: np.random.Generator,
    params: Optional[EngineParameters] = None,
) -> CollectiveMetrics:
    """Advance every agent by one time increment and refresh the metrics.

    Args:
        system: System to advance in place.
        dt:     Time increment (> 0).
        rng:    Random source for policy noise.
        params: Engine parameters.

    Returns:
        The recomputed CollectiveMetrics.  An empty system is left untouched
        and its (zero-filled) metrics are returned as-is.

    Raises:
        DegenerateInputError: If dt <= 0.
    """
    if dt <= 0.0:
        raise DegenerateInputError(f"dt must be > 0, got {dt}")
    params = params if params is not None else EngineParameters()
    if system.n_agents == 0:
        return system.metrics

    time = system.time + dt
    snapshot: Mapping[str, AgentState] = system.state_snapshot()

    next_states: Dict[str, Tuple[AgentState, CoherenceMetrics, np.ndarray]] = {}
    for agent_id, agent in system.agents.items():
        neighbors = [snapshot[n] for n in sorted(agent.connections) if n in snapshot]
        next_states[agent_id] = update_agent(agent, neighbors, dt, rng, params, time)

    # Swap the whole population in at once
    for agent_id, (state, coherence, force) in next_states.items():
        agent = system.agents[agent_id]
        agent.state = state
        agent.coherence = coherence
        agent.memory.act(
            AgentAction(
                time=time,
                agent_id=agent_id,
                kind="move",
                parameters=tuple(float(f) for f in force),
                outcome=state.utility,
            )
        )

    system.time = time
    system.step_count += 1
    system.metrics = compute_collective_metrics(
        system.agent_list(), system.metrics.coherence, params, time=time
    )
    return system.metrics
