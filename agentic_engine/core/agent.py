"""
Agent model.

An agent bundles an immutable AgentState snapshot with a policy descriptor,
a bounded interaction memory and the set of neighbour ids wired from the
topology.  Agents are created once by system assembly and live for the whole
run; the stepper swaps in a fresh state every step.

Memory is capacity-checked: observations and actions are held in
fixed-length deques, so the oldest entry is evicted on overflow.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum, unique
from typing import Any, Deque, Dict, FrozenSet, List, Optional, Tuple

import numpy as np

from ..errors import DegenerateInputError
from .parameters import EngineParameters
from .state import AgentState, CoherenceMetrics


@unique
class PolicyKind(str, Enum):
    """Decision-making regime of an agent."""

    DETERMINISTIC = "deterministic"
    STOCHASTIC = "stochastic"
    LEARNED = "learned"
    EVOLUTIONARY = "evolutionary"

    @classmethod
    def parse(cls, value: "PolicyKind | str") -> "PolicyKind":
        try:
            return cls(value)
        except ValueError:
            raise DegenerateInputError(
                f"Unknown policy kind '{value}'. "
                f"Available: {[k.value for k in cls]}"
            ) from None


_DEFAULT_POLICY_PARAMETERS: Dict[PolicyKind, Dict[str, float]] = {
    PolicyKind.DETERMINISTIC: {"threshold": 0.5, "bias": 0.0},
    PolicyKind.STOCHASTIC: {"temperature": 1.0, "epsilon": 0.1},
    PolicyKind.LEARNED: {
        "learning_rate": 0.01,
        "discount": 0.99,
        "exploration_rate": 0.2,
    },
    PolicyKind.EVOLUTIONARY: {
        "mutation_rate": 0.05,
        "crossover_rate": 0.7,
        "fitness": 0.0,
    },
}


def default_policy_parameters(kind: PolicyKind) -> Dict[str, float]:
    """Fresh copy of the default parameter map for a policy kind."""
    return dict(_DEFAULT_POLICY_PARAMETERS[kind])


@dataclass(frozen=True)
class ActionSpace:
    """Bounds of an agent's action vector."""

    discrete: bool
    dimensions: int
    bounds: Tuple[Tuple[float, float], ...]

    def __post_init__(self) -> None:
        if len(self.bounds) != self.dimensions:
            raise ValueError(
                f"ActionSpace expects {self.dimensions} bounds, got {len(self.bounds)}"
            )
        for i, (lo, hi) in enumerate(self.bounds):
            if lo > hi:
                raise ValueError(f"ActionSpace.bounds[{i}] is empty: ({lo}, {hi})")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "discrete": self.discrete,
            "dimensions": self.dimensions,
            "bounds": [{"min": lo, "max": hi} for lo, hi in self.bounds],
        }


@dataclass(frozen=True)
class Policy:
    """Policy descriptor: kind, numeric parameters and action space."""

    kind: PolicyKind
    parameters: Dict[str, float]
    action_space: ActionSpace

    def parameter(self, name: str, default: float) -> float:
        return float(self.parameters.get(name, default))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "parameters": dict(self.parameters),
            "action_space": self.action_space.to_dict(),
        }


def create_policy(kind: PolicyKind | str, action_dim: int) -> Policy:
    """Build a policy with default parameters for its kind.

    Learned policies act in a continuous space; every other kind is discrete.
    """
    kind = PolicyKind.parse(kind)
    if action_dim < 1:
        raise DegenerateInputError(f"action_dim must be >= 1, got {action_dim}")
    return Policy(
        kind=kind,
        parameters=default_policy_parameters(kind),
        action_space=ActionSpace(
            discrete=kind is not PolicyKind.LEARNED,
            dimensions=action_dim,
            bounds=tuple((-1.0, 1.0) for _ in range(action_dim)),
        ),
    )


# --------------------------------------------------------------------------- #
# Memory                                                                       #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class Observation:
    time: float
    source: str
    target: str
    data: Dict[str, float]


@dataclass(frozen=True)
class AgentAction:
    time: float
    agent_id: str
    kind: str
    parameters: Tuple[float, ...]
    outcome: float


class AgentMemory:
    """Bounded FIFO of observations and actions plus a beliefs map.

    Attributes:
        capacity: Maximum number of observations (and, separately, actions)
                  retained.  Older entries are evicted first.
    """

    def __init__(self, capacity: int = 1000) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be > 0, got {capacity}")
        self.capacity: int = capacity
        self._observations: Deque[Observation] = deque(maxlen=capacity)
        self._history: Deque[AgentAction] = deque(maxlen=capacity)
        self.beliefs: Dict[str, float] = {}

    def observe(self, observation: Observation) -> None:
        self._observations.append(observation)

    def act(self, action: AgentAction) -> None:
        self._history.append(action)

    def believe(self, agent_id: str, value: float) -> None:
        self.beliefs[agent_id] = float(value)

    @property
    def observations(self) -> List[Observation]:
        return list(self._observations)

    @property
    def history(self) -> List[AgentAction]:
        return list(self._history)

    def __len__(self) -> int:
        """Number of retained observations."""
        return len(self._observations)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "capacity": self.capacity,
            "observations": len(self._observations),
            "history": len(self._history),
            "beliefs": dict(self.beliefs),
        }


# --------------------------------------------------------------------------- #
# Agent                                                                        #
# --------------------------------------------------------------------------- #


@dataclass
class Agent:
    """One autonomous agent.

    Attributes:
        id:          Unique identifier within its system.
        state:       Current immutable state snapshot.
        policy:      Policy descriptor.
        memory:      Bounded interaction memory.
        connections: Neighbour ids, fixed by the topology at assembly.
        coherence:   Per-agent coherence triple.
    """

    id: str
    state: AgentState
    policy: Policy
    memory: AgentMemory
    coherence: CoherenceMetrics
    connections: FrozenSet[str] = field(default_factory=frozenset)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "state": self.state.to_dict(),
            "policy": self.policy.to_dict(),
            "memory": self.memory.to_dict(),
            "connections": sorted(self.connections),
            "coherence": self.coherence.to_dict(),
        }


def initial_coherence(params: EngineParameters) -> CoherenceMetrics:
    """Coherence triple every new agent (and a fresh engine) starts from."""
    return CoherenceMetrics.from_components(
        lambda_=params.lambda_init,
        phi=params.phi_init,
        gamma=params.gamma_fixed,
        epsilon=params.gamma_epsilon,
    )


def create_agent(
    agent_id: str,
    policy_kind: PolicyKind | str,
    rng: np.random.Generator,
    params: EngineParameters,
    state_dim: Optional[int] = None,
    action_dim: Optional[int] = None,
    coherence: Optional[CoherenceMetrics] = None,
) -> Agent:
    """Create an agent with a uniformly random position in [−1, 1]^d.

    Velocity starts at zero, utility at 0, reputation at 0.5 and
    resources at 1.0.
    """
    d = params.state_dim if state_dim is None else state_dim
    a = params.action_dim if action_dim is None else action_dim
    if d < 1:
        raise DegenerateInputError(f"state_dim must be >= 1, got {d}")

    position = rng.uniform(-1.0, 1.0, d)
    state = AgentState(
        position=tuple(float(x) for x in position),
        velocity=tuple(0.0 for _ in range(d)),
        utility=0.0,
        reputation=0.5,
        resources=1.0,
    )
    return Agent(
        id=agent_id,
        state=state,
        policy=create_policy(policy_kind, a),
        memory=AgentMemory(params.memory_capacity),
        coherence=coherence if coherence is not None else initial_coherence(params),
    )
