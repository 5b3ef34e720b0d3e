"""
System assembly.

A MultiAgentSystem owns the agent population, the interaction topology, a
linearisation snapshot of the aggregate dynamics, the equilibria appended by
analyses and the current collective metrics.

Assembly order (and therefore random-draw order) is fixed:
  1. agent positions, in agent index order
  2. topology (randomised models only)
  3. Jacobian perturbation
so a given seed always yields the same system.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, unique
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from ..errors import DegenerateInputError
from .agent import Agent, PolicyKind, create_agent, initial_coherence
from .metrics import compute_collective_metrics
from .parameters import EngineParameters
from .spectral import ProxySpectralEstimator, SpectralEstimator
from .state import AgentState, CoherenceMetrics, CollectiveMetrics, TrajectoryPoint
from .topology import Topology, TopologyType, generate_topology


@unique
class DynamicsType(str, Enum):
    CONTINUOUS = "continuous"
    DISCRETE = "discrete"
    HYBRID = "hybrid"

    @classmethod
    def parse(cls, value: "DynamicsType | str") -> "DynamicsType":
        try:
            return cls(value)
        except ValueError:
            raise DegenerateInputError(
                f"Unknown dynamics type '{value}'. "
                f"Available: {[d.value for d in cls]}"
            ) from None


@unique
class EquilibriumType(str, Enum):
    NASH = "nash"
    PARETO = "pareto"
    CORRELATED = "correlated"
    EVOLUTIONARY_STABLE = "evolutionary-stable"


@unique
class StabilityClass(str, Enum):
    STABLE = "stable"
    UNSTABLE = "unstable"
    SADDLE = "saddle"
    LIMIT_CYCLE = "limit-cycle"


@dataclass(frozen=True)
class Equilibrium:
    """A joint strategy profile reported by an equilibrium solver."""

    type: EquilibriumType
    state: Tuple[float, ...]
    stability: StabilityClass
    basin_size: float
    reachability: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "state": list(self.state),
            "stability": self.stability.value,
            "basin_size": self.basin_size,
            "reachability": self.reachability,
        }


@dataclass(frozen=True)
class SystemDynamics:
    """Linearisation snapshot of the aggregate dynamics.

    Attributes:
        type:               Continuous, discrete or hybrid.
        dimension:          Total state dimension (agents × state_dim).
        jacobian:           (dimension, dimension) linearisation.
        eigenvalues:        Eigenvalue estimates from the SpectralEstimator.
        lyapunov_exponents: Trace-derived exponent estimates.
        attractors:         Known attractors (none are computed at assembly).
    """

    type: DynamicsType
    dimension: int
    jacobian: NDArray[np.float64]
    eigenvalues: NDArray[np.complex128]
    lyapunov_exponents: Tuple[float, ...]
    attractors: Tuple[Dict[str, Any], ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "dimension": self.dimension,
            "eigenvalues": [
                {"real": float(e.real), "imag": float(e.imag)} for e in self.eigenvalues
            ],
            "lyapunov_exponents": list(self.lyapunov_exponents),
            "attractors": list(self.attractors),
        }


@dataclass
class MultiAgentSystem:
    """Mutable aggregate advanced in place by the stepper.

    Attributes:
        id:          System identifier.
        agents:      Agents keyed by id, in assembly (topology index) order.
        topology:    Interaction graph; read-only after assembly.
        dynamics:    Linearisation snapshot.
        metrics:     Collective metrics of the current state.
        equilibria:  Equilibria appended by analyses.
        time:        Current simulation time.
        step_count:  Number of completed steps.
    """

    id: str
    agents: Dict[str, Agent]
    topology: Topology
    dynamics: SystemDynamics
    metrics: CollectiveMetrics
    equilibria: List[Equilibrium] = field(default_factory=list)
    time: float = 0.0
    step_count: int = 0

    @property
    def n_agents(self) -> int:
        return len(self.agents)

    def agent_list(self) -> List[Agent]:
        return list(self.agents.values())

    def agent_ids(self) -> List[str]:
        return list(self.agents.keys())

    def state_snapshot(self) -> Dict[str, AgentState]:
        return {agent_id: a.state for agent_id, a in self.agents.items()}

    def snapshot(self) -> TrajectoryPoint:
        """Immutable trajectory point for the current time."""
        return TrajectoryPoint(
            time=self.time,
            agent_states=self.state_snapshot(),
            metrics=self.metrics,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Summary record for reporting (matrices reduced to statistics)."""
        return {
            "id": self.id,
            "n_agents": self.n_agents,
            "time": self.time,
            "step_count": self.step_count,
            "topology": {
                "type": self.topology.type.value,
                "n_edges": self.topology.n_edges,
                "spectral_gap": self.topology.spectral_gap,
                "clustering_coeff": self.topology.clustering_coeff,
            },
            "dynamics": self.dynamics.to_dict(),
            "equilibria": [e.to_dict() for e in self.equilibria],
            "metrics": self.metrics.to_dict(),
        }


def initialize_dynamics(
    dynamics_type: DynamicsType | str,
    n_agents: int,
    rng: np.random.Generator,
    params: EngineParameters,
    estimator: SpectralEstimator,
) -> SystemDynamics:
    """Perturbed-identity Jacobian plus trace-derived stability proxies.

    J_ii = jacobian_diagonal,  J_ij ~ perturbation · U(−0.5, 0.5).
    """
    dynamics_type = DynamicsType.parse(dynamics_type)
    dimension = n_agents * params.state_dim

    jacobian = (rng.random((dimension, dimension)) - 0.5) * params.jacobian_perturbation
    np.fill_diagonal(jacobian, params.jacobian_diagonal)

    mean_diag = float(np.trace(jacobian)) / dimension if dimension else 0.0
    return SystemDynamics(
        type=dynamics_type,
        dimension=dimension,
        jacobian=jacobian,
        eigenvalues=estimator.eigenvalues(jacobian),
        lyapunov_exponents=(mean_diag,),
    )


def assemble_system(
    n_agents: int,
    topology_type: TopologyType | str,
    dynamics_type: DynamicsType | str,
    rng: np.random.Generator,
    params: Optional[EngineParameters] = None,
    estimator: Optional[SpectralEstimator] = None,
    system_id: str = "MAS-0000",
    coherence: Optional[CoherenceMetrics] = None,
    policy_kind: PolicyKind | str = PolicyKind.STOCHASTIC,
) -> MultiAgentSystem:
    """Create n agents, wire them to a generated topology and snapshot dynamics.

    Args:
        n_agents:      Population size (1 ≤ n ≤ params.max_agents).
        topology_type: Graph model for the interaction network.
        dynamics_type: Dynamics descriptor recorded on the system.
        rng:           Random source for positions, topology and Jacobian.
        params:        Engine parameters.
        estimator:     Spectral strategy shared by topology and dynamics.
        system_id:     Identifier assigned to the system.
        coherence:     Starting coherence triple for every agent.
        policy_kind:   Policy given to every agent (stochastic by default).

    Returns:
        A MultiAgentSystem at time 0 with initial collective metrics.

    Raises:
        DegenerateInputError: On an invalid size or type name.
    """
    params = params if params is not None else EngineParameters()
    estimator = estimator if estimator is not None else ProxySpectralEstimator()
    topology_type = TopologyType.parse(topology_type)
    dynamics_type = DynamicsType.parse(dynamics_type)
    if n_agents < 1:
        raise DegenerateInputError(f"n_agents must be >= 1, got {n_agents}")
    if n_agents > params.max_agents:
        raise DegenerateInputError(
            f"n_agents must be <= {params.max_agents}, got {n_agents}"
        )
    start = coherence if coherence is not None else initial_coherence(params)

    agents: List[Agent] = [
        create_agent(f"agent-{i:04d}", policy_kind, rng, params, coherence=start)
        for i in range(n_agents)
    ]

    topology = generate_topology(n_agents, topology_type, rng, params, estimator)
    ids = [a.id for a in agents]
    for i, agent in enumerate(agents):
        agent.connections = frozenset(ids[j] for j in topology.neighbors(i))

    dynamics = initialize_dynamics(dynamics_type, n_agents, rng, params, estimator)

    return MultiAgentSystem(
        id=system_id,
        agents={a.id: a for a in agents},
        topology=topology,
        dynamics=dynamics,
        metrics=compute_collective_metrics(agents, start, params, time=0.0),
    )
