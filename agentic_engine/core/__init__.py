"""Core: parameters, state containers, agents, topology, assembly, stepping."""
from .parameters import EngineParameters
from .state import (
    AgentState,
    CoherenceMetrics,
    CollectiveMetrics,
    TrajectoryPoint,
    efficiency_ratio,
)
from .agent import (
    ActionSpace,
    Agent,
    AgentAction,
    AgentMemory,
    Observation,
    Policy,
    PolicyKind,
    create_agent,
    create_policy,
    default_policy_parameters,
    initial_coherence,
)
from .spectral import (
    ExactSpectralEstimator,
    ProxySpectralEstimator,
    SpectralEstimator,
)
from .topology import (
    Topology,
    TopologyType,
    compute_clustering_coefficient,
    compute_laplacian,
    generate_topology,
)
from .metrics import compute_collective_metrics, compute_gini, position_entropy
from .system import (
    DynamicsType,
    Equilibrium,
    EquilibriumType,
    MultiAgentSystem,
    StabilityClass,
    SystemDynamics,
    assemble_system,
    initialize_dynamics,
)
from .dynamics import interaction_force, step_system, update_agent

__all__ = [
    "EngineParameters",
    "AgentState",
    "CoherenceMetrics",
    "CollectiveMetrics",
    "TrajectoryPoint",
    "efficiency_ratio",
    "ActionSpace",
    "Agent",
    "AgentAction",
    "AgentMemory",
    "Observation",
    "Policy",
    "PolicyKind",
    "create_agent",
    "create_policy",
    "default_policy_parameters",
    "initial_coherence",
    "ExactSpectralEstimator",
    "ProxySpectralEstimator",
    "SpectralEstimator",
    "Topology",
    "TopologyType",
    "compute_clustering_coefficient",
    "compute_laplacian",
    "generate_topology",
    "compute_collective_metrics",
    "compute_gini",
    "position_entropy",
    "DynamicsType",
    "Equilibrium",
    "EquilibriumType",
    "MultiAgentSystem",
    "StabilityClass",
    "SystemDynamics",
    "assemble_system",
    "initialize_dynamics",
    "interaction_force",
    "step_system",
    "update_agent",
]
