"""
Agentic Collective-Dynamics Engine.

Simulates a population of interacting agents embedded in a network, steps
their joint state over discrete time, and reports collective diagnostics:
consensus and polarization, chaos indicators, emergent behaviour, stability
of the linearisation and a simplified equilibrium analysis.

Public API:
    EngineParameters      — immutable parameter pack
    AgentState            — immutable per-agent state snapshot
    MultiAgentSystem      — assembled population, topology and dynamics
    assemble_system       — build a system from (n, topology, dynamics)
    step_system           — one simultaneous update of every agent
    SimulationRunner      — high-level trajectory runner
    AgenticEngine         — caller-owned registry of systems and results
    analyze_chaos         — divergence, dimension and predictability proxies
    analyze_stability     — local/global stability verdicts
    analyze_game_theory   — Nash/Pareto points, price of anarchy/stability
    EmergenceDetector     — online synchronization/polarization/oscillation detection
"""

from .core.parameters import EngineParameters
from .core.state import AgentState, CoherenceMetrics, CollectiveMetrics, TrajectoryPoint
from .core.agent import Agent, AgentMemory, Policy, PolicyKind, create_agent
from .core.topology import Topology, TopologyType, generate_topology
from .core.spectral import ExactSpectralEstimator, ProxySpectralEstimator, SpectralEstimator
from .core.system import DynamicsType, MultiAgentSystem, assemble_system
from .core.dynamics import step_system
from .simulation.runner import SimulationResult, SimulationRunner, simulate
from .systems.emergence import (
    BehaviorType,
    DetectorThresholds,
    EmergenceDetector,
    EmergentBehavior,
)
from .analysis.chaos import ChaosIndicators, analyze_chaos, find_convergence_time
from .analysis.stability import StabilityAnalysis, analyze_stability
from .analysis.game_theory import (
    GameTheoreticAnalysis,
    IllustrativeEquilibriumSolver,
    PureStrategyEquilibriumSolver,
    analyze_game_theory,
)
from .analysis.metrics import summary_statistics
from .analysis.recorder import TrajectoryRecorder
from .config import load_parameters
from .engine import AgenticEngine
from .errors import AgenticEngineError, DegenerateInputError, SystemNotFoundError

__version__ = "0.1.0"

__all__ = [
    "EngineParameters",
    "AgentState",
    "CoherenceMetrics",
    "CollectiveMetrics",
    "TrajectoryPoint",
    "Agent",
    "AgentMemory",
    "Policy",
    "PolicyKind",
    "create_agent",
    "Topology",
    "TopologyType",
    "generate_topology",
    "ExactSpectralEstimator",
    "ProxySpectralEstimator",
    "SpectralEstimator",
    "DynamicsType",
    "MultiAgentSystem",
    "assemble_system",
    "step_system",
    "SimulationResult",
    "SimulationRunner",
    "simulate",
    "BehaviorType",
    "DetectorThresholds",
    "EmergenceDetector",
    "EmergentBehavior",
    "ChaosIndicators",
    "analyze_chaos",
    "find_convergence_time",
    "StabilityAnalysis",
    "analyze_stability",
    "GameTheoreticAnalysis",
    "IllustrativeEquilibriumSolver",
    "PureStrategyEquilibriumSolver",
    "analyze_game_theory",
    "summary_statistics",
    "TrajectoryRecorder",
    "load_parameters",
    "AgenticEngine",
    "AgenticEngineError",
    "DegenerateInputError",
    "SystemNotFoundError",
]
