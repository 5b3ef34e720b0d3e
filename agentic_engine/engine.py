"""
agentic_engine.engine — Caller-owned engine facade.

The AgenticEngine class is the high-level orchestrator that:
  1. Assembles systems and keeps them in a registry keyed by system id.
  2. Runs simulations and keeps the latest result per system.
  3. Dispatches chaos, stability and game-theoretic analyses.
  4. Tracks an engine-level coherence triple and applies healing.

Engines are independent: every piece of state (random source, registries,
id counters, coherence) is an instance field.

Usage:
    from agentic_engine import AgenticEngine

    engine = AgenticEngine(seed=42)
    system = engine.create_system(10, "ring", "continuous")
    result = engine.simulate(system.id, steps=200)
    stability = engine.analyze_stability(system.id)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np

from .analysis.chaos import ChaosIndicators, analyze_chaos, find_convergence_time
from .analysis.game_theory import (
    EquilibriumSolver,
    GameTheoreticAnalysis,
    IllustrativeEquilibriumSolver,
    analyze_game_theory,
)
from .analysis.stability import StabilityAnalysis, analyze_stability
from .config import load_parameters
from .core.agent import Agent, PolicyKind, create_agent, initial_coherence
from .core.metrics import compute_collective_metrics
from .core.parameters import EngineParameters
from .core.spectral import ProxySpectralEstimator, SpectralEstimator
from .core.state import CoherenceMetrics, TrajectoryPoint
from .core.system import DynamicsType, MultiAgentSystem, assemble_system
from .core.topology import TopologyType
from .errors import SystemNotFoundError
from .simulation.runner import SimulationResult, SimulationRunner
from .systems.emergence import DetectorThresholds

logger = logging.getLogger("agentic_engine.engine")


class AgenticEngine:
    """Registry of assembled systems and their simulation results.

    Attributes:
        params:    Engine parameters.
        rng:       Random source shared by assembly and stepping.
        estimator: Spectral strategy used at assembly.
        solver:    Equilibrium strategy used by game-theoretic analysis.
    """

    def __init__(
        self,
        params: Optional[EngineParameters] = None,
        seed: Optional[int] = None,
        estimator: Optional[SpectralEstimator] = None,
        solver: Optional[EquilibriumSolver] = None,
        thresholds: Optional[DetectorThresholds] = None,
    ) -> None:
        """Initialise an empty engine.

        Args:
            params:     Engine parameters (defaults if None).
            seed:       Overrides params.seed for the random source.
            estimator:  Spectral strategy (proxy if None).
            solver:     Equilibrium strategy (illustrative if None).
            thresholds: Emergence detection thresholds.
        """
        self.params: EngineParameters = params if params is not None else EngineParameters()
        self.seed: int = self.params.seed if seed is None else seed
        self.rng: np.random.Generator = np.random.default_rng(self.seed)
        self.estimator: SpectralEstimator = (
            estimator if estimator is not None else ProxySpectralEstimator()
        )
        self.solver: EquilibriumSolver = (
            solver if solver is not None else IllustrativeEquilibriumSolver()
        )
        self._runner = SimulationRunner(self.params, self.rng, thresholds)

        self._systems: Dict[str, MultiAgentSystem] = {}
        self._simulations: Dict[str, SimulationResult] = {}
        self._coherence: CoherenceMetrics = initial_coherence(self.params)
        self._agent_counter = 0
        self._system_counter = 0

    @classmethod
    def from_config(
        cls,
        config_path: Union[str, Path],
        seed: Optional[int] = None,
        **kwargs: Any,
    ) -> "AgenticEngine":
        """Create an engine from a YAML parameter file.

        Args:
            config_path: Path to the YAML file.
            seed:        Optional override of the configured seed.

        Returns:
            Configured AgenticEngine instance.
        """
        params = load_parameters(config_path)
        logger.info(f"Engine parameters loaded from {config_path}")
        return cls(params=params, seed=seed, **kwargs)

    # ------------------------------------------------------------------ #
    # Construction                                                         #
    # ------------------------------------------------------------------ #

    def create_agent(
        self,
        policy_kind: Union[PolicyKind, str] = PolicyKind.STOCHASTIC,
        state_dim: Optional[int] = None,
        action_dim: Optional[int] = None,
    ) -> Agent:
        """Create a standalone agent (not registered with any system)."""
        self._agent_counter += 1
        return create_agent(
            f"agent-{self._agent_counter:04d}",
            policy_kind,
            self.rng,
            self.params,
            state_dim=state_dim,
            action_dim=action_dim,
            coherence=self._coherence,
        )

    def create_system(
        self,
        n_agents: int,
        topology_type: Union[TopologyType, str],
        dynamics_type: Union[DynamicsType, str] = DynamicsType.CONTINUOUS,
        policy_kind: Union[PolicyKind, str] = PolicyKind.STOCHASTIC,
    ) -> MultiAgentSystem:
        """Assemble a system and register it under a fresh id.

        Raises:
            DegenerateInputError: On an invalid size or type name.
        """
        system_id = f"MAS-{self._system_counter + 1:04d}"
        system = assemble_system(
            n_agents,
            topology_type,
            dynamics_type,
            self.rng,
            self.params,
            self.estimator,
            system_id=system_id,
            coherence=self._coherence,
            policy_kind=policy_kind,
        )
        self._system_counter += 1
        self._systems[system_id] = system
        logger.info(
            "Created %s: %d agents, %s topology, %d edges",
            system_id, n_agents, system.topology.type.value, system.topology.n_edges,
        )
        return system

    # ------------------------------------------------------------------ #
    # Simulation and analysis                                              #
    # ------------------------------------------------------------------ #

    def simulate(
        self,
        system_id: str,
        steps: int,
        dt: Optional[float] = None,
    ) -> SimulationResult:
        """Run a registered system forward and store the result.

        Raises:
            SystemNotFoundError:  If the system id is unknown.
            DegenerateInputError: If steps < 0 or dt <= 0.
        """
        system = self.get_system(system_id)
        result = self._runner.run(system, steps, dt)
        self._simulations[system_id] = result
        return result

    def analyze_chaos(self, trajectory: Sequence[TrajectoryPoint]) -> ChaosIndicators:
        return analyze_chaos(trajectory, self.params)

    def find_convergence_time(self, trajectory: Sequence[TrajectoryPoint]) -> float:
        return find_convergence_time(trajectory, self.params)

    def analyze_stability(self, system_id: str) -> StabilityAnalysis:
        """Stability verdicts for a registered system."""
        return analyze_stability(self.get_system(system_id), self.params)

    def analyze_game_theory(self, system_id: str) -> GameTheoreticAnalysis:
        """Equilibrium analysis; Nash points are appended to the system."""
        system = self.get_system(system_id)
        analysis = analyze_game_theory(system, self.solver)
        system.equilibria.extend(analysis.nash_equilibria)
        return analysis

    # ------------------------------------------------------------------ #
    # Coherence                                                            #
    # ------------------------------------------------------------------ #

    def get_metrics(self) -> CoherenceMetrics:
        """Engine-level coherence triple."""
        return self._coherence

    def _healed(self, coherence: CoherenceMetrics, time: float) -> CoherenceMetrics:
        if coherence.gamma <= self.params.heal_gamma_threshold:
            return coherence
        chi = self.params.chi_pc
        return CoherenceMetrics.from_components(
            lambda_=min(1.0, coherence.lambda_ * (1.0 + chi * 0.5)),
            phi=coherence.phi,
            gamma=coherence.gamma * (1.0 - chi),
            time=time,
            epsilon=self.params.gamma_epsilon,
        )

    def heal(self, system_id: Optional[str] = None) -> CoherenceMetrics:
        """Apply phase-conjugate healing.

        With a system id, every agent of that system whose γ exceeds the
        heal threshold is healed and the system's collective coherence is
        returned.  Without one, the engine-level triple is healed.

        Raises:
            SystemNotFoundError: If the system id is unknown.
        """
        if system_id is None:
            self._coherence = self._healed(self._coherence, self._coherence.time)
            return self._coherence

        system = self.get_system(system_id)
        healed = 0
        for agent in system.agents.values():
            coherence = self._healed(agent.coherence, system.time)
            if coherence is not agent.coherence:
                agent.coherence = coherence
                healed += 1
        system.metrics = compute_collective_metrics(
            system.agent_list(), self._coherence, self.params, time=system.time
        )
        logger.debug("Healed %d agents in %s", healed, system_id)
        return system.metrics.coherence

    # ------------------------------------------------------------------ #
    # Registry                                                             #
    # ------------------------------------------------------------------ #

    def get_system(self, system_id: str) -> MultiAgentSystem:
        """Registered system by id.

        Raises:
            SystemNotFoundError: If the system id is unknown.
        """
        try:
            return self._systems[system_id]
        except KeyError:
            raise SystemNotFoundError(system_id) from None

    def get_systems(self) -> List[MultiAgentSystem]:
        return list(self._systems.values())

    def get_simulation(self, system_id: str) -> Optional[SimulationResult]:
        """Latest result for a registered system (None if never simulated).

        Raises:
            SystemNotFoundError: If the system id is unknown.
        """
        self.get_system(system_id)
        return self._simulations.get(system_id)

    def summary(self) -> Dict[str, Any]:
        return {
            "seed": self.seed,
            "n_systems": len(self._systems),
            "n_simulations": len(self._simulations),
            "coherence": self._coherence.to_dict(),
            "estimator": self.estimator.name,
            "solver": self.solver.name,
        }
