"""
State containers for the agentic collective-dynamics engine.

Immutable snapshot types:
  - AgentState        : micro-level, one per agent (position, velocity, utility,
                        reputation, resources)
  - CoherenceMetrics  : per-agent / aggregate coherence triple (λ, φ, γ) + ξ
  - CollectiveMetrics : macro-level indicators recomputed after every step
  - TrajectoryPoint   : one recorded time slice of a simulation run

Agent states are replaced, never mutated: the stepper writes a fresh state for
every agent from the pre-step snapshot and swaps them in at the end of a step,
so trajectory points can hold references without copying.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple

import numpy as np
from numpy.typing import NDArray


# --------------------------------------------------------------------------- #
# Micro state                                                                  #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class AgentState:
    """Immutable state of a single agent.

    Attributes:
        position:   State-space position, one float per dimension.
        velocity:   State-space velocity, same length as position.
        utility:    Smoothed utility (unbounded).
        reputation: Trust/reputation score ∈ [0, 1].
        resources:  Available resources (>= 0).
    """

    position: Tuple[float, ...]
    velocity: Tuple[float, ...]
    utility: float = 0.0
    reputation: float = 0.5
    resources: float = 1.0

    def __post_init__(self) -> None:
        """Reject inconsistent or out-of-range values at construction time."""
        if len(self.position) != len(self.velocity):
            raise ValueError(
                f"AgentState position/velocity length mismatch: "
                f"{len(self.position)} != {len(self.velocity)}"
            )
        if not 0.0 <= self.reputation <= 1.0:
            raise ValueError(
                f"AgentState.reputation must be in [0, 1], got {self.reputation}"
            )
        if self.resources < 0.0:
            raise ValueError(
                f"AgentState.resources must be >= 0, got {self.resources}"
            )

    @property
    def dimension(self) -> int:
        return len(self.position)

    def position_array(self) -> NDArray[np.float64]:
        return np.array(self.position, dtype=np.float64)

    def velocity_array(self) -> NDArray[np.float64]:
        return np.array(self.velocity, dtype=np.float64)

    def speed(self) -> float:
        """Euclidean norm of the velocity vector."""
        return float(np.linalg.norm(self.velocity_array()))

    def copy_with(self, **kwargs: Any) -> "AgentState":
        """Return a new AgentState with selected fields overridden."""
        current = {
            "position": self.position,
            "velocity": self.velocity,
            "utility": self.utility,
            "reputation": self.reputation,
            "resources": self.resources,
        }
        current.update(kwargs)
        return AgentState(**current)

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to plain dictionary."""
        return {
            "position": list(self.position),
            "velocity": list(self.velocity),
            "utility": self.utility,
            "reputation": self.reputation,
            "resources": self.resources,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AgentState":
        """Deserialise from plain dictionary."""
        return cls(
            position=tuple(float(x) for x in data["position"]),
            velocity=tuple(float(x) for x in data["velocity"]),
            utility=data.get("utility", 0.0),
            reputation=data.get("reputation", 0.5),
            resources=data.get("resources", 1.0),
        )


# --------------------------------------------------------------------------- #
# Coherence triple                                                             #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class CoherenceMetrics:
    """Coherence triple with derived efficiency ratio.

    Attributes:
        lambda_: Coherence preservation λ.
        phi:     Organisation φ.
        gamma:   Decoherence γ.
        xi:      Efficiency ratio ξ = λ·φ / max(γ, ε).
        time:    Simulation time the triple was last updated.
    """

    lambda_: float
    phi: float
    gamma: float
    xi: float = 0.0
    time: float = 0.0

    @classmethod
    def from_components(
        cls,
        lambda_: float,
        phi: float,
        gamma: float,
        time: float = 0.0,
        epsilon: float = 0.001,
    ) -> "CoherenceMetrics":
        """Build a triple and derive ξ with an ε-floored denominator."""
        return cls(
            lambda_=lambda_,
            phi=phi,
            gamma=gamma,
            xi=efficiency_ratio(lambda_, phi, gamma, epsilon),
            time=time,
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            "lambda": self.lambda_,
            "phi": self.phi,
            "gamma": self.gamma,
            "xi": self.xi,
            "time": self.time,
        }


def efficiency_ratio(
    lambda_: float,
    phi: float,
    gamma: float,
    epsilon: float = 0.001,
) -> float:
    """ξ = λ·φ / max(γ, ε)."""
    return float(lambda_ * phi / max(gamma, epsilon))


# --------------------------------------------------------------------------- #
# Macro state                                                                  #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class CollectiveMetrics:
    """Collective indicators of the whole population.

    Attributes:
        consensus:    1 / (1 + positional variance)          ∈ (0, 1].
        polarization: min(1, positional variance)             ∈ [0, 1].
        efficiency:   Mean agent utility (unbounded).
        fairness:     1 − Gini(resources)                     ∈ [0, 1].
        stability:    1 / (1 + mean speed)                    ∈ (0, 1].
        entropy:      Normalised Shannon entropy of position[0] ∈ [0, 1].
        coherence:    Population-averaged coherence triple.
    """

    consensus: float
    polarization: float
    efficiency: float
    fairness: float
    stability: float
    entropy: float
    coherence: CoherenceMetrics

    @classmethod
    def zeros(cls, coherence: CoherenceMetrics) -> "CollectiveMetrics":
        """Zero-filled metrics reported for an empty population."""
        return cls(
            consensus=0.0,
            polarization=0.0,
            efficiency=0.0,
            fairness=0.0,
            stability=0.0,
            entropy=0.0,
            coherence=coherence,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "consensus": self.consensus,
            "polarization": self.polarization,
            "efficiency": self.efficiency,
            "fairness": self.fairness,
            "stability": self.stability,
            "entropy": self.entropy,
            "coherence": self.coherence.to_dict(),
        }


# --------------------------------------------------------------------------- #
# Trajectory                                                                   #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class TrajectoryPoint:
    """One immutable time slice of a simulation run.

    Attributes:
        time:         Simulation time of the snapshot.
        agent_states: Read-only mapping agent id → AgentState.
        metrics:      Collective metrics at this time.
    """

    time: float
    agent_states: Mapping[str, AgentState] = field(default_factory=dict)
    metrics: CollectiveMetrics = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.metrics is None:
            raise ValueError("TrajectoryPoint requires collective metrics")
        object.__setattr__(
            self, "agent_states", MappingProxyType(dict(self.agent_states))
        )

    @property
    def agent_ids(self) -> Tuple[str, ...]:
        return tuple(self.agent_states.keys())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "time": self.time,
            "agent_states": {
                agent_id: s.to_dict() for agent_id, s in self.agent_states.items()
            },
            "metrics": self.metrics.to_dict(),
        }
