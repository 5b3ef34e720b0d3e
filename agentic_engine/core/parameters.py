"""
Engine parameters for the agentic collective-dynamics engine.

All parameters are immutable, named constants.  Every coupling constant of
the agent update rule, the topology generators, the coherence tracker and
the trajectory analyses lives here so that a run is fully described by one
EngineParameters instance plus a seed.

Update rule constraints enforced at construction:
  - 0 <= velocity_damping < 1   (velocity stays bounded under bounded force)
  - 0 < utility_smoothing <= 1  (utility is a convex combination)
  - dt > 0
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class EngineParameters:
    """Immutable, fully validated engine parameters."""

    # ------------------------------------------------------------------ #
    # Population                                                           #
    # ------------------------------------------------------------------ #
    state_dim: int = 4
    """Dimension d of each agent's position/velocity vector (>= 1)."""

    action_dim: int = 2
    """Dimension of each agent's action space (>= 1)."""

    memory_capacity: int = 1000
    """Capacity of each agent's observation/action FIFO (>= 1)."""

    max_agents: int = 1000
    """Largest population the engine will assemble."""

    # ------------------------------------------------------------------ #
    # Topology generators                                                  #
    # ------------------------------------------------------------------ #
    ba_edges_per_node: int = 2
    """Barabási–Albert attachment count m (>= 1)."""

    ws_degree: int = 4
    """Watts–Strogatz lattice degree k (even, >= 2)."""

    ws_rewire_prob: float = 0.3
    """Watts–Strogatz rewiring probability β ∈ [0, 1]."""

    # ------------------------------------------------------------------ #
    # Agent update  —  F = Σ gain·(x_j − x_i) − repulsion + noise         #
    # v ← damping·v + F,  x ← clip(x + v·dt, −bound, bound)              #
    # ------------------------------------------------------------------ #
    consensus_gain: float = 0.1
    repulsion_radius: float = 0.1
    repulsion_strength: float = 0.05
    noise_scale: float = 0.01
    velocity_damping: float = 0.9
    utility_smoothing: float = 0.1
    position_bound: float = 1.0

    # ------------------------------------------------------------------ #
    # Coherence tracking  —  xi = λ·φ / max(γ, ε)                         #
    # ------------------------------------------------------------------ #
    lambda_init: float = 0.95
    phi_init: float = 0.80
    gamma_fixed: float = 0.092
    """Baseline decoherence; per-agent γ = min(1, γ₀ + gain·|v|)."""
    gamma_velocity_gain: float = 0.1
    lambda_floor: float = 0.5
    gamma_epsilon: float = 0.001
    chi_pc: float = 0.869
    """Phase-conjugate healing strength used by AgenticEngine.heal()."""
    heal_gamma_threshold: float = 0.3

    # ------------------------------------------------------------------ #
    # Linearisation snapshot                                               #
    # ------------------------------------------------------------------ #
    jacobian_diagonal: float = -0.1
    jacobian_perturbation: float = 0.02
    """Width of the uniform off-diagonal perturbation."""

    # ------------------------------------------------------------------ #
    # Trajectory analysis                                                  #
    # ------------------------------------------------------------------ #
    chaos_min_points: int = 100
    chaos_burn_in: int = 50
    divergence_floor: float = 1e-10
    lyapunov_positive_threshold: float = 0.001
    convergence_window: int = 50
    convergence_tolerance: float = 0.01
    """Window variance must fall below tolerance² to count as converged."""
    convergence_lookback: int = 100

    # ------------------------------------------------------------------ #
    # Stability classification                                             #
    # ------------------------------------------------------------------ #
    global_stability_margin: float = 0.1
    critical_spectral_gap: float = 0.1

    # ------------------------------------------------------------------ #
    # Integration                                                          #
    # ------------------------------------------------------------------ #
    dt: float = 0.01
    seed: int = 0
    """PRNG seed for deterministic runs (any non-negative integer)."""

    def __post_init__(self) -> None:
        """Validate every parameter against its constraint."""
        positive_ints = {
            "state_dim": self.state_dim,
            "action_dim": self.action_dim,
            "memory_capacity": self.memory_capacity,
            "max_agents": self.max_agents,
            "ba_edges_per_node": self.ba_edges_per_node,
            "chaos_min_points": self.chaos_min_points,
            "convergence_window": self.convergence_window,
            "convergence_lookback": self.convergence_lookback,
        }
        for name, value in positive_ints.items():
            if value < 1:
                raise ValueError(f"{name} must be >= 1, got {value}")

        if self.ws_degree < 2 or self.ws_degree % 2:
            raise ValueError(
                f"ws_degree must be an even integer >= 2, got {self.ws_degree}"
            )

        unit_interval = {
            "ws_rewire_prob": self.ws_rewire_prob,
            "lambda_init": self.lambda_init,
            "phi_init": self.phi_init,
            "gamma_fixed": self.gamma_fixed,
            "lambda_floor": self.lambda_floor,
            "chi_pc": self.chi_pc,
        }
        for name, value in unit_interval.items():
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {value}")

        strictly_positive = {
            "position_bound": self.position_bound,
            "gamma_epsilon": self.gamma_epsilon,
            "divergence_floor": self.divergence_floor,
            "convergence_tolerance": self.convergence_tolerance,
            "dt": self.dt,
        }
        for name, value in strictly_positive.items():
            if value <= 0.0:
                raise ValueError(f"{name} must be > 0, got {value}")

        non_negative = {
            "consensus_gain": self.consensus_gain,
            "repulsion_radius": self.repulsion_radius,
            "repulsion_strength": self.repulsion_strength,
            "noise_scale": self.noise_scale,
            "gamma_velocity_gain": self.gamma_velocity_gain,
            "jacobian_perturbation": self.jacobian_perturbation,
            "chaos_burn_in": self.chaos_burn_in,
        }
        for name, value in non_negative.items():
            if value < 0.0:
                raise ValueError(f"{name} must be >= 0, got {value}")

        if not 0.0 <= self.velocity_damping < 1.0:
            raise ValueError(
                f"velocity_damping must be in [0, 1), got {self.velocity_damping}"
            )

        if not 0.0 < self.utility_smoothing <= 1.0:
            raise ValueError(
                f"utility_smoothing must be in (0, 1], got {self.utility_smoothing}"
            )

        if self.seed < 0:
            raise ValueError(f"seed must be >= 0, got {self.seed}")

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to plain dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineParameters":
        """Deserialise from a plain dictionary, rejecting unknown keys."""
        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown engine parameters: {unknown}")
        return cls(**data)
