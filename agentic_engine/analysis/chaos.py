"""
Chaos indicators and convergence time.

All quantities are read from the consensus/entropy series of a recorded
trajectory.  They are exploratory proxies:

  λ_max  ≈ mean_{i ≥ burn_in} ln|c_{i+1} − c_i|   over pairs with |Δc| > floor
  D_KY   = 1 + |λ_max|  if λ_max > 0, else 1        (placeholder, not the
                                                     Lyapunov-spectrum formula)
  D_corr = max(1, 0.9 · D_KY)                       (placeholder)
  h      = (H_last − H_first) / len(trajectory)
  T_pred = 1 / λ_max  if λ_max > threshold, else ∞

Trajectories shorter than chaos_min_points are not an error: a neutral
ChaosIndicators with sufficient_history=False is returned.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

import numpy as np

from ..core.parameters import EngineParameters
from ..core.state import TrajectoryPoint

logger = logging.getLogger("agentic_engine.analysis")


@dataclass(frozen=True)
class ChaosIndicators:
    """Divergence, dimension and predictability estimates of one trajectory."""

    max_lyapunov_exponent: float = 0.0
    kaplan_yorke_dimension: float = 1.0
    correlation_dimension: float = 1.0
    entropy_rate: float = 0.0
    predictability_horizon: float = math.inf
    sufficient_history: bool = False

    @classmethod
    def neutral(cls) -> "ChaosIndicators":
        """Defaults reported when the trajectory is too short to analyse."""
        return cls()

    @property
    def is_chaotic(self) -> bool:
        return self.max_lyapunov_exponent > 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "max_lyapunov_exponent": self.max_lyapunov_exponent,
            "kaplan_yorke_dimension": self.kaplan_yorke_dimension,
            "correlation_dimension": self.correlation_dimension,
            "entropy_rate": self.entropy_rate,
            "predictability_horizon": self.predictability_horizon,
            "sufficient_history": self.sufficient_history,
        }


def consensus_series(trajectory: Sequence[TrajectoryPoint]) -> np.ndarray:
    return np.array([p.metrics.consensus for p in trajectory], dtype=np.float64)


def analyze_chaos(
    trajectory: Sequence[TrajectoryPoint],
    params: Optional[EngineParameters] = None,
) -> ChaosIndicators:
    """Estimate chaos indicators from a recorded trajectory.

    Args:
        trajectory: Ordered trajectory points.
        params:     Analysis constants (minimum length, burn-in, thresholds).

    Returns:
        ChaosIndicators; neutral defaults when fewer than
        params.chaos_min_points points are available.
    """
    params = params if params is not None else EngineParameters()
    n_points = len(trajectory)
    if n_points < params.chaos_min_points:
        logger.warning(
            "Chaos analysis needs %d points, got %d; returning neutral indicators",
            params.chaos_min_points, n_points,
        )
        return ChaosIndicators.neutral()

    consensus = consensus_series(trajectory)
    steps = np.abs(np.diff(consensus[params.chaos_burn_in:]))
    steps = steps[steps > params.divergence_floor]
    lyapunov = float(np.mean(np.log(steps))) if steps.size else 0.0

    ky_dimension = 1.0 + abs(lyapunov) if lyapunov > 0.0 else 1.0
    corr_dimension = max(1.0, ky_dimension * 0.9)

    first_entropy = trajectory[0].metrics.entropy
    last_entropy = trajectory[-1].metrics.entropy
    entropy_rate = (last_entropy - first_entropy) / n_points

    if lyapunov > params.lyapunov_positive_threshold:
        horizon = 1.0 / lyapunov
    else:
        horizon = math.inf

    return ChaosIndicators(
        max_lyapunov_exponent=lyapunov,
        kaplan_yorke_dimension=ky_dimension,
        correlation_dimension=corr_dimension,
        entropy_rate=float(entropy_rate),
        predictability_horizon=horizon,
        sufficient_history=True,
    )


def find_convergence_time(
    trajectory: Sequence[TrajectoryPoint],
    params: Optional[EngineParameters] = None,
) -> float:
    """First time at which the sliding consensus variance settles.

    For each i ≥ window, the population variance of consensus over points
    [i − window, i) is compared against tolerance²; the time of point i is
    returned on the first match.

    Returns:
        Convergence time, or the final trajectory time when the variance
        never settles (0.0 for an empty trajectory).
    """
    params = params if params is not None else EngineParameters()
    if not trajectory:
        return 0.0
    window = params.convergence_window
    threshold = params.convergence_tolerance ** 2
    consensus = consensus_series(trajectory)

    for i in range(window, len(trajectory)):
        if float(np.var(consensus[i - window:i])) < threshold:
            return trajectory[i].time
    return trajectory[-1].time


def has_converged(
    trajectory: Sequence[TrajectoryPoint],
    params: Optional[EngineParameters] = None,
) -> bool:
    """Final consensus within tolerance of the value `lookback` points earlier."""
    params = params if params is not None else EngineParameters()
    if not trajectory:
        return False
    final = trajectory[-1].metrics.consensus
    earlier = trajectory[max(0, len(trajectory) - params.convergence_lookback)]
    return abs(final - earlier.metrics.consensus) < params.convergence_tolerance
