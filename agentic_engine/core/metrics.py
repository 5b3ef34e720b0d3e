"""
Collective metrics.

All indicators are recomputed from scratch from the full agent set after
every step; nothing is maintained incrementally.

  var          = (1/N) · Σ_i ‖x_i − x̄‖²
  consensus    = 1 / (1 + var)
  polarization = min(1, var)
  efficiency   = mean utility
  fairness     = 1 − Gini(resources)
  stability    = 1 / (1 + mean ‖v_i‖)
  entropy      = H(hist₁₀(x_i[0])) / ln(10)
  coherence    = per-agent average of (λ, φ, γ), ξ re-derived
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np
from numpy.typing import NDArray
from scipy.stats import entropy as shannon_entropy

from .agent import Agent
from .parameters import EngineParameters
from .state import CoherenceMetrics, CollectiveMetrics

ENTROPY_BINS = 10
_RESOURCE_EPS = 1e-12


def positional_variance(positions: NDArray[np.float64]) -> float:
    """Mean squared distance of agent positions to their centroid."""
    n = positions.shape[0]
    if n == 0:
        return 0.0
    centred = positions - positions.mean(axis=0)
    return float(np.sum(centred ** 2) / n)


def compute_gini(resources: NDArray[np.float64]) -> float:
    """Gini coefficient of a non-negative distribution.

    Formula (values sorted ascending, 1-based rank i):
        G = Σ_i (2i − N − 1) · r_i / (N · Σ r)
    The total is floored at a small epsilon so an all-zero distribution
    reports perfect equality instead of NaN.
    """
    n = resources.shape[0]
    if n == 0:
        return 0.0
    r = np.sort(resources)
    ranks = np.arange(1, n + 1, dtype=np.float64)
    total = max(float(r.sum()), _RESOURCE_EPS)
    return float(np.sum((2.0 * ranks - n - 1.0) * r) / (n * total))


def position_entropy(first_coords: NDArray[np.float64], bins: int = ENTROPY_BINS) -> float:
    """Normalised Shannon entropy of a histogram over [−1, 1]."""
    if first_coords.size == 0:
        return 0.0
    idx = np.floor((first_coords + 1.0) / 2.0 * bins).astype(int)
    idx = np.clip(idx, 0, bins - 1)
    counts = np.bincount(idx, minlength=bins)
    return float(shannon_entropy(counts) / np.log(bins))


def aggregate_coherence(
    agents: Sequence[Agent],
    time: float,
    epsilon: float,
) -> CoherenceMetrics:
    lam = float(np.mean([a.coherence.lambda_ for a in agents]))
    phi = float(np.mean([a.coherence.phi for a in agents]))
    gamma = float(np.mean([a.coherence.gamma for a in agents]))
    return CoherenceMetrics.from_components(lam, phi, gamma, time=time, epsilon=epsilon)


def compute_collective_metrics(
    agents: Sequence[Agent],
    fallback_coherence: CoherenceMetrics,
    params: Optional[EngineParameters] = None,
    time: float = 0.0,
) -> CollectiveMetrics:
    """Compute every collective indicator for the given population.

    Args:
        agents:             Current agent set (any order).
        fallback_coherence: Coherence reported when the population is empty.
        params:             Engine parameters (ε for ξ).
        time:               Simulation time stamped on the coherence triple.

    Returns:
        CollectiveMetrics; zero-filled for an empty population.
    """
    params = params if params is not None else EngineParameters()
    if not agents:
        return CollectiveMetrics.zeros(fallback_coherence)

    positions = np.array([a.state.position for a in agents], dtype=np.float64)
    velocities = np.array([a.state.velocity for a in agents], dtype=np.float64)
    utilities = np.array([a.state.utility for a in agents], dtype=np.float64)
    resources = np.array([a.state.resources for a in agents], dtype=np.float64)

    variance = positional_variance(positions)
    mean_speed = float(np.mean(np.linalg.norm(velocities, axis=1)))

    return CollectiveMetrics(
        consensus=1.0 / (1.0 + variance),
        polarization=min(1.0, variance),
        efficiency=float(np.mean(utilities)),
        fairness=1.0 - compute_gini(resources),
        stability=1.0 / (1.0 + mean_speed),
        entropy=position_entropy(positions[:, 0]),
        coherence=aggregate_coherence(agents, time, params.gamma_epsilon),
    )
