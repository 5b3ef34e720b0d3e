"""
Trajectory summary metrics.

Summary statistics over a list of TrajectoryPoint objects.  All functions are
pure and return scalars or dicts.
"""

from __future__ import annotations

from typing import Dict, List, Sequence

import numpy as np

from ..core.state import TrajectoryPoint


def mean_metric(trajectory: Sequence[TrajectoryPoint], name: str) -> float:
    """Mean of one collective metric over the trajectory (0 if empty)."""
    if not trajectory:
        return 0.0
    return float(np.mean([getattr(p.metrics, name) for p in trajectory]))


def max_speed(trajectory: Sequence[TrajectoryPoint]) -> float:
    """Largest agent speed seen anywhere in the trajectory."""
    speeds = [
        s.speed() for p in trajectory for s in p.agent_states.values()
    ]
    return float(max(speeds)) if speeds else 0.0


def consensus_drift(trajectory: Sequence[TrajectoryPoint]) -> List[float]:
    """Step-to-step consensus change."""
    values = np.array([p.metrics.consensus for p in trajectory], dtype=np.float64)
    return np.diff(values).tolist()


def summary_statistics(trajectory: Sequence[TrajectoryPoint]) -> Dict[str, float]:
    """Compute a compact summary over a trajectory.

    Returns:
        Dictionary of metric name → scalar value.
    """
    final = trajectory[-1].metrics if trajectory else None
    return {
        "n_points": float(len(trajectory)),
        "duration": float(trajectory[-1].time - trajectory[0].time) if trajectory else 0.0,
        "mean_consensus": mean_metric(trajectory, "consensus"),
        "mean_polarization": mean_metric(trajectory, "polarization"),
        "mean_efficiency": mean_metric(trajectory, "efficiency"),
        "mean_stability": mean_metric(trajectory, "stability"),
        "mean_entropy": mean_metric(trajectory, "entropy"),
        "max_speed": max_speed(trajectory),
        "final_consensus": final.consensus if final else 0.0,
        "final_fairness": final.fairness if final else 0.0,
        "final_xi": final.coherence.xi if final else 0.0,
    }
