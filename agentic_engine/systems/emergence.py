"""
Emergent-behaviour detector.

Scans the growing trajectory after every step and appends an immutable
EmergentBehavior record when a signature appears.  Detection never feeds
back into the dynamics.

Signatures (current vs previous collective metrics):

  SYNCHRONIZATION — consensus crosses upward through sync_consensus
  POLARIZATION    — polarization exceeds polarization_high while the
                    previous value sat below polarization_low
  OSCILLATION     — ≥ oscillation_min_peaks local maxima of consensus in the
                    last oscillation_window points, at most one event per
                    oscillation_cooldown time units

COALITION and CASCADE are part of the taxonomy but have no detector yet.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, unique
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..core.state import TrajectoryPoint

logger = logging.getLogger("agentic_engine.emergence")


@unique
class BehaviorType(str, Enum):
    SYNCHRONIZATION = "synchronization"
    POLARIZATION = "polarization"
    OSCILLATION = "oscillation"
    COALITION = "coalition"
    CASCADE = "cascade"


@dataclass(frozen=True)
class EmergentBehavior:
    """One detected collective pattern.

    Attributes:
        type:        Signature that fired.
        agents:      Ids of the agents involved.
        start_time:  Onset time.
        magnitude:   Signature strength (metric value or peak density).
        description: Human-readable summary.
    """

    type: BehaviorType
    agents: Tuple[str, ...]
    start_time: float
    magnitude: float
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "agents": list(self.agents),
            "start_time": self.start_time,
            "magnitude": self.magnitude,
            "description": self.description,
        }


@dataclass(frozen=True)
class DetectorThresholds:
    """Threshold parameters for the emergence detector."""

    min_points: int = 10
    sync_consensus: float = 0.9
    polarization_high: float = 0.7
    polarization_low: float = 0.5
    oscillation_window: int = 20
    oscillation_min_peaks: int = 3
    oscillation_cooldown: float = 1.0

    def __post_init__(self) -> None:
        """Validate window sizes and metric thresholds."""
        if self.min_points < 2:
            raise ValueError(f"min_points must be >= 2, got {self.min_points}")
        if self.oscillation_window < 3:
            raise ValueError(
                f"oscillation_window must be >= 3, got {self.oscillation_window}"
            )
        for name in ("sync_consensus", "polarization_high", "polarization_low"):
            value = getattr(self, name)
            if not 0.0 < value < 1.0:
                raise ValueError(
                    f"DetectorThresholds.{name} must be in (0, 1), got {value}"
                )
        if self.polarization_low > self.polarization_high:
            raise ValueError("polarization_low must not exceed polarization_high")


def count_local_maxima(values: Sequence[float]) -> int:
    """Number of interior points strictly greater than both neighbours."""
    v = np.asarray(values, dtype=np.float64)
    if v.size < 3:
        return 0
    interior = v[1:-1]
    return int(np.count_nonzero((interior > v[:-2]) & (interior > v[2:])))


class EmergenceDetector:
    """Incremental detector over an append-only trajectory.

    Usage inside a simulation loop:

        detector = EmergenceDetector()
        for point in stepped_points:
            trajectory.append(point)
            detector.observe(trajectory)
        detector.behaviors  # all events so far

    Attributes:
        thresholds: Detection thresholds.
    """

    def __init__(self, thresholds: Optional[DetectorThresholds] = None) -> None:
        self.thresholds: DetectorThresholds = (
            thresholds if thresholds is not None else DetectorThresholds()
        )
        self._behaviors: List[EmergentBehavior] = []

    @property
    def behaviors(self) -> List[EmergentBehavior]:
        """All detected behaviours in detection order (copy)."""
        return list(self._behaviors)

    def reset(self) -> None:
        self._behaviors = []

    def observe(self, trajectory: Sequence[TrajectoryPoint]) -> List[EmergentBehavior]:
        """Inspect the newest point of the trajectory.

        Args:
            trajectory: Full trajectory so far; the last element is the point
                        just recorded.

        Returns:
            Behaviours detected at this point (also appended internally).
        """
        th = self.thresholds
        if len(trajectory) < th.min_points:
            return []

        current = trajectory[-1]
        previous = trajectory[-2]
        cur, prev = current.metrics, previous.metrics
        agents = current.agent_ids
        found: List[EmergentBehavior] = []

        if cur.consensus > th.sync_consensus and prev.consensus < th.sync_consensus:
            found.append(EmergentBehavior(
                type=BehaviorType.SYNCHRONIZATION,
                agents=agents,
                start_time=current.time,
                magnitude=cur.consensus,
                description="Agents synchronized their states",
            ))

        if (
            cur.polarization > th.polarization_high
            and prev.polarization < th.polarization_low
        ):
            found.append(EmergentBehavior(
                type=BehaviorType.POLARIZATION,
                agents=agents,
                start_time=current.time,
                magnitude=cur.polarization,
                description="System became polarized into distinct groups",
            ))

        if len(trajectory) > th.oscillation_window:
            recent = [p.metrics.consensus for p in trajectory[-th.oscillation_window:]]
            peaks = count_local_maxima(recent)
            if peaks >= th.oscillation_min_peaks and not self._oscillating_since(
                current.time
            ):
                found.append(EmergentBehavior(
                    type=BehaviorType.OSCILLATION,
                    agents=agents,
                    start_time=current.time,
                    magnitude=peaks / th.oscillation_window,
                    description="System exhibiting oscillatory behavior",
                ))

        for behavior in found:
            logger.debug(
                "Detected %s at t=%.4f (magnitude %.4f)",
                behavior.type.value, behavior.start_time, behavior.magnitude,
            )
        self._behaviors.extend(found)
        return found

    def _oscillating_since(self, time: float) -> bool:
        return any(
            b.type is BehaviorType.OSCILLATION
            and time - b.start_time < self.thresholds.oscillation_cooldown
            for b in self._behaviors
        )


def detect_emergent_behaviors(
    trajectory: Sequence[TrajectoryPoint],
    thresholds: Optional[DetectorThresholds] = None,
) -> List[EmergentBehavior]:
    """Replay a finished trajectory through a fresh detector."""
    detector = EmergenceDetector(thresholds)
    for end in range(1, len(trajectory) + 1):
        detector.observe(trajectory[:end])
    return detector.behaviors
