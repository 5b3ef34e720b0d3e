"""
Trajectory recorder.

Provides TrajectoryRecorder — the append-only trajectory buffer of a run.
It records TrajectoryPoint objects in order, optionally bounded (FIFO), and
exposes metric time-series and list-of-dicts serialisation for downstream
reporting.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..core.state import TrajectoryPoint

METRIC_NAMES = (
    "consensus",
    "polarization",
    "efficiency",
    "fairness",
    "stability",
    "entropy",
)


class TrajectoryRecorder:
    """Records TrajectoryPoint objects produced during a simulation run.

    Intended for use as a post-step hook with the Scheduler:

        recorder = TrajectoryRecorder()
        scheduler.register_post_hook(lambda system, point: recorder.record(point))

    Attributes:
        max_records: Maximum number of points to retain (None = unlimited).
    """

    def __init__(self, max_records: Optional[int] = None) -> None:
        """Initialise an empty recorder.

        Args:
            max_records: If set, older points are discarded when the buffer
                         exceeds this limit (FIFO).
        """
        if max_records is not None and max_records <= 0:
            raise ValueError(
                f"max_records must be > 0 or None, got {max_records}"
            )
        self.max_records: Optional[int] = max_records
        self._records: List[TrajectoryPoint] = []

    def record(self, point: TrajectoryPoint) -> None:
        """Append a point to the trajectory.

        Raises:
            ValueError: If the point is older than the last recorded one.
        """
        if self._records and point.time < self._records[-1].time:
            raise ValueError(
                f"Trajectory points must be appended in time order: "
                f"{point.time} < {self._records[-1].time}"
            )
        self._records.append(point)
        if self.max_records is not None and len(self._records) > self.max_records:
            self._records.pop(0)  # FIFO eviction

    def records(self) -> List[TrajectoryPoint]:
        """Return all recorded points (copy) in chronological order."""
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __getitem__(self, idx):
        return self._records[idx]

    def clear(self) -> None:
        self._records = []

    def to_dicts(self) -> List[Dict[str, Any]]:
        return [p.to_dict() for p in self._records]

    def times(self) -> List[float]:
        return [p.time for p in self._records]

    def metric_series(self) -> Dict[str, List[float]]:
        """Time-series of each collective metric plus the coherence ratio ξ."""
        series: Dict[str, List[float]] = {
            name: [getattr(p.metrics, name) for p in self._records]
            for name in METRIC_NAMES
        }
        series["xi"] = [p.metrics.coherence.xi for p in self._records]
        return series

    def agent_series(self, agent_id: str) -> Dict[str, List[Any]]:
        """Time-series of one agent's state.

        Raises:
            KeyError: If the agent never appears in the trajectory.
        """
        if self._records and agent_id not in self._records[0].agent_states:
            raise KeyError(f"Agent {agent_id} not in trajectory")
        states = [p.agent_states[agent_id] for p in self._records]
        return {
            "position": [list(s.position) for s in states],
            "velocity": [list(s.velocity) for s in states],
            "utility": [s.utility for s in states],
            "resources": [s.resources for s in states],
        }
