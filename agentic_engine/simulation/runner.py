"""
SimulationRunner — high-level interface for trajectory simulation.

Usage example:
    from agentic_engine import EngineParameters, assemble_system
    from agentic_engine.simulation.runner import SimulationRunner

    params = EngineParameters(seed=42)
    rng = np.random.default_rng(params.seed)
    system = assemble_system(10, "ring", "continuous", rng, params)
    runner = SimulationRunner(params, rng)
    result = runner.run(system, steps=200)

    print(result.final_state.consensus)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from ..analysis.chaos import (
    ChaosIndicators,
    analyze_chaos,
    find_convergence_time,
    has_converged,
)
from ..analysis.recorder import TrajectoryRecorder
from ..core.parameters import EngineParameters
from ..core.state import CollectiveMetrics, TrajectoryPoint
from ..core.system import MultiAgentSystem
from ..errors import DegenerateInputError
from ..systems.emergence import DetectorThresholds, EmergenceDetector, EmergentBehavior
from .scheduler import Scheduler, StepHook

logger = logging.getLogger("agentic_engine.simulation")


@dataclass(frozen=True)
class SimulationResult:
    """Outcome of one run over a system.

    Attributes:
        system_id:          Simulated system.
        trajectory:         steps + 1 points, the first being the initial state.
        final_state:        Collective metrics of the last point.
        convergence_time:   Settling time, or None when the run did not converge.
        chaos_indicators:   Chaos estimates over the trajectory.
        emergent_behaviors: Behaviours detected during the run, in order.
    """

    system_id: str
    trajectory: Tuple[TrajectoryPoint, ...]
    final_state: CollectiveMetrics
    convergence_time: Optional[float]
    chaos_indicators: ChaosIndicators
    emergent_behaviors: Tuple[EmergentBehavior, ...] = field(default_factory=tuple)

    @property
    def converged(self) -> bool:
        return self.convergence_time is not None

    def to_dict(self, include_trajectory: bool = False) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "system_id": self.system_id,
            "n_points": len(self.trajectory),
            "final_state": self.final_state.to_dict(),
            "convergence_time": self.convergence_time,
            "chaos_indicators": self.chaos_indicators.to_dict(),
            "emergent_behaviors": [b.to_dict() for b in self.emergent_behaviors],
        }
        if include_trajectory:
            data["trajectory"] = [p.to_dict() for p in self.trajectory]
        return data


class SimulationRunner:
    """Runs a system forward and assembles a SimulationResult.

    The runner owns no system state; each call to run() wires a fresh
    recorder and emergence detector to a Scheduler as post-step hooks.

    Attributes:
        params:     Engine parameters.
        rng:        Random source for policy noise.
        thresholds: Emergence detection thresholds.
    """

    def __init__(
        self,
        params: Optional[EngineParameters] = None,
        rng: Optional[np.random.Generator] = None,
        thresholds: Optional[DetectorThresholds] = None,
        extra_hooks: Optional[List[StepHook]] = None,
    ) -> None:
        """Initialise the runner.

        Args:
            params:      Engine parameters (defaults if None).
            rng:         Random source; seeded from params.seed if None.
            thresholds:  Emergence detection thresholds.
            extra_hooks: Additional post-step hooks run after recording.
        """
        self.params: EngineParameters = params if params is not None else EngineParameters()
        self.rng: np.random.Generator = (
            rng if rng is not None else np.random.default_rng(self.params.seed)
        )
        self.thresholds: DetectorThresholds = (
            thresholds if thresholds is not None else DetectorThresholds()
        )
        self._extra_hooks: List[StepHook] = list(extra_hooks or [])

    def run(
        self,
        system: MultiAgentSystem,
        steps: int,
        dt: Optional[float] = None,
    ) -> SimulationResult:
        """Advance the system `steps` times and analyse the trajectory.

        Args:
            system: System to advance in place.
            steps:  Number of steps (0 yields a single-point trajectory).
            dt:     Time increment per step (defaults to params.dt).

        Returns:
            SimulationResult for the run.

        Raises:
            DegenerateInputError: If steps < 0 or dt <= 0.
        """
        dt = self.params.dt if dt is None else dt
        if steps < 0:
            raise DegenerateInputError(f"steps must be >= 0, got {steps}")
        if dt <= 0.0:
            raise DegenerateInputError(f"dt must be > 0, got {dt}")

        recorder = TrajectoryRecorder()
        detector = EmergenceDetector(self.thresholds)

        def _record(_system: MultiAgentSystem, point: TrajectoryPoint) -> None:
            recorder.record(point)
            detector.observe(recorder)

        scheduler = Scheduler(
            self.params,
            self.rng,
            post_step_hooks=[_record, *self._extra_hooks],
        )
        recorder.record(scheduler.initialise(system))
        for _ in range(steps):
            scheduler.tick(dt)

        trajectory = tuple(recorder.records())
        chaos = analyze_chaos(trajectory, self.params)
        convergence: Optional[float] = None
        if has_converged(trajectory, self.params):
            convergence = find_convergence_time(trajectory, self.params)

        behaviors = tuple(detector.behaviors)
        logger.info(
            "Simulated %s for %d steps (t=%.4f, consensus=%.4f, %d behaviours)",
            system.id, steps, system.time, system.metrics.consensus, len(behaviors),
        )
        return SimulationResult(
            system_id=system.id,
            trajectory=trajectory,
            final_state=trajectory[-1].metrics,
            convergence_time=convergence,
            chaos_indicators=chaos,
            emergent_behaviors=behaviors,
        )


def simulate(
    system: MultiAgentSystem,
    steps: int,
    dt: Optional[float] = None,
    rng: Optional[np.random.Generator] = None,
    params: Optional[EngineParameters] = None,
    thresholds: Optional[DetectorThresholds] = None,
) -> SimulationResult:
    """Convenience wrapper around SimulationRunner.run()."""
    return SimulationRunner(params, rng, thresholds).run(system, steps, dt)
