"""
Synchronous step scheduler.

The scheduler drives one MultiAgentSystem through the per-tick protocol:
  1. Fire pre-step hooks.
  2. Step every agent from the pre-step snapshot and recompute metrics.
  3. Take an immutable TrajectoryPoint of the new state.
  4. Fire post-step hooks with that point.

Each tick completes fully before the next may start; nothing inside a tick
runs concurrently.
"""

from __future__ import annotations

from typing import Callable, List, Optional

import numpy as np

from ..core.dynamics import step_system
from ..core.parameters import EngineParameters
from ..core.state import TrajectoryPoint
from ..core.system import MultiAgentSystem

# Type alias for step hooks:  hook(system, point) -> None
StepHook = Callable[[MultiAgentSystem, TrajectoryPoint], None]


class Scheduler:
    """Advances a system tick by tick and notifies registered hooks.

    Attributes:
        params: Engine parameters used for stepping.
        rng:    Random source for policy noise.
    """

    def __init__(
        self,
        params: EngineParameters,
        rng: np.random.Generator,
        pre_step_hooks: Optional[List[StepHook]] = None,
        post_step_hooks: Optional[List[StepHook]] = None,
    ) -> None:
        """Initialise the scheduler.

        Args:
            params:          Engine parameters.
            rng:             Random source shared with the owning engine.
            pre_step_hooks:  Callables invoked with (system, point_before).
            post_step_hooks: Callables invoked with (system, point_after).
        """
        self.params: EngineParameters = params
        self.rng: np.random.Generator = rng
        self._pre_hooks: List[StepHook] = list(pre_step_hooks or [])
        self._post_hooks: List[StepHook] = list(post_step_hooks or [])
        self._system: Optional[MultiAgentSystem] = None

    def initialise(self, system: MultiAgentSystem) -> TrajectoryPoint:
        """Attach the system and return its initial snapshot."""
        self._system = system
        return system.snapshot()

    def tick(self, dt: Optional[float] = None) -> TrajectoryPoint:
        """Advance the attached system by one step.

        Args:
            dt: Time increment (defaults to params.dt).

        Returns:
            Snapshot of the system after the step.

        Raises:
            RuntimeError: If the scheduler has not been initialised.
        """
        if self._system is None:
            raise RuntimeError(
                "Scheduler not initialised. Call initialise(system) first."
            )
        system = self._system
        dt = self.params.dt if dt is None else dt

        if self._pre_hooks:
            before = system.snapshot()
            for hook in self._pre_hooks:
                hook(system, before)

        step_system(system, dt, self.rng, self.params)
        point = system.snapshot()

        for hook in self._post_hooks:
            hook(system, point)
        return point

    @property
    def system(self) -> MultiAgentSystem:
        """Attached system.

        Raises:
            RuntimeError: If the scheduler has not been initialised.
        """
        if self._system is None:
            raise RuntimeError(
                "Scheduler not initialised. Call initialise(system) first."
            )
        return self._system

    def register_pre_hook(self, hook: StepHook) -> None:
        self._pre_hooks.append(hook)

    def register_post_hook(self, hook: StepHook) -> None:
        self._post_hooks.append(hook)
