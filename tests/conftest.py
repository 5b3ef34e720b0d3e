"""Shared fixtures for the agentic engine test suite."""

from __future__ import annotations

from typing import Callable, Dict, Optional

import numpy as np
import pytest

from agentic_engine.core.parameters import EngineParameters
from agentic_engine.core.state import (
    AgentState,
    CoherenceMetrics,
    CollectiveMetrics,
    TrajectoryPoint,
)


@pytest.fixture
def params() -> EngineParameters:
    return EngineParameters(seed=42)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(42)


def _metrics(consensus: float, polarization: float, entropy: float) -> CollectiveMetrics:
    return CollectiveMetrics(
        consensus=consensus,
        polarization=polarization,
        efficiency=0.0,
        fairness=1.0,
        stability=1.0,
        entropy=entropy,
        coherence=CoherenceMetrics.from_components(0.95, 0.80, 0.092),
    )


@pytest.fixture
def make_point() -> Callable[..., TrajectoryPoint]:
    """Factory for synthetic trajectory points with chosen metrics."""

    def _make(
        time: float,
        consensus: float = 0.5,
        polarization: float = 0.0,
        entropy: float = 0.0,
        agent_states: Optional[Dict[str, AgentState]] = None,
    ) -> TrajectoryPoint:
        if agent_states is None:
            agent_states = {
                "agent-0000": AgentState(position=(0.0, 0.0), velocity=(0.0, 0.0)),
                "agent-0001": AgentState(position=(0.1, 0.1), velocity=(0.0, 0.0)),
            }
        return TrajectoryPoint(
            time=time,
            agent_states=agent_states,
            metrics=_metrics(consensus, polarization, entropy),
        )

    return _make
