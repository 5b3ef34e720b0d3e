"""Simulation: scheduler and runner."""
from .scheduler import Scheduler, StepHook
from .runner import SimulationResult, SimulationRunner, simulate

__all__ = [
    "Scheduler",
    "StepHook",
    "SimulationResult",
    "SimulationRunner",
    "simulate",
]
