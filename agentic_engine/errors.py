"""
Exception hierarchy for the agentic engine.

  AgenticEngineError     — base class for every engine failure
  SystemNotFoundError    — a system identifier that was never assembled
  DegenerateInputError   — population size, step count, dt or type name
                           the engine cannot build a run from

Insufficient trajectory history is not an error: analyses return
flagged defaults instead of raising.
"""

from __future__ import annotations


class AgenticEngineError(Exception):
    """Base class for all agentic engine errors."""


class SystemNotFoundError(AgenticEngineError, KeyError):
    """Raised when a system identifier is not registered with the engine."""

    def __init__(self, system_id: str) -> None:
        self.system_id = system_id
        super().__init__(f"System {system_id} not found")

    def __str__(self) -> str:
        return f"System {self.system_id} not found"


class DegenerateInputError(AgenticEngineError, ValueError):
    """Raised for inputs that cannot produce a well-defined run."""
