"""Analysis: chaos, stability, game theory, trajectory recording and summaries."""
from .chaos import (
    ChaosIndicators,
    analyze_chaos,
    find_convergence_time,
    has_converged,
)
from .stability import REMEDIATION_HINTS, StabilityAnalysis, analyze_stability
from .game_theory import (
    EquilibriumSolver,
    GameTheoreticAnalysis,
    IllustrativeEquilibriumSolver,
    PureStrategyEquilibriumSolver,
    STAGE_PAYOFFS,
    analyze_game_theory,
    build_payoff_tensor,
)
from .recorder import TrajectoryRecorder
from .metrics import summary_statistics

__all__ = [
    "ChaosIndicators",
    "analyze_chaos",
    "find_convergence_time",
    "has_converged",
    "REMEDIATION_HINTS",
    "StabilityAnalysis",
    "analyze_stability",
    "EquilibriumSolver",
    "GameTheoreticAnalysis",
    "IllustrativeEquilibriumSolver",
    "PureStrategyEquilibriumSolver",
    "STAGE_PAYOFFS",
    "analyze_game_theory",
    "build_payoff_tensor",
    "TrajectoryRecorder",
    "summary_statistics",
]
