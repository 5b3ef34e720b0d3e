"""
Game-theoretic analysis of an assembled system.

Every agent plays the same symmetric two-action stage game against its
neighbours.  Actions are indexed DEFECT = 0, COOPERATE = 1 and the payoff to
the row player is a prisoner's-dilemma table:

                 other C   other D
      self C        3         0
      self D        4         1

Equilibria come from an EquilibriumSolver:

  IllustrativeEquilibriumSolver  — default.  Reports the all-defect Nash point
                                   with fixed basin/reachability estimates and
                                   the all-cooperate Pareto point.
  PureStrategyEquilibriumSolver  — enumerates symmetric pure profiles, keeps
                                   those where no unilateral deviation pays,
                                   and estimates basins with best-response
                                   flow over a grid of cooperation levels.

Welfare of a symmetric profile is n · payoff(a, a).  Price of anarchy and
price of stability are the cooperative optimum over the worst and best
reported Nash welfare respectively.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from ..core.system import (
    Equilibrium,
    EquilibriumType,
    MultiAgentSystem,
    StabilityClass,
)

DEFECT = 0
COOPERATE = 1
N_ACTIONS = 2

# STAGE_PAYOFFS[self_action, other_action]
STAGE_PAYOFFS: NDArray[np.float64] = np.array(
    [
        [1.0, 4.0],   # defect  vs (defect, cooperate)
        [0.0, 3.0],   # cooperate vs (defect, cooperate)
    ],
    dtype=np.float64,
)

_WELFARE_EPS = 1e-12


def build_payoff_tensor(n_players: int) -> NDArray[np.float64]:
    """(n_players, 2, 2) tensor of per-player stage payoffs."""
    return np.broadcast_to(STAGE_PAYOFFS, (n_players, N_ACTIONS, N_ACTIONS)).copy()


@dataclass(frozen=True)
class SolverResult:
    """What an equilibrium solver reports back to the analyzer."""

    nash_equilibria: Tuple[Equilibrium, ...]
    pareto_frontier: Tuple[Tuple[float, ...], ...]
    nash_welfare: Tuple[float, ...]
    optimal_welfare: float


class EquilibriumSolver(ABC):
    """Strategy interface for equilibrium computation."""

    name: str = "base"

    @abstractmethod
    def solve(self, n_players: int, payoffs: NDArray[np.float64]) -> SolverResult:
        """Find equilibria of the game described by the payoff tensor."""
        ...

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}({self.name})>"


class IllustrativeEquilibriumSolver(EquilibriumSolver):
    """Fixed answer for the prisoner's-dilemma table; no search is done."""

    name = "illustrative"

    def solve(self, n_players: int, payoffs: NDArray[np.float64]) -> SolverResult:
        all_defect = Equilibrium(
            type=EquilibriumType.NASH,
            state=tuple(float(DEFECT) for _ in range(n_players)),
            stability=StabilityClass.STABLE,
            basin_size=0.3,
            reachability=0.4,
        )
        return SolverResult(
            nash_equilibria=(all_defect,),
            pareto_frontier=(tuple(3.0 for _ in range(n_players)),),
            nash_welfare=(n_players * 1.0,),
            optimal_welfare=n_players * 3.0,
        )


class PureStrategyEquilibriumSolver(EquilibriumSolver):
    """Symmetric pure-strategy search over the stage game.

    Attributes:
        grid_points: Resolution of the cooperation-level grid used for
                     basin estimates.
    """

    name = "pure-strategy"

    def __init__(self, grid_points: int = 101) -> None:
        if grid_points < 2:
            raise ValueError(f"grid_points must be >= 2, got {grid_points}")
        self.grid_points = grid_points

    def _basin(self, stage: NDArray[np.float64], action: int) -> float:
        """Fraction of cooperation levels whose best response is `action`."""
        x = np.linspace(0.0, 1.0, self.grid_points)
        coop_payoff = x * stage[COOPERATE, COOPERATE] + (1.0 - x) * stage[COOPERATE, DEFECT]
        defect_payoff = x * stage[DEFECT, COOPERATE] + (1.0 - x) * stage[DEFECT, DEFECT]
        if action == COOPERATE:
            flows = coop_payoff > defect_payoff
        else:
            flows = defect_payoff > coop_payoff
        return float(np.mean(flows))

    def solve(self, n_players: int, payoffs: NDArray[np.float64]) -> SolverResult:
        stage = payoffs[0] if n_players else STAGE_PAYOFFS
        nash: List[Equilibrium] = []
        nash_welfare: List[float] = []
        profile_payoffs: Dict[int, float] = {}

        for action in (DEFECT, COOPERATE):
            own = float(stage[action, action])
            profile_payoffs[action] = own
            deviation = float(stage[1 - action, action])
            if own < deviation:
                continue
            basin = self._basin(stage, action)
            nash.append(Equilibrium(
                type=EquilibriumType.NASH,
                state=tuple(float(action) for _ in range(n_players)),
                stability=StabilityClass.STABLE if own > deviation else StabilityClass.SADDLE,
                basin_size=basin,
                reachability=basin,
            ))
            nash_welfare.append(n_players * own)

        best = max(profile_payoffs.values())
        pareto = tuple(
            tuple(value for _ in range(n_players))
            for value in sorted(set(profile_payoffs.values()), reverse=True)
            if value >= best
        )
        return SolverResult(
            nash_equilibria=tuple(nash),
            pareto_frontier=pareto,
            nash_welfare=tuple(nash_welfare),
            optimal_welfare=n_players * best,
        )


@dataclass(frozen=True)
class GameTheoreticAnalysis:
    """Equilibria and efficiency-loss metrics of one system."""

    system_id: str
    payoff_matrix: NDArray[np.float64]
    nash_equilibria: Tuple[Equilibrium, ...]
    pareto_frontier: Tuple[Tuple[float, ...], ...]
    social_welfare: float
    price_of_anarchy: float
    price_of_stability: float
    solver: str = IllustrativeEquilibriumSolver.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "system_id": self.system_id,
            "payoff_matrix": self.payoff_matrix.tolist(),
            "nash_equilibria": [e.to_dict() for e in self.nash_equilibria],
            "pareto_frontier": [list(p) for p in self.pareto_frontier],
            "social_welfare": self.social_welfare,
            "price_of_anarchy": self.price_of_anarchy,
            "price_of_stability": self.price_of_stability,
            "solver": self.solver,
        }


def analyze_game_theory(
    system: MultiAgentSystem,
    solver: Optional[EquilibriumSolver] = None,
) -> GameTheoreticAnalysis:
    """Derive payoffs from the system and report equilibria.

    Social welfare is taken at the worst reported Nash point.  When the
    solver finds no Nash equilibrium, welfare is 0 and both prices are
    reported as infinite.

    Args:
        system: Assembled system (only its population size is used).
        solver: Equilibrium strategy; illustrative by default.

    Returns:
        GameTheoreticAnalysis for the system.
    """
    solver = solver if solver is not None else IllustrativeEquilibriumSolver()
    n = system.n_agents
    payoffs = build_payoff_tensor(n)
    result = solver.solve(n, payoffs)

    if result.nash_welfare:
        worst = min(result.nash_welfare)
        best = max(result.nash_welfare)
        price_of_anarchy = result.optimal_welfare / max(worst, _WELFARE_EPS)
        price_of_stability = result.optimal_welfare / max(best, _WELFARE_EPS)
        welfare = worst
    else:
        welfare = 0.0
        price_of_anarchy = price_of_stability = float("inf")

    return GameTheoreticAnalysis(
        system_id=system.id,
        payoff_matrix=payoffs,
        nash_equilibria=result.nash_equilibria,
        pareto_frontier=result.pareto_frontier,
        social_welfare=float(welfare),
        price_of_anarchy=float(price_of_anarchy),
        price_of_stability=float(price_of_stability),
        solver=solver.name,
    )
