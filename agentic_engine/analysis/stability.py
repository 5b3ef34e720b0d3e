"""
Linear stability analysis of an assembled system.

Works on the eigenvalue estimates stored in the system's dynamics snapshot,
whatever SpectralEstimator produced them:

  local stability   ⇔ Re(λ_k) < 0 for every estimate
  margin            = −max_k Re(λ_k)
  global stability  ⇔ local and margin > global_stability_margin

Critical parameters are flagged together with a remediation hint.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from ..core.parameters import EngineParameters
from ..core.system import MultiAgentSystem

NETWORK_CONNECTIVITY = "network-connectivity"
INTERACTION_STRENGTH = "interaction-strength"

REMEDIATION_HINTS: Dict[str, str] = {
    NETWORK_CONNECTIVITY: (
        "Spectral gap is low: add edges or switch to a denser topology "
        "(complete, small-world) to speed up information mixing."
    ),
    INTERACTION_STRENGTH: (
        "Stability margin is small: reduce coupling gains or increase "
        "velocity damping to move eigenvalues further into the left half-plane."
    ),
}


@dataclass(frozen=True)
class StabilityAnalysis:
    """Stability verdicts and diagnostics for one system.

    Attributes:
        system_id:           Analysed system.
        local_stability:     All eigenvalue estimates in the open left half-plane.
        global_stability:    Local stability with margin above the threshold.
        lyapunov_function:   Quadratic Lyapunov weights (uniform).
        stability_margin:    −max Re(λ).
        sensitivity_matrix:  Copy of the linearisation Jacobian.
        critical_parameters: Flagged parameter names.
        remediation:         Hint per flagged parameter.
    """

    system_id: str
    local_stability: bool
    global_stability: bool
    lyapunov_function: NDArray[np.float64]
    stability_margin: float
    sensitivity_matrix: NDArray[np.float64]
    critical_parameters: Tuple[str, ...] = ()
    remediation: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "system_id": self.system_id,
            "local_stability": self.local_stability,
            "global_stability": self.global_stability,
            "lyapunov_function": self.lyapunov_function.tolist(),
            "stability_margin": self.stability_margin,
            "sensitivity_matrix_shape": list(self.sensitivity_matrix.shape),
            "critical_parameters": list(self.critical_parameters),
            "remediation": dict(self.remediation),
        }


def analyze_stability(
    system: MultiAgentSystem,
    params: Optional[EngineParameters] = None,
) -> StabilityAnalysis:
    """Classify local/global stability of the system's linearisation.

    Args:
        system: Assembled system.
        params: Thresholds for the global margin and critical spectral gap.

    Returns:
        StabilityAnalysis for the system.
    """
    params = params if params is not None else EngineParameters()
    jacobian = system.dynamics.jacobian
    real_parts = np.real(system.dynamics.eigenvalues)

    if real_parts.size:
        local = bool(np.all(real_parts < 0.0))
        margin = float(-np.max(real_parts))
    else:
        local = False
        margin = 0.0

    critical = []
    if system.topology.spectral_gap < params.critical_spectral_gap:
        critical.append(NETWORK_CONNECTIVITY)
    if margin < params.global_stability_margin:
        critical.append(INTERACTION_STRENGTH)

    return StabilityAnalysis(
        system_id=system.id,
        local_stability=local,
        global_stability=local and margin > params.global_stability_margin,
        lyapunov_function=np.ones(jacobian.shape[0], dtype=np.float64),
        stability_margin=margin,
        sensitivity_matrix=jacobian.copy(),
        critical_parameters=tuple(critical),
        remediation={name: REMEDIATION_HINTS[name] for name in critical},
    )
