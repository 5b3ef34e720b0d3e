"""
Spectral estimators.

Topology generation needs a spectral gap for the Laplacian and system
assembly needs eigenvalue estimates for the linearisation Jacobian.  Both go
through a SpectralEstimator so callers never depend on how the numbers are
obtained.

  ProxySpectralEstimator  — default.  Cheap proxies: the smallest nonzero
                            off-diagonal Laplacian magnitude stands in for the
                            Fiedler value, and the Jacobian trace per
                            dimension yields a two-value eigen estimate.
  ExactSpectralEstimator  — dense eigendecomposition via scipy.linalg.
                            Changes observable outputs; opt-in only.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np
import scipy.linalg
from numpy.typing import NDArray


class SpectralEstimator(ABC):
    """Strategy interface for spectral quantities."""

    name: str = "base"

    @abstractmethod
    def spectral_gap(self, laplacian: NDArray[np.float64]) -> float:
        """Connectivity strength of the graph with the given Laplacian."""
        ...

    @abstractmethod
    def eigenvalues(self, jacobian: NDArray[np.float64]) -> NDArray[np.complex128]:
        """Eigenvalue estimates of a linearisation Jacobian."""
        ...

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}({self.name})>"


class ProxySpectralEstimator(SpectralEstimator):
    """Trace- and entry-based proxies; no decomposition is performed."""

    name = "proxy"

    def spectral_gap(self, laplacian: NDArray[np.float64]) -> float:
        n = laplacian.shape[0]
        if n < 2:
            return 0.0
        off_diag = np.abs(laplacian[~np.eye(n, dtype=bool)])
        nonzero = off_diag[off_diag != 0.0]
        if nonzero.size == 0:
            return 0.0
        return float(nonzero.min())

    def eigenvalues(self, jacobian: NDArray[np.float64]) -> NDArray[np.complex128]:
        dim = jacobian.shape[0]
        if dim == 0:
            return np.zeros(0, dtype=np.complex128)
        mean_diag = float(np.trace(jacobian)) / dim
        return np.array(
            [complex(mean_diag, 0.0), complex(mean_diag * 0.9, 0.1)],
            dtype=np.complex128,
        )


class ExactSpectralEstimator(SpectralEstimator):
    """Fiedler value and full Jacobian spectrum from dense decompositions."""

    name = "exact"

    def spectral_gap(self, laplacian: NDArray[np.float64]) -> float:
        n = laplacian.shape[0]
        if n < 2:
            return 0.0
        eigs = scipy.linalg.eigvalsh(laplacian)
        return float(max(eigs[1], 0.0))

    def eigenvalues(self, jacobian: NDArray[np.float64]) -> NDArray[np.complex128]:
        if jacobian.shape[0] == 0:
            return np.zeros(0, dtype=np.complex128)
        return scipy.linalg.eigvals(jacobian).astype(np.complex128)
