"""
Topology generator — interaction graphs over N agents.

Supported generative models:
  complete     — every pair connected
  ring         — i ↔ (i+1) mod N
  star         — hub 0 ↔ every other node
  random       — Erdős–Rényi, p = 2·ln(N)/N (connectivity threshold)
  scale-free   — Barabási–Albert preferential attachment, m new edges per node
  small-world  — Watts–Strogatz ring lattice of degree k, rewired with prob. β

Every generated adjacency is a symmetric 0/1 matrix with zero diagonal.
The Laplacian is L = diag(degree) − A, so its rows sum to zero.  Randomised
models draw exclusively from the supplied numpy Generator; a fixed seed yields
a fixed graph.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Any, Dict, List, Optional

import numpy as np
from numpy.typing import NDArray

from ..errors import DegenerateInputError
from .parameters import EngineParameters
from .spectral import ProxySpectralEstimator, SpectralEstimator


@unique
class TopologyType(str, Enum):
    COMPLETE = "complete"
    RING = "ring"
    STAR = "star"
    RANDOM = "random"
    SCALE_FREE = "scale-free"
    SMALL_WORLD = "small-world"

    @classmethod
    def parse(cls, value: "TopologyType | str") -> "TopologyType":
        try:
            return cls(value)
        except ValueError:
            raise DegenerateInputError(
                f"Unknown topology type '{value}'. "
                f"Available: {[t.value for t in cls]}"
            ) from None


@dataclass(frozen=True)
class Topology:
    """Generated interaction graph.

    Attributes:
        type:             Generative model used.
        adjacency:        (N, N) symmetric 0/1 matrix, zero diagonal.
        laplacian:        (N, N) degree matrix minus adjacency.
        spectral_gap:     Connectivity estimate from the SpectralEstimator.
        clustering_coeff: Mean local triangle density.
    """

    type: TopologyType
    adjacency: NDArray[np.float64]
    laplacian: NDArray[np.float64]
    spectral_gap: float
    clustering_coeff: float

    @property
    def n_nodes(self) -> int:
        return int(self.adjacency.shape[0])

    @property
    def n_edges(self) -> int:
        return int(self.adjacency.sum() // 2)

    def degrees(self) -> NDArray[np.float64]:
        return self.adjacency.sum(axis=1)

    def neighbors(self, idx: int) -> List[int]:
        """Indices of the nonzero entries in row idx."""
        return [int(j) for j in np.flatnonzero(self.adjacency[idx])]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "adjacency": self.adjacency.astype(int).tolist(),
            "laplacian": self.laplacian.astype(int).tolist(),
            "spectral_gap": self.spectral_gap,
            "clustering_coeff": self.clustering_coeff,
        }


# --------------------------------------------------------------------------- #
# Generators                                                                   #
# --------------------------------------------------------------------------- #


def _connect(adjacency: NDArray[np.float64], i: int, j: int) -> None:
    adjacency[i, j] = 1.0
    adjacency[j, i] = 1.0


def _disconnect(adjacency: NDArray[np.float64], i: int, j: int) -> None:
    adjacency[i, j] = 0.0
    adjacency[j, i] = 0.0


def _complete(n: int) -> NDArray[np.float64]:
    adjacency = np.ones((n, n), dtype=np.float64)
    np.fill_diagonal(adjacency, 0.0)
    return adjacency


def _ring(n: int) -> NDArray[np.float64]:
    adjacency = np.zeros((n, n), dtype=np.float64)
    for i in range(n):
        _connect(adjacency, i, (i + 1) % n)
    return adjacency


def _star(n: int) -> NDArray[np.float64]:
    adjacency = np.zeros((n, n), dtype=np.float64)
    for i in range(1, n):
        _connect(adjacency, 0, i)
    return adjacency


def _random(n: int, rng: np.random.Generator) -> NDArray[np.float64]:
    p = 2.0 * np.log(n) / n
    upper = np.triu(rng.random((n, n)) < p, k=1)
    adjacency = (upper | upper.T).astype(np.float64)
    return adjacency


def _scale_free(n: int, m: int, rng: np.random.Generator) -> NDArray[np.float64]:
    adjacency = np.zeros((n, n), dtype=np.float64)
    n_seed = min(m + 1, n)
    for i in range(n_seed):
        for j in range(i + 1, n_seed):
            _connect(adjacency, i, j)

    degrees = adjacency.sum(axis=1)
    for i in range(n_seed, n):
        weights = degrees[:i]
        n_targets = min(m, int(np.count_nonzero(weights)))
        probs = weights / weights.sum()
        targets: set = set()
        # Preferential attachment; duplicate draws are rejected
        while len(targets) < n_targets:
            targets.add(int(rng.choice(i, p=probs)))
        for j in sorted(targets):
            _connect(adjacency, i, j)
            degrees[i] += 1.0
            degrees[j] += 1.0
    return adjacency


def _small_world(
    n: int,
    k: int,
    beta: float,
    rng: np.random.Generator,
) -> NDArray[np.float64]:
    adjacency = np.zeros((n, n), dtype=np.float64)
    half = k // 2
    for i in range(n):
        for j in range(1, half + 1):
            target = (i + j) % n
            if target != i:
                _connect(adjacency, i, target)

    for i in range(n):
        for j in range(1, half + 1):
            if rng.random() >= beta:
                continue
            old_target = (i + j) % n
            if old_target == i:
                continue
            candidates = np.flatnonzero(adjacency[i] == 0.0)
            candidates = candidates[candidates != i]
            if candidates.size == 0:
                continue
            new_target = int(rng.choice(candidates))
            _disconnect(adjacency, i, old_target)
            _connect(adjacency, i, new_target)
    return adjacency


# --------------------------------------------------------------------------- #
# Graph statistics                                                             #
# --------------------------------------------------------------------------- #


def compute_laplacian(adjacency: NDArray[np.float64]) -> NDArray[np.float64]:
    """L = diag(degree) − A."""
    return np.diag(adjacency.sum(axis=1)) - adjacency


def compute_clustering_coefficient(adjacency: NDArray[np.float64]) -> float:
    """Mean over all nodes of 2·triangles / (k·(k−1)); nodes with k < 2 add 0.

    diag(A³)_i counts every triangle through i twice, which is exactly the
    numerator 2·triangles_i.
    """
    n = adjacency.shape[0]
    if n == 0:
        return 0.0
    closed_walks = np.diag(adjacency @ adjacency @ adjacency)
    k = adjacency.sum(axis=1)
    pairs = k * (k - 1.0)
    local = np.divide(
        closed_walks,
        pairs,
        out=np.zeros(n, dtype=np.float64),
        where=k >= 2.0,
    )
    return float(local.sum() / n)


def generate_topology(
    n: int,
    topology_type: TopologyType | str,
    rng: np.random.Generator,
    params: Optional[EngineParameters] = None,
    estimator: Optional[SpectralEstimator] = None,
) -> Topology:
    """Build a graph over n agents.

    Args:
        n:             Number of nodes (>= 1).  n < 2 yields an edgeless graph
                       for every type.
        topology_type: One of TopologyType (or its string value).
        rng:           Random source for randomised models.
        params:        Generator constants (m, k, β).
        estimator:     Spectral gap strategy (proxy by default).

    Returns:
        A Topology with adjacency, Laplacian, spectral gap and clustering.

    Raises:
        DegenerateInputError: If n < 1 or the type is unknown.
    """
    topology_type = TopologyType.parse(topology_type)
    if n < 1:
        raise DegenerateInputError(f"Topology needs n >= 1 nodes, got {n}")
    params = params if params is not None else EngineParameters()
    estimator = estimator if estimator is not None else ProxySpectralEstimator()

    if n < 2:
        adjacency = np.zeros((n, n), dtype=np.float64)
    elif topology_type is TopologyType.COMPLETE:
        adjacency = _complete(n)
    elif topology_type is TopologyType.RING:
        adjacency = _ring(n)
    elif topology_type is TopologyType.STAR:
        adjacency = _star(n)
    elif topology_type is TopologyType.RANDOM:
        adjacency = _random(n, rng)
    elif topology_type is TopologyType.SCALE_FREE:
        adjacency = _scale_free(n, params.ba_edges_per_node, rng)
    else:
        adjacency = _small_world(n, params.ws_degree, params.ws_rewire_prob, rng)

    laplacian = compute_laplacian(adjacency)
    return Topology(
        type=topology_type,
        adjacency=adjacency,
        laplacian=laplacian,
        spectral_gap=estimator.spectral_gap(laplacian),
        clustering_coeff=compute_clustering_coefficient(adjacency),
    )
