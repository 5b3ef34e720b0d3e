"""Tests for topology generation and graph statistics."""

import numpy as np
import pytest

from agentic_engine.core.parameters import EngineParameters
from agentic_engine.core.spectral import ExactSpectralEstimator, ProxySpectralEstimator
from agentic_engine.core.topology import (
    TopologyType,
    compute_clustering_coefficient,
    compute_laplacian,
    generate_topology,
)
from agentic_engine.errors import DegenerateInputError


def _assert_simple_graph(adjacency: np.ndarray) -> None:
    assert np.array_equal(adjacency, adjacency.T), "Adjacency must be symmetric"
    assert np.all(np.diag(adjacency) == 0.0), "Adjacency must have no self-loops"
    assert set(np.unique(adjacency)) <= {0.0, 1.0}, "Adjacency must be 0/1"


@pytest.mark.parametrize("topology_type", [t.value for t in TopologyType])
def test_every_type_produces_simple_graph(topology_type, rng):
    """All generators yield symmetric, loop-free 0/1 matrices."""
    topo = generate_topology(20, topology_type, rng)
    assert topo.adjacency.shape == (20, 20)
    _assert_simple_graph(topo.adjacency)
    assert np.allclose(topo.laplacian.sum(axis=1), 0.0), "Laplacian rows must sum to 0"


def test_complete_graph(rng):
    topo = generate_topology(5, "complete", rng)
    assert topo.n_edges == 10, f"K5 has 10 edges, got {topo.n_edges}"
    assert topo.clustering_coeff == pytest.approx(1.0)
    assert np.all(topo.degrees() == 4.0)


def test_ring_graph(rng):
    topo = generate_topology(6, TopologyType.RING, rng)
    assert np.all(topo.degrees() == 2.0), "Every ring node has degree 2"
    assert topo.neighbors(0) == [1, 5]
    assert topo.clustering_coeff == pytest.approx(0.0)


def test_star_graph(rng):
    topo = generate_topology(5, "star", rng)
    assert topo.degrees()[0] == 4.0, "Hub connects to every leaf"
    assert np.all(topo.degrees()[1:] == 1.0), "Leaves connect only to the hub"
    assert topo.clustering_coeff == pytest.approx(0.0)


def test_small_world_preserves_edge_count(rng):
    """Rewiring moves edges without creating or deleting any."""
    params = EngineParameters(ws_degree=4, ws_rewire_prob=0.5)
    topo = generate_topology(20, "small-world", rng, params)
    assert topo.n_edges == 40, f"Expected n·k/2 = 40 edges, got {topo.n_edges}"


def test_small_world_without_rewiring_is_lattice(rng):
    params = EngineParameters(ws_degree=4, ws_rewire_prob=0.0)
    topo = generate_topology(10, "small-world", rng, params)
    assert np.all(topo.degrees() == 4.0)
    assert topo.neighbors(0) == [1, 2, 8, 9]


def test_scale_free_attaches_every_node(rng):
    topo = generate_topology(50, "scale-free", rng)
    assert np.all(topo.degrees() >= 1.0), "Every node attaches to the graph"
    assert topo.degrees().max() > 2.0, "Preferential attachment grows hubs"


def test_single_node_has_no_edges(rng):
    for topology_type in TopologyType:
        topo = generate_topology(1, topology_type, rng)
        assert topo.n_edges == 0
        assert topo.spectral_gap == 0.0


def test_invalid_inputs_fail_closed(rng):
    with pytest.raises(DegenerateInputError):
        generate_topology(0, "ring", rng)
    with pytest.raises(DegenerateInputError):
        generate_topology(5, "hypercube", rng)


def test_same_seed_same_graph():
    a = generate_topology(30, "random", np.random.default_rng(7))
    b = generate_topology(30, "random", np.random.default_rng(7))
    assert np.array_equal(a.adjacency, b.adjacency)


def test_clustering_of_triangle_with_tail():
    """Triangle 0-1-2 with pendant 3 on node 2."""
    adjacency = np.zeros((4, 4))
    for i, j in [(0, 1), (1, 2), (0, 2), (2, 3)]:
        adjacency[i, j] = adjacency[j, i] = 1.0
    # local: 1, 1, 1/3, 0
    expected = (1.0 + 1.0 + 1.0 / 3.0 + 0.0) / 4.0
    assert compute_clustering_coefficient(adjacency) == pytest.approx(expected)


def test_laplacian_definition():
    adjacency = np.array([[0.0, 1.0], [1.0, 0.0]])
    assert np.array_equal(compute_laplacian(adjacency), np.array([[1.0, -1.0], [-1.0, 1.0]]))


def test_proxy_spectral_gap(rng):
    topo = generate_topology(5, "complete", rng, estimator=ProxySpectralEstimator())
    assert topo.spectral_gap == pytest.approx(1.0)


def test_exact_spectral_gap(rng):
    """Fiedler value of K_n is n; of C_n is 2 − 2cos(2π/n)."""
    exact = ExactSpectralEstimator()
    complete = generate_topology(6, "complete", rng, estimator=exact)
    assert complete.spectral_gap == pytest.approx(6.0)
    ring = generate_topology(8, "ring", rng, estimator=exact)
    assert ring.spectral_gap == pytest.approx(2.0 - 2.0 * np.cos(2.0 * np.pi / 8))


def test_exact_gap_of_disconnected_graph_is_zero():
    adjacency = np.zeros((3, 3))
    adjacency[0, 1] = adjacency[1, 0] = 1.0
    gap = ExactSpectralEstimator().spectral_gap(compute_laplacian(adjacency))
    assert gap == pytest.approx(0.0, abs=1e-12)
