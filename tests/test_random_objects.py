from __future__ import annotations

import math

import pytest
from numpy.random import PCG64, Generator

from zxfuse.fundamentals import SpiderKind
from zxfuse.random_objects import rand_circuit, rand_phase, rand_zx_graph


def test_rand_phase_multiple_of_pi(fx_rng: Generator) -> None:
    for _ in range(50):
        p = rand_phase(fx_rng)
        assert 0 <= p < 2 * math.pi
        assert (p / (math.pi / 4)) == pytest.approx(round(p / (math.pi / 4)))
    assert 0 <= rand_phase(fx_rng, denominator=0) < 2 * math.pi


def test_rand_zx_graph_shape(fx_rng: Generator) -> None:
    g = rand_zx_graph(10, 25, fx_rng, boundary=3)
    assert g.num_nodes() == 10
    assert g.num_edges() == 25
    assert len(g.inputs) == len(g.outputs) == 3
    assert not any(g.edge_data(e).is_self_loop for e in g.edges())
    assert {g.kind(n) for n in g.nodes()} <= {SpiderKind.Z, SpiderKind.X}
    g.check_invariants()


def test_rand_zx_graph_same_seed(fx_bg: PCG64) -> None:
    g = rand_zx_graph(8, 12, Generator(fx_bg.jumped(1)))
    h = rand_zx_graph(8, 12, Generator(fx_bg.jumped(1)))
    assert [g.node_data(n) for n in g.nodes()] == [h.node_data(n) for n in h.nodes()]
    assert [g.edge_data(e) for e in g.edges()] == [h.edge_data(e) for e in h.edges()]


@pytest.mark.parametrize(
    ("nodes", "edges", "kwargs"),
    [(-1, 0, {}), (0, 1, {}), (1, 1, {}), (3, 0, {"boundary": 2})],
)
def test_rand_zx_graph_rejects_bad_sizes(nodes: int, edges: int, kwargs: dict[str, int]) -> None:
    with pytest.raises(ValueError):  # noqa: PT011
        rand_zx_graph(nodes, edges, **kwargs)  # type: ignore[arg-type]


def test_rand_circuit(fx_rng: Generator) -> None:
    circuit = rand_circuit(3, 5, fx_rng)
    assert circuit.width == 3
    # one gate per qubit and one two-qubit gate per layer
    assert len(circuit.gates) == 5 * 4
    assert all(q < 3 for gate in circuit.gates for q in gate.qubits)
