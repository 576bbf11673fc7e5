from __future__ import annotations

import dataclasses
import math

import pytest
from numpy.random import PCG64, Generator

from zxfuse.arena import EdgeHandle, InvalidHandleError, NodeHandle
from zxfuse.fundamentals import EdgeKind, SpiderKind
from zxfuse.graph import Edge, GraphInvariantError, Spider, ZXGraph


def test_add_node_normalizes_phase() -> None:
    g = ZXGraph()
    n = g.add_node(SpiderKind.Z, 3 * math.pi)
    m = g.add_node(SpiderKind.X, -math.pi / 2)
    assert g.phase(n) == pytest.approx(math.pi)
    assert g.phase(m) == pytest.approx(1.5 * math.pi)
    assert g.node_data(n) == Spider(SpiderKind.Z, g.phase(n), ())
    g.check_invariants()


def test_boundary_nodes() -> None:
    g = ZXGraph()
    i = g.add_input_node(SpiderKind.Z)
    o = g.add_output_node(SpiderKind.Z)
    n = g.add_node(SpiderKind.X)
    assert g.inputs == (i,)
    assert g.outputs == (o,)
    assert g.is_input(i)
    assert not g.is_input(n)
    assert g.is_boundary(o)
    assert not g.is_boundary(n)
    g.set_output(i)
    assert g.is_input(i)
    assert g.is_output(i)
    assert g.outputs == (o, i)
    g.check_invariants()


def test_transfer_boundary_keeps_position() -> None:
    g = ZXGraph()
    i0 = g.add_input_node(SpiderKind.Z)
    i1 = g.add_input_node(SpiderKind.Z)
    o0 = g.add_output_node(SpiderKind.Z)
    o1 = g.add_output_node(SpiderKind.Z)
    n = g.add_node(SpiderKind.X)
    g.transfer_boundary(o0, n)
    assert g.outputs == (n, o1)
    assert not g.is_output(o0)
    # target already an input: the source is only dropped
    g.transfer_boundary(i1, i0)
    assert g.inputs == (i0,)
    g.transfer_boundary(i0, n)
    assert g.inputs == (n,)
    assert g.is_input(n)
    assert g.is_output(n)
    g.remove_node(o0)
    with pytest.raises(InvalidHandleError):
        g.transfer_boundary(o0, n)
    assert g.outputs == (n, o1)
    g.check_invariants()


def test_add_edge_updates_both_endpoints() -> None:
    g = ZXGraph()
    a = g.add_node(SpiderKind.Z)
    b = g.add_node(SpiderKind.X)
    e = g.add_edge(a, b, EdgeKind.HADAMARD)
    assert g.edge_data(e) == Edge(a, b, EdgeKind.HADAMARD)
    assert g.incident_edges(a) == [e]
    assert g.incident_edges(b) == [e]
    assert g.neighbors(a) == [b]
    assert g.neighbors(b) == [a]
    assert g.node_data(a).incident_edges == (e,)
    assert g.num_edges() == 1
    g.check_invariants()


def test_self_loop_counts_twice() -> None:
    g = ZXGraph()
    a = g.add_node(SpiderKind.Z)
    e = g.add_edge(a, a)
    assert g.edge_data(e).is_self_loop
    assert g.incident_edges(a) == [e, e]
    assert g.neighbors(a) == [a, a]
    assert g.degree(a) == 2
    assert g.edges_between(a, a) == [e]
    g.check_invariants()
    g.remove_edge(e)
    assert g.incident_edges(a) == []
    assert g.num_edges() == 0
    g.check_invariants()


def test_parallel_edges_are_kept() -> None:
    g = ZXGraph()
    a = g.add_node(SpiderKind.Z)
    b = g.add_node(SpiderKind.Z)
    e1 = g.add_edge(a, b)
    e2 = g.add_edge(b, a)
    assert g.neighbors(a) == [b, b]
    assert g.edges_between(a, b) == [e1, e2]
    assert g.edges_between(b, a) == [e1, e2]
    g.remove_edge(e1)
    assert g.neighbors(a) == [b]
    g.check_invariants()


def test_neighbors_sorted_by_handle() -> None:
    g = ZXGraph()
    hub = g.add_node(SpiderKind.Z)
    leaves = [g.add_node(SpiderKind.X) for _ in range(4)]
    for leaf in reversed(leaves):
        g.add_edge(leaf, hub)
    assert g.neighbors(hub) == leaves


def test_add_edge_to_dead_node_leaves_graph_unchanged() -> None:
    g = ZXGraph()
    a = g.add_node(SpiderKind.Z)
    b = g.add_node(SpiderKind.Z)
    g.remove_node(b)
    with pytest.raises(InvalidHandleError):
        g.add_edge(a, b)
    with pytest.raises(InvalidHandleError):
        g.add_edge(b, a)
    assert g.num_edges() == 0
    assert g.incident_edges(a) == []
    g.check_invariants()


def test_remove_node_removes_edges_and_boundary() -> None:
    g = ZXGraph()
    i = g.add_input_node(SpiderKind.Z)
    n = g.add_node(SpiderKind.X)
    o = g.add_output_node(SpiderKind.Z)
    e1 = g.add_edge(i, n)
    e2 = g.add_edge(n, o)
    g.add_edge(n, n)
    g.set_output(n)
    g.remove_node(n)
    assert not g.has_node(n)
    assert not g.has_edge(e1)
    assert not g.has_edge(e2)
    assert g.num_edges() == 0
    assert g.neighbors(i) == []
    assert g.outputs == (o,)
    with pytest.raises(InvalidHandleError):
        g.node_data(n)
    with pytest.raises(InvalidHandleError):
        g.edge_data(e1)
    with pytest.raises(InvalidHandleError):
        g.remove_node(n)
    g.check_invariants()


def test_remove_edge_twice_raises() -> None:
    g = ZXGraph()
    a = g.add_node(SpiderKind.Z)
    b = g.add_node(SpiderKind.Z)
    e = g.add_edge(a, b)
    g.remove_edge(e)
    with pytest.raises(InvalidHandleError):
        g.remove_edge(e)
    g.check_invariants()


def test_stale_node_handle_after_reuse() -> None:
    g = ZXGraph()
    a = g.add_node(SpiderKind.Z)
    g.remove_node(a)
    b = g.add_node(SpiderKind.X)
    assert b.index == a.index
    assert not g.has_node(a)
    assert g.has_node(b)
    with pytest.raises(InvalidHandleError):
        g.kind(a)
    with pytest.raises(InvalidHandleError):
        g.add_edge(a, b)
    assert g.kind(b) == SpiderKind.X


def test_handles_are_sparse_after_removal() -> None:
    g = ZXGraph()
    nodes = [g.add_node(SpiderKind.Z) for _ in range(5)]
    g.remove_node(nodes[1])
    g.remove_node(nodes[3])
    assert list(g.nodes()) == [nodes[0], nodes[2], nodes[4]]
    assert g.num_nodes() == 3


def test_phase_updates() -> None:
    g = ZXGraph()
    n = g.add_node(SpiderKind.Z, math.pi)
    g.add_to_phase(n, 1.5 * math.pi)
    assert g.phase(n) == pytest.approx(0.5 * math.pi)
    g.set_phase(n, -math.pi / 4)
    assert g.phase(n) == pytest.approx(1.75 * math.pi)
    with pytest.raises(ValueError, match="finite"):
        g.set_phase(n, math.nan)
    assert g.phase(n) == pytest.approx(1.75 * math.pi)


def test_views_are_read_only() -> None:
    g = ZXGraph()
    a = g.add_node(SpiderKind.Z, 1.0)
    b = g.add_node(SpiderKind.Z)
    e = g.add_edge(a, b)
    with pytest.raises(dataclasses.FrozenInstanceError):
        g.node_data(a).phase = 2.0  # type: ignore[misc]
    with pytest.raises(dataclasses.FrozenInstanceError):
        g.edge_data(e).kind = EdgeKind.HADAMARD  # type: ignore[misc]
    assert g.phase(a) == 1.0
    assert g.edge_data(e).kind == EdgeKind.REGULAR


def test_edge_other() -> None:
    a, b, c = NodeHandle(0), NodeHandle(1), NodeHandle(2)
    edge = Edge(a, b)
    assert edge.other(a) == b
    assert edge.other(b) == a
    with pytest.raises(ValueError, match="not an endpoint"):
        edge.other(c)


def test_copy_is_independent() -> None:
    g = ZXGraph()
    a = g.add_input_node(SpiderKind.Z)
    b = g.add_node(SpiderKind.Z)
    e = g.add_edge(a, b)
    h = g.copy()
    h.remove_node(b)
    assert g.has_node(b)
    assert g.has_edge(e)
    assert not h.has_edge(e)
    assert h.inputs == (a,)
    g.check_invariants()
    h.check_invariants()


def test_repr() -> None:
    g = ZXGraph()
    g.add_input_node(SpiderKind.Z)
    assert repr(g) == "ZXGraph(nodes=1, edges=0, inputs=1, outputs=0)"
    assert str(Spider(SpiderKind.X, math.pi)) == "X(π)"


def test_check_invariants_detects_desync() -> None:
    g = ZXGraph()
    a = g.add_node(SpiderKind.Z)
    b = g.add_node(SpiderKind.Z)
    g.add_edge(a, b)
    g.check_invariants()
    # corrupt the private incident index
    g._ZXGraph__nodes.get(a).incident.clear()  # type: ignore[attr-defined]
    with pytest.raises(GraphInvariantError, match="missing from the incident edges"):
        g.check_invariants()


@pytest.mark.parametrize("jumps", range(1, 11))
def test_random_operations_preserve_invariants(fx_bg: PCG64, jumps: int) -> None:
    rng = Generator(fx_bg.jumped(jumps))
    g = ZXGraph()
    for _ in range(200):
        nodes = list(g.nodes())
        edges = list(g.edges())
        action = rng.random()
        if action < 0.35 or len(nodes) < 2:
            kind = SpiderKind.Z if rng.random() < 0.5 else SpiderKind.X
            phase = float(rng.uniform(-10, 10))
            if rng.random() < 0.1:
                g.add_input_node(kind, phase)
            elif rng.random() < 0.1:
                g.add_output_node(kind, phase)
            else:
                g.add_node(kind, phase)
        elif action < 0.7:
            a = nodes[int(rng.integers(len(nodes)))]
            b = nodes[int(rng.integers(len(nodes)))]
            g.add_edge(a, b, EdgeKind.HADAMARD if rng.random() < 0.3 else EdgeKind.REGULAR)
        elif action < 0.8 and edges:
            g.remove_edge(edges[int(rng.integers(len(edges)))])
        elif action < 0.9:
            g.remove_node(nodes[int(rng.integers(len(nodes)))])
        else:
            g.fuse_spiders()
        g.check_invariants()
        total_degree = sum(g.degree(n) for n in g.nodes())
        assert total_degree == 2 * g.num_edges()


def test_incident_edges_of_unknown_handle() -> None:
    g = ZXGraph()
    with pytest.raises(InvalidHandleError):
        g.incident_edges(NodeHandle(0))
    with pytest.raises(InvalidHandleError):
        g.edge_data(EdgeHandle(0))
