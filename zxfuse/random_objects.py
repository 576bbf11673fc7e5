"""Random ZX graphs and circuits."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from zxfuse.circuit import Circuit
from zxfuse.fundamentals import EdgeKind, SpiderKind
from zxfuse.graph import ZXGraph
from zxfuse.rng import ensure_rng

if TYPE_CHECKING:
    from numpy.random import Generator


def rand_phase(rng: Generator | None = None, denominator: int = 4) -> float:
    """
    Draw a random phase.

    Parameters
    ----------
    rng : Generator, optional
        Random number generator.
    denominator : int, optional
        If positive, the phase is a multiple of ``π / denominator``; if 0, it
        is drawn uniformly from ``[0, 2π)``. Default is 4.

    Returns
    -------
    float
        A phase in radians.
    """
    rng = ensure_rng(rng)
    if denominator > 0:
        return int(rng.integers(2 * denominator)) * math.pi / denominator
    return float(rng.uniform(0, 2 * math.pi))


def rand_zx_graph(
    nodes: int,
    edges: int,
    rng: Generator | None = None,
    *,
    x_prob: float = 0.5,
    hadamard_prob: float = 0.2,
    self_loops: bool = False,
    boundary: int = 0,
) -> ZXGraph:
    """
    Generate a random ZX graph.

    Parameters
    ----------
    nodes : int
        Number of spiders.
    edges : int
        Number of edges; endpoints are drawn uniformly, so parallel edges
        may occur.
    rng : Generator, optional
        Random number generator.
    x_prob : float, optional
        Probability for a spider to be an X spider rather than a Z spider.
    hadamard_prob : float, optional
        Probability for an edge to be a Hadamard edge.
    self_loops : bool, optional
        Whether edges may join a spider to itself. Default is False.
    boundary : int, optional
        Number of spiders registered as inputs, and as many registered as
        outputs, taken from the first and the last spiders.

    Returns
    -------
    ZXGraph
        The random graph.
    """
    if nodes < 0 or edges < 0:
        raise ValueError("Number of nodes and edges must be non-negative.")
    if edges and (nodes == 0 or (nodes == 1 and not self_loops)):
        raise ValueError("Not enough nodes to place edges.")
    if 2 * boundary > nodes:
        raise ValueError("Too many boundary spiders.")
    rng = ensure_rng(rng)
    graph = ZXGraph()
    handles = [
        graph.add_node(SpiderKind.X if rng.random() < x_prob else SpiderKind.Z, rand_phase(rng))
        for _ in range(nodes)
    ]
    for i in range(boundary):
        graph.set_input(handles[i])
        graph.set_output(handles[nodes - 1 - i])
    for _ in range(edges):
        a = int(rng.integers(nodes))
        b = int(rng.integers(nodes))
        while b == a and not self_loops:
            b = int(rng.integers(nodes))
        kind = EdgeKind.HADAMARD if rng.random() < hadamard_prob else EdgeKind.REGULAR
        graph.add_edge(handles[a], handles[b], kind)
    return graph


def rand_circuit(width: int, depth: int, rng: Generator | None = None) -> Circuit:
    """
    Generate a random circuit from the gates that convert to ZX graphs.

    Parameters
    ----------
    width : int
        Number of qubits.
    depth : int
        Number of layers; each layer applies one random gate per qubit and,
        when the width allows it, one random two-qubit gate.
    rng : Generator, optional
        Random number generator.

    Returns
    -------
    Circuit
        The random circuit.
    """
    rng = ensure_rng(rng)
    circuit = Circuit(width)
    single = [circuit.x, circuit.y, circuit.z, circuit.h, circuit.s, circuit.t]
    rotations = [circuit.rx, circuit.rz, circuit.p]
    double = [circuit.cnot, circuit.cz, circuit.swap]
    for _ in range(depth):
        for qubit in range(width):
            if rng.random() < 0.5:
                single[int(rng.integers(len(single)))](qubit)
            else:
                rotations[int(rng.integers(len(rotations)))](qubit, rand_phase(rng, denominator=0))
        if width >= 2:
            a, b = (int(q) for q in rng.choice(width, size=2, replace=False))
            double[int(rng.integers(len(double)))](a, b)
    return circuit
