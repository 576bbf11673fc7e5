"""
ZX graph structure.

A :class:`ZXGraph` is a multigraph of spiders stored in two arenas, one for
spiders and one for edges. The edge table is the source of truth for
adjacency; each spider keeps a derived multiset of its incident edges that is
only ever updated by the mutators of :class:`ZXGraph`, so the two sides cannot
drift apart. Handles returned by the graph stay valid until the element they
refer to is removed.

Example
-------
```python
from zxfuse import EdgeKind, SpiderKind, ZXGraph

g = ZXGraph()
a = g.add_input_node(SpiderKind.Z)
b = g.add_node(SpiderKind.X, 3.14159)
g.add_edge(a, b, EdgeKind.REGULAR)
print(g.neighbors(a))
```
"""

from __future__ import annotations

import copy
from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING, SupportsFloat

from typing_extensions import override

from zxfuse import phase as phase_
from zxfuse import rewrite
from zxfuse.arena import Arena, EdgeHandle, InvalidHandleError, NodeHandle
from zxfuse.fundamentals import EdgeKind, SpiderKind

if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclass(frozen=True)
class Spider:
    """
    Read-only view of a spider.

    Attributes
    ----------
    kind : SpiderKind
        The kind of the spider.
    phase : float
        The phase in radians, in ``[0, 2π)``.
    incident_edges : tuple[EdgeHandle, ...]
        Incident edges in ascending handle order. A self-loop appears twice.
    """

    kind: SpiderKind
    phase: float
    incident_edges: tuple[EdgeHandle, ...] = ()

    @override
    def __str__(self) -> str:
        return f"{self.kind}({phase_.phase_to_str(self.phase)})"


@dataclass(frozen=True)
class Edge:
    """
    An edge between two spiders.

    The endpoints are unordered; ``source`` and ``target`` only record the
    order in which they were given to :meth:`ZXGraph.add_edge`.
    """

    source: NodeHandle
    target: NodeHandle
    kind: EdgeKind = EdgeKind.REGULAR

    @property
    def endpoints(self) -> tuple[NodeHandle, NodeHandle]:
        """Return both endpoints."""
        return (self.source, self.target)

    @property
    def is_self_loop(self) -> bool:
        """Return ``True`` if both endpoints are the same spider."""
        return self.source == self.target

    def other(self, node: NodeHandle) -> NodeHandle:
        """
        Return the endpoint opposite to ``node``.

        For a self-loop, ``node`` itself is returned.

        Raises
        ------
        ValueError
            If ``node`` is not an endpoint of the edge.
        """
        if node == self.source:
            return self.target
        if node == self.target:
            return self.source
        raise ValueError(f"{node!r} is not an endpoint of {self!r}")


@dataclass(frozen=True)
class GraphInvariantError(Exception):
    """Exception raised when the adjacency bookkeeping of a graph is inconsistent."""

    message: str

    @override
    def __str__(self) -> str:
        return f"Graph invariant violated: {self.message}"


class _SpiderRecord:
    __slots__ = ("incident", "kind", "phase")

    def __init__(self, kind: SpiderKind, phase: float) -> None:
        self.kind = kind
        self.phase = phase
        self.incident: Counter[EdgeHandle] = Counter()


def _replace_key(keys: dict[NodeHandle, None], old: NodeHandle, new: NodeHandle) -> dict[NodeHandle, None]:
    if old not in keys:
        return keys
    if new in keys:
        return {node: None for node in keys if node != old}
    return {new if node == old else node: None for node in keys}


class ZXGraph:
    """
    Arena-backed ZX multigraph.

    Spiders and edges are addressed by :class:`~zxfuse.arena.NodeHandle` and
    :class:`~zxfuse.arena.EdgeHandle`. Every mutator validates all the handles
    it is given before changing anything, so a failed call leaves the graph
    untouched. Self-loops and parallel edges are allowed.

    Attributes
    ----------
    inputs : tuple[NodeHandle, ...]
        Input boundary spiders, in registration order.
    outputs : tuple[NodeHandle, ...]
        Output boundary spiders, in registration order.
    """

    def __init__(self) -> None:
        """Create an empty graph."""
        self.__nodes: Arena[NodeHandle, _SpiderRecord] = Arena(NodeHandle)
        self.__edges: Arena[EdgeHandle, Edge] = Arena(EdgeHandle)
        # dicts used as insertion-ordered sets
        self.__inputs: dict[NodeHandle, None] = {}
        self.__outputs: dict[NodeHandle, None] = {}

    @override
    def __repr__(self) -> str:
        return (
            f"ZXGraph(nodes={self.num_nodes()}, edges={self.num_edges()}, "
            f"inputs={len(self.__inputs)}, outputs={len(self.__outputs)})"
        )

    def copy(self) -> ZXGraph:
        """
        Return an independent copy of the graph.

        Handles of the original graph are valid in the copy and refer to the
        corresponding elements.
        """
        return copy.deepcopy(self)

    # Construction

    def add_node(self, kind: SpiderKind, phase: SupportsFloat = 0.0) -> NodeHandle:
        """
        Add a spider to the graph.

        Parameters
        ----------
        kind : SpiderKind
            The kind of the spider.
        phase : SupportsFloat, optional
            The phase in radians, normalized to ``[0, 2π)``. Default is 0.

        Returns
        -------
        NodeHandle
            The handle of the new spider.
        """
        return self.__nodes.insert(_SpiderRecord(kind, phase_.normalize(phase)))

    def add_input_node(self, kind: SpiderKind, phase: SupportsFloat = 0.0) -> NodeHandle:
        """Add a spider and register it as an input."""
        node = self.add_node(kind, phase)
        self.__inputs[node] = None
        return node

    def add_output_node(self, kind: SpiderKind, phase: SupportsFloat = 0.0) -> NodeHandle:
        """Add a spider and register it as an output."""
        node = self.add_node(kind, phase)
        self.__outputs[node] = None
        return node

    def set_input(self, node: NodeHandle) -> None:
        """Register an existing spider as an input."""
        self.__nodes.check(node)
        self.__inputs[node] = None

    def set_output(self, node: NodeHandle) -> None:
        """Register an existing spider as an output."""
        self.__nodes.check(node)
        self.__outputs[node] = None

    def transfer_boundary(self, source: NodeHandle, target: NodeHandle) -> None:
        """
        Move the boundary roles of ``source`` to ``target``.

        In :attr:`inputs` and :attr:`outputs`, ``target`` takes the position
        of ``source``, so the order of the boundary is kept. If ``target``
        already has the role, ``source`` is only dropped from it.

        Raises
        ------
        InvalidHandleError
            If either spider is not live.
        """
        self.__nodes.check(source)
        self.__nodes.check(target)
        self.__inputs = _replace_key(self.__inputs, source, target)
        self.__outputs = _replace_key(self.__outputs, source, target)

    def add_edge(self, a: NodeHandle, b: NodeHandle, kind: EdgeKind = EdgeKind.REGULAR) -> EdgeHandle:
        """
        Add an edge between two spiders.

        Parameters
        ----------
        a, b : NodeHandle
            The endpoints. They may be equal, which creates a self-loop.
        kind : EdgeKind, optional
            The kind of the edge. Default is :attr:`EdgeKind.REGULAR`.

        Returns
        -------
        EdgeHandle
            The handle of the new edge.

        Raises
        ------
        InvalidHandleError
            If either endpoint is not a live spider.
        """
        record_a = self.__nodes.get(a)
        record_b = self.__nodes.get(b)
        edge = self.__edges.insert(Edge(a, b, kind))
        record_a.incident[edge] += 1
        record_b.incident[edge] += 1
        return edge

    # Removal

    def remove_edge(self, edge: EdgeHandle) -> None:
        """
        Remove an edge.

        Raises
        ------
        InvalidHandleError
            If the edge is not live.
        """
        data = self.__edges.get(edge)
        for node in data.endpoints:
            incident = self.__nodes.get(node).incident
            incident[edge] -= 1
            if incident[edge] <= 0:
                del incident[edge]
        self.__edges.remove(edge)

    def remove_node(self, node: NodeHandle) -> None:
        """
        Remove a spider together with every edge touching it.

        The spider is also removed from the input and output sets.

        Raises
        ------
        InvalidHandleError
            If the spider is not live.
        """
        record = self.__nodes.get(node)
        for edge in sorted(record.incident):
            self.remove_edge(edge)
        self.__nodes.remove(node)
        self.__inputs.pop(node, None)
        self.__outputs.pop(node, None)

    # Phases

    def kind(self, node: NodeHandle) -> SpiderKind:
        """Return the kind of a spider."""
        return self.__nodes.get(node).kind

    def phase(self, node: NodeHandle) -> float:
        """Return the phase of a spider."""
        return self.__nodes.get(node).phase

    def set_phase(self, node: NodeHandle, phase: SupportsFloat) -> None:
        """Set the phase of a spider, normalized to ``[0, 2π)``."""
        value = phase_.normalize(phase)
        self.__nodes.get(node).phase = value

    def add_to_phase(self, node: NodeHandle, phase: SupportsFloat) -> None:
        """Add ``phase`` to the phase of a spider."""
        record = self.__nodes.get(node)
        record.phase = phase_.normalize(record.phase + float(phase))

    # Queries

    def has_node(self, node: object) -> bool:
        """Return ``True`` if ``node`` is a live spider handle."""
        return node in self.__nodes

    def has_edge(self, edge: object) -> bool:
        """Return ``True`` if ``edge`` is a live edge handle."""
        return edge in self.__edges

    def num_nodes(self) -> int:
        """Return the number of spiders."""
        return len(self.__nodes)

    def num_edges(self) -> int:
        """Return the number of edges."""
        return len(self.__edges)

    def nodes(self) -> Iterator[NodeHandle]:
        """Iterate over spiders in ascending handle order."""
        return iter(self.__nodes)

    def edges(self) -> Iterator[EdgeHandle]:
        """Iterate over edges in ascending handle order."""
        return iter(self.__edges)

    def node_data(self, node: NodeHandle) -> Spider:
        """
        Return a read-only view of a spider.

        Raises
        ------
        InvalidHandleError
            If the spider is not live.
        """
        record = self.__nodes.get(node)
        return Spider(record.kind, record.phase, tuple(sorted(record.incident.elements())))

    def edge_data(self, edge: EdgeHandle) -> Edge:
        """
        Return an edge.

        Raises
        ------
        InvalidHandleError
            If the edge is not live.
        """
        return self.__edges.get(edge)

    def incident_edges(self, node: NodeHandle) -> list[EdgeHandle]:
        """Return the edges touching a spider in ascending handle order, a self-loop twice."""
        return sorted(self.__nodes.get(node).incident.elements())

    def degree(self, node: NodeHandle) -> int:
        """Return the number of edge ends at a spider; a self-loop counts twice."""
        return sum(self.__nodes.get(node).incident.values())

    def neighbors(self, node: NodeHandle) -> list[NodeHandle]:
        """
        Return the neighbors of a spider.

        One entry is returned per incident edge occurrence, so parallel edges
        yield the same neighbor several times and a self-loop yields ``node``
        twice. The result is sorted by handle.

        Raises
        ------
        InvalidHandleError
            If the spider is not live.
        """
        record = self.__nodes.get(node)
        return sorted(self.__edges.get(edge).other(node) for edge in record.incident.elements())

    def edges_between(self, a: NodeHandle, b: NodeHandle) -> list[EdgeHandle]:
        """Return the edges joining ``a`` and ``b`` in ascending handle order."""
        self.__nodes.check(b)
        return sorted(
            edge for edge in self.__nodes.get(a).incident if set(self.__edges.get(edge).endpoints) == {a, b}
        )

    # Boundary

    @property
    def inputs(self) -> tuple[NodeHandle, ...]:
        """Return the input spiders in registration order."""
        return tuple(self.__inputs)

    @property
    def outputs(self) -> tuple[NodeHandle, ...]:
        """Return the output spiders in registration order."""
        return tuple(self.__outputs)

    def is_input(self, node: NodeHandle) -> bool:
        """Return ``True`` if ``node`` is registered as an input."""
        return node in self.__inputs

    def is_output(self, node: NodeHandle) -> bool:
        """Return ``True`` if ``node`` is registered as an output."""
        return node in self.__outputs

    def is_boundary(self, node: NodeHandle) -> bool:
        """Return ``True`` if ``node`` is an input or an output."""
        return node in self.__inputs or node in self.__outputs

    # Rewriting

    def fuse_spiders(self) -> int:
        """
        Fuse spiders until no candidate remains.

        See :func:`zxfuse.rewrite.fuse_spiders`.

        Returns
        -------
        int
            The number of fusions performed.
        """
        return rewrite.fuse_spiders(self)

    def fuse(self, a: NodeHandle, b: NodeHandle, edge: EdgeHandle | None = None) -> NodeHandle:
        """
        Fuse two given spiders and return the survivor.

        See :func:`zxfuse.rewrite.fuse`.
        """
        return rewrite.fuse(self, a, b, edge)

    # Consistency

    def check_invariants(self) -> None:
        """
        Verify the adjacency bookkeeping of the graph.

        Checks that incident multisets and the edge table agree in both
        directions, that boundary sets only hold live spiders, and that every
        phase lies in ``[0, 2π)``.

        Raises
        ------
        GraphInvariantError
            If an inconsistency is found.
        """
        for node, record in self.__nodes.items():
            if not 0 <= record.phase < phase_.TAU:
                raise GraphInvariantError(f"phase {record.phase!r} of {node!r} is out of range")
            for edge, count in record.incident.items():
                if edge not in self.__edges:
                    raise GraphInvariantError(f"{node!r} references dead edge {edge!r}")
                occurrences = self.__edges.get(edge).endpoints.count(node)
                if occurrences != count:
                    raise GraphInvariantError(f"{node!r} lists {edge!r} {count} times, expected {occurrences}")
        for edge, data in self.__edges.items():
            for node in data.endpoints:
                if node not in self.__nodes:
                    raise GraphInvariantError(f"{edge!r} references dead node {node!r}")
                if self.__nodes.get(node).incident[edge] != data.endpoints.count(node):
                    raise GraphInvariantError(f"{edge!r} is missing from the incident edges of {node!r}")
        for name, boundary in (("inputs", self.__inputs), ("outputs", self.__outputs)):
            for node in boundary:
                if node not in self.__nodes:
                    raise GraphInvariantError(f"{name} contain dead node {node!r}")


__all__ = ["Edge", "GraphInvariantError", "InvalidHandleError", "Spider", "ZXGraph"]
