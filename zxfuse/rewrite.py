"""
Spider fusion.

Two distinct spiders of the same kind (Z or X) joined by a regular edge fuse
into a single spider carrying the sum of both phases. The automatic driver
:func:`fuse_spiders` applies the rule until no candidate remains; candidates
are searched in ascending edge handle order and the spider with the lower
handle survives, so the result only depends on the input graph.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple

from typing_extensions import override

from zxfuse.fundamentals import EdgeKind

if TYPE_CHECKING:
    from zxfuse.arena import EdgeHandle, NodeHandle
    from zxfuse.fundamentals import SpiderKind
    from zxfuse.graph import ZXGraph

logger = logging.getLogger(__name__)


class FusionError(Exception):
    """Base class of the errors raised by a rejected manual fusion."""


@dataclass(frozen=True)
class SelfFusionError(FusionError):
    """Exception raised when a spider is fused with itself."""

    node: NodeHandle

    @override
    def __str__(self) -> str:
        return f"Cannot fuse {self.node!r} with itself"


@dataclass(frozen=True)
class KindMismatchError(FusionError):
    """Exception raised when fusing spiders of different kinds."""

    a: NodeHandle
    b: NodeHandle
    kind_a: SpiderKind
    kind_b: SpiderKind

    @override
    def __str__(self) -> str:
        return f"Cannot fuse {self.a!r} of kind {self.kind_a} with {self.b!r} of kind {self.kind_b}"


@dataclass(frozen=True)
class UnfusableError(FusionError):
    """Exception raised when two spiders of the same kind still cannot be fused."""

    a: NodeHandle
    b: NodeHandle
    reason: str

    @override
    def __str__(self) -> str:
        return f"Cannot fuse {self.a!r} with {self.b!r}: {self.reason}"


class SpiderMatch(NamedTuple):
    """
    A fusion candidate.

    Attributes
    ----------
    edge : EdgeHandle
        The regular edge along which the spiders fuse.
    survivor : NodeHandle
        The spider that is kept, the one with the lower handle.
    victim : NodeHandle
        The spider that is removed.
    """

    edge: EdgeHandle
    survivor: NodeHandle
    victim: NodeHandle


def _is_candidate(graph: ZXGraph, edge: EdgeHandle) -> bool:
    data = graph.edge_data(edge)
    if data.kind != EdgeKind.REGULAR or data.is_self_loop:
        return False
    kind = graph.kind(data.source)
    return kind.is_fusable and kind == graph.kind(data.target)


def _make_match(edge: EdgeHandle, a: NodeHandle, b: NodeHandle) -> SpiderMatch:
    survivor, victim = (a, b) if a < b else (b, a)
    return SpiderMatch(edge, survivor, victim)


def match_spider(graph: ZXGraph) -> SpiderMatch | None:
    """
    Find the first fusion candidate.

    Edges are scanned in ascending handle order; the first regular edge that
    is not a self-loop and joins two spiders of the same fusable kind is
    returned.

    Parameters
    ----------
    graph : ZXGraph
        The graph to search.

    Returns
    -------
    SpiderMatch | None
        The candidate, or ``None`` if the graph has none.
    """
    for edge in graph.edges():
        if _is_candidate(graph, edge):
            data = graph.edge_data(edge)
            return _make_match(edge, data.source, data.target)
    return None


def _check_pair(graph: ZXGraph, a: NodeHandle, b: NodeHandle, edge: EdgeHandle | None) -> EdgeHandle:
    """Validate a fusion of ``a`` and ``b`` and return the fusing edge, without touching the graph."""
    kind_a = graph.kind(a)
    kind_b = graph.kind(b)
    if a == b:
        raise SelfFusionError(a)
    if kind_a != kind_b:
        raise KindMismatchError(a, b, kind_a, kind_b)
    if not kind_a.is_fusable:
        raise UnfusableError(a, b, f"{kind_a} spiders do not fuse")
    if edge is None:
        regular = [e for e in graph.edges_between(a, b) if graph.edge_data(e).kind == EdgeKind.REGULAR]
        if not regular:
            raise UnfusableError(a, b, "no regular edge joins them")
        return regular[0]
    data = graph.edge_data(edge)
    if data.kind != EdgeKind.REGULAR:
        raise UnfusableError(a, b, f"{edge!r} is not a regular edge")
    if set(data.endpoints) != {a, b}:
        raise UnfusableError(a, b, f"{edge!r} does not join them")
    return edge


def _fuse_match(graph: ZXGraph, match: SpiderMatch) -> NodeHandle:
    # the match must already be valid
    edge, survivor, victim = match
    graph.add_to_phase(survivor, graph.phase(victim))
    for other_edge in sorted(set(graph.incident_edges(victim))):
        if other_edge == edge:
            continue
        data = graph.edge_data(other_edge)
        other = data.other(victim)
        graph.remove_edge(other_edge)
        if other == survivor:
            continue
        if other == victim:
            other = survivor
        graph.add_edge(survivor, other, data.kind)
    graph.remove_edge(edge)
    graph.transfer_boundary(victim, survivor)
    graph.remove_node(victim)
    logger.debug("Fused %r into %r along %r", victim, survivor, edge)
    return survivor


def apply_match(graph: ZXGraph, match: SpiderMatch) -> NodeHandle:
    """
    Fuse the spiders of a candidate returned by :func:`match_spider`.

    The survivor receives the normalized sum of both phases. Each edge of the
    victim other than the fusing edge is moved to the survivor with its kind
    unchanged; edges that would join the survivor to itself are dropped, and
    a self-loop of the victim becomes a self-loop of the survivor. Parallel
    edges are kept. The survivor takes over the boundary roles of the victim,
    at the victim's position in :attr:`ZXGraph.inputs` and
    :attr:`ZXGraph.outputs`.

    The match is checked like the arguments of :func:`fuse` before the graph
    is modified, so a stale or forged match leaves the graph unchanged.

    Parameters
    ----------
    graph : ZXGraph
        The graph to rewrite in place.
    match : SpiderMatch
        The candidate.

    Returns
    -------
    NodeHandle
        The survivor.

    Raises
    ------
    InvalidHandleError
        If a handle of the match is not live.
    FusionError
        If the match does not describe a valid fusion, or if its survivor is
        not the spider with the lower handle.
    """
    edge, survivor, victim = match
    _check_pair(graph, survivor, victim, edge)
    if victim < survivor:
        raise UnfusableError(survivor, victim, f"the survivor must be the lower handle, {victim!r} < {survivor!r}")
    return _fuse_match(graph, match)


def fuse_step(graph: ZXGraph) -> NodeHandle | None:
    """
    Apply a single automatic fusion.

    Returns
    -------
    NodeHandle | None
        The survivor, or ``None`` if the graph has no candidate.
    """
    match = match_spider(graph)
    if match is None:
        return None
    return _fuse_match(graph, match)


def fuse_spiders(graph: ZXGraph) -> int:
    """
    Fuse spiders until no candidate remains.

    Each fusion removes one spider, so a graph with ``n`` spiders undergoes
    at most ``n - 1`` fusions.

    Parameters
    ----------
    graph : ZXGraph
        The graph to rewrite in place.

    Returns
    -------
    int
        The number of fusions performed.
    """
    count = 0
    while fuse_step(graph) is not None:
        count += 1
    logger.info("Spider fusion reached a fixpoint after %d fusions, %d spiders left", count, graph.num_nodes())
    return count


def fuse(graph: ZXGraph, a: NodeHandle, b: NodeHandle, edge: EdgeHandle | None = None) -> NodeHandle:
    """
    Fuse two given spiders.

    Everything is checked before the graph is modified: a rejected fusion
    leaves the graph unchanged.

    Parameters
    ----------
    graph : ZXGraph
        The graph to rewrite in place.
    a, b : NodeHandle
        The spiders to fuse.
    edge : EdgeHandle, optional
        The regular edge to fuse along. If None, the regular edge joining
        ``a`` and ``b`` with the lowest handle is used.

    Returns
    -------
    NodeHandle
        The survivor, the one of ``a`` and ``b`` with the lower handle.

    Raises
    ------
    InvalidHandleError
        If a handle is not live.
    SelfFusionError
        If ``a`` and ``b`` are the same spider.
    KindMismatchError
        If the spiders have different kinds.
    UnfusableError
        If the spiders are not Z or X spiders, or are not joined by a
        regular edge.
    """
    edge = _check_pair(graph, a, b, edge)
    return _fuse_match(graph, _make_match(edge, a, b))
