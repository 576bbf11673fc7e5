"""
Read-only export of ZX graphs.

The functions of this module only use the query API of
:class:`~zxfuse.graph.ZXGraph`; they never modify the graph and do not assume
that handles are contiguous.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import networkx as nx

from zxfuse.fundamentals import EdgeKind, SpiderKind
from zxfuse.phase import is_zero, phase_to_str

if TYPE_CHECKING:
    from zxfuse.arena import NodeHandle
    from zxfuse.graph import ZXGraph

_COLORS = {SpiderKind.Z: "#ccffcc", SpiderKind.X: "#ff8888", SpiderKind.H_BOX: "yellow"}


def boundary_role(graph: ZXGraph, node: NodeHandle) -> str | None:
    """
    Return the boundary role of a spider.

    Returns
    -------
    str | None
        ``"input"``, ``"output"``, ``"input/output"`` for a spider that is
        both, or None for an internal spider.
    """
    roles = [name for name, flag in (("input", graph.is_input(node)), ("output", graph.is_output(node))) if flag]
    return "/".join(roles) if roles else None


def to_networkx(graph: ZXGraph) -> nx.MultiGraph[NodeHandle]:
    """
    Convert a ZX graph into a :class:`networkx.MultiGraph`.

    Nodes are keyed by their handle and carry the attributes ``kind``,
    ``phase`` and ``boundary``. Edges are keyed by their handle and carry the
    attribute ``kind``. Parallel edges and self-loops are preserved.

    Parameters
    ----------
    graph : ZXGraph
        The graph to export.

    Returns
    -------
    networkx.MultiGraph
        A new multigraph independent of ``graph``.
    """
    g: nx.MultiGraph[NodeHandle] = nx.MultiGraph()
    for node in graph.nodes():
        data = graph.node_data(node)
        g.add_node(node, kind=data.kind, phase=data.phase, boundary=boundary_role(graph, node))
    for edge in graph.edges():
        data = graph.edge_data(edge)
        g.add_edge(data.source, data.target, key=edge, kind=data.kind)
    return g


def draw(graph: ZXGraph, **kwargs: Any) -> None:
    """
    Draw a ZX graph with :mod:`matplotlib`.

    Z spiders are green, X spiders red, Hadamard boxes yellow. Nonzero phases
    are written in units of π and Hadamard edges are dashed. Boundary
    spiders get a thick outline.

    Parameters
    ----------
    graph : ZXGraph
        The graph to draw.
    kwargs : keyword arguments, optional
        Additional arguments passed to :func:`networkx.draw_networkx_nodes`.
    """
    multi = to_networkx(graph)
    # parallel edges are drawn once
    g: nx.Graph[NodeHandle] = nx.Graph()
    g.add_nodes_from(multi.nodes(data=True))
    g.add_edges_from(multi.edges())
    pos = nx.spring_layout(g, seed=0)
    nodes = list(g.nodes)
    labels = {n: "" if is_zero(g.nodes[n]["phase"]) else phase_to_str(g.nodes[n]["phase"]) for n in nodes}
    colors = [_COLORS[g.nodes[n]["kind"]] for n in nodes]
    widths = [2.5 if g.nodes[n]["boundary"] else 1.0 for n in nodes]
    nx.draw_networkx_nodes(g, pos, nodelist=nodes, node_color=colors, edgecolors="k", linewidths=widths, **kwargs)
    nx.draw_networkx_labels(g, pos, labels=labels)
    for kind, style in ((EdgeKind.REGULAR, "solid"), (EdgeKind.HADAMARD, "dashed")):
        edgelist = [(u, v) for u, v, k in multi.edges(data="kind") if k == kind]
        if edgelist:
            nx.draw_networkx_edges(g, pos, edgelist=edgelist, style=style)
