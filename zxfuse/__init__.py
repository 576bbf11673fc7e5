"""
Simplify ZX diagrams by spider fusion.

This package represents quantum computations as ZX graphs: multigraphs of Z
and X spiders connected by regular or Hadamard edges. Graphs are stored in
arenas addressed by stable handles and can be built directly or converted
from gate circuits, then simplified in place by fusing adjacent spiders of
the same kind.
"""

from __future__ import annotations

from zxfuse.arena import EdgeHandle, InvalidHandleError, NodeHandle
from zxfuse.circuit import Circuit, circuit_to_graph
from zxfuse.fundamentals import EdgeKind, SpiderKind
from zxfuse.graph import Edge, Spider, ZXGraph
from zxfuse.rewrite import FusionError, KindMismatchError, SelfFusionError, UnfusableError, fuse, fuse_spiders

__all__ = [
    "Circuit",
    "Edge",
    "EdgeHandle",
    "EdgeKind",
    "FusionError",
    "InvalidHandleError",
    "KindMismatchError",
    "NodeHandle",
    "SelfFusionError",
    "Spider",
    "SpiderKind",
    "UnfusableError",
    "ZXGraph",
    "circuit_to_graph",
    "fuse",
    "fuse_spiders",
]
