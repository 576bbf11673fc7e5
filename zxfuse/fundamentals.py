"""
Fundamental tags of ZX diagrams.

This module defines the kinds of spiders and edges that can appear in a
:class:`zxfuse.graph.ZXGraph`.
"""

from __future__ import annotations

import enum
from enum import Enum

from typing_extensions import override


class _EnumRepr(Enum):
    @override
    def __repr__(self) -> str:
        """
        Return a string representation of an Enum member.

        Returns
        -------
        str
            A string in the format `ClassName.MEMBER_NAME`, which evaluates
            back to the member when the class is in scope.
        """
        return f"{self.__class__.__name__}.{self.name}"


class SpiderKind(_EnumRepr):
    """
    Kind of a spider.

    Z and X spiders are the generators of the ZX-calculus and can be fused.
    ``H_BOX`` is a decorative kind used for display only; it never takes
    part in fusion.
    """

    Z = enum.auto()
    X = enum.auto()
    H_BOX = enum.auto()

    @property
    def is_fusable(self) -> bool:
        """Return ``True`` for the kinds that spider fusion applies to."""
        return self in {SpiderKind.Z, SpiderKind.X}

    @override
    def __str__(self) -> str:
        return "H" if self == SpiderKind.H_BOX else self.name


class EdgeKind(_EnumRepr):
    """
    Kind of an edge.

    Only regular edges are fusion candidates. A Hadamard edge stands for an
    implicit basis change between its endpoints.
    """

    REGULAR = enum.auto()
    HADAMARD = enum.auto()

    def toggle(self) -> EdgeKind:
        """Return the other kind; two Hadamard gates in a row cancel."""
        if self == EdgeKind.REGULAR:
            return EdgeKind.HADAMARD
        return EdgeKind.REGULAR
