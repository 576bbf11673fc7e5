"""
Gate circuits and their conversion to ZX graphs.

This module holds a minimal gate model and translates a circuit into a
:class:`~zxfuse.graph.ZXGraph`, gate by gate, following a fixed table of
spider insertions.
"""

from __future__ import annotations

import enum
import math
import warnings
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, SupportsFloat

from typing_extensions import assert_never, override

from zxfuse.fundamentals import EdgeKind, SpiderKind
from zxfuse.graph import ZXGraph
from zxfuse.phase import phase_to_str

if TYPE_CHECKING:
    from collections.abc import Iterable

    from zxfuse.arena import NodeHandle


class GateKind(Enum):
    """Tag for gate kind."""

    X = enum.auto()
    Y = enum.auto()
    Z = enum.auto()
    H = enum.auto()
    S = enum.auto()
    T = enum.auto()
    P = enum.auto()
    RX = enum.auto()
    RZ = enum.auto()
    CNOT = enum.auto()
    CZ = enum.auto()
    SWAP = enum.auto()
    CCX = enum.auto()


_ARITY = {GateKind.CNOT: 2, GateKind.CZ: 2, GateKind.SWAP: 2, GateKind.CCX: 3}
_PARAMETRIC = {GateKind.P, GateKind.RX, GateKind.RZ}


@dataclass(frozen=True)
class Gate:
    """
    A gate applied to some qubits.

    Attributes
    ----------
    kind : GateKind
        The kind of the gate.
    qubits : tuple[int, ...]
        The qubits the gate acts on. Controls come first, the target last.
    angle : float | None
        The rotation angle in radians for parametric gates, otherwise None.
    """

    kind: GateKind
    qubits: tuple[int, ...]
    angle: float | None = None

    def __post_init__(self) -> None:
        """Check the number of qubits and the presence of the angle."""
        arity = _ARITY.get(self.kind, 1)
        if len(self.qubits) != arity:
            raise ValueError(f"{self.kind.name} acts on {arity} qubit(s), got {len(self.qubits)}")
        if len(set(self.qubits)) != len(self.qubits):
            raise ValueError(f"{self.kind.name} qubits must be distinct, got {self.qubits}")
        if (self.angle is not None) != (self.kind in _PARAMETRIC):
            raise ValueError(f"{self.kind.name} {'requires' if self.kind in _PARAMETRIC else 'takes no'} angle")

    @override
    def __str__(self) -> str:
        qubits = ",".join(map(str, self.qubits))
        if self.angle is None:
            return f"{self.kind.name}({qubits})"
        return f"{self.kind.name}({phase_to_str(self.angle)})({qubits})"


@dataclass(frozen=True)
class UnsupportedGateError(ValueError):
    """Exception raised when a gate has no translation into spiders."""

    gate: Gate

    @override
    def __str__(self) -> str:
        return f"Unsupported gate: {self.gate}"


class UnsupportedGateWarning(UserWarning):
    """Warning emitted when a non-strict conversion skips a gate."""


class Circuit:
    """
    Sequence of gates on a fixed number of qubits.

    Attributes
    ----------
    width : int
        Number of qubits.
    gates : list[Gate]
        The gates in application order.
    """

    gates: list[Gate]

    def __init__(self, width: int, gates: Iterable[Gate] | None = None) -> None:
        """
        Construct a circuit.

        Parameters
        ----------
        width : int
            The number of qubits.
        gates : Iterable[Gate], optional
            Initial gates. Default is None.
        """
        if width < 0:
            raise ValueError(f"Circuit width must be non-negative, got {width}")
        self.width = width
        self.gates = []
        if gates is not None:
            self.extend(gates)

    @override
    def __repr__(self) -> str:
        return f"Circuit(width={self.width}, gates={self.gates})"

    @override
    def __str__(self) -> str:
        return " ".join(str(gate) for gate in self.gates)

    def add(self, gate: Gate) -> None:
        """
        Append a gate.

        Raises
        ------
        ValueError
            If a qubit of the gate is out of range.
        """
        for qubit in gate.qubits:
            if not 0 <= qubit < self.width:
                raise ValueError(f"Qubit {qubit} out of range for a circuit of width {self.width}")
        self.gates.append(gate)

    def extend(self, gates: Iterable[Gate]) -> None:
        """Append several gates."""
        for gate in gates:
            self.add(gate)

    def x(self, qubit: int) -> None:
        """Apply a Pauli X gate."""
        self.add(Gate(GateKind.X, (qubit,)))

    def y(self, qubit: int) -> None:
        """Apply a Pauli Y gate."""
        self.add(Gate(GateKind.Y, (qubit,)))

    def z(self, qubit: int) -> None:
        """Apply a Pauli Z gate."""
        self.add(Gate(GateKind.Z, (qubit,)))

    def h(self, qubit: int) -> None:
        """Apply a Hadamard gate."""
        self.add(Gate(GateKind.H, (qubit,)))

    def s(self, qubit: int) -> None:
        """Apply an S gate."""
        self.add(Gate(GateKind.S, (qubit,)))

    def t(self, qubit: int) -> None:
        """Apply a T gate."""
        self.add(Gate(GateKind.T, (qubit,)))

    def p(self, qubit: int, angle: SupportsFloat) -> None:
        """Apply a phase gate of the given angle."""
        self.add(Gate(GateKind.P, (qubit,), float(angle)))

    def rx(self, qubit: int, angle: SupportsFloat) -> None:
        """Apply an X rotation."""
        self.add(Gate(GateKind.RX, (qubit,), float(angle)))

    def rz(self, qubit: int, angle: SupportsFloat) -> None:
        """Apply a Z rotation."""
        self.add(Gate(GateKind.RZ, (qubit,), float(angle)))

    def cnot(self, control: int, target: int) -> None:
        """Apply a CNOT gate."""
        self.add(Gate(GateKind.CNOT, (control, target)))

    def cz(self, control: int, target: int) -> None:
        """Apply a CZ gate."""
        self.add(Gate(GateKind.CZ, (control, target)))

    def swap(self, qubit1: int, qubit2: int) -> None:
        """Swap two qubits."""
        self.add(Gate(GateKind.SWAP, (qubit1, qubit2)))

    def ccx(self, control1: int, control2: int, target: int) -> None:
        """Apply a Toffoli gate."""
        self.add(Gate(GateKind.CCX, (control1, control2, target)))

    def to_graph(self, *, strict: bool = True) -> ZXGraph:
        """
        Convert the circuit into a ZX graph.

        See :func:`circuit_to_graph`.
        """
        return _build_graph(self, strict)


class _Wires:
    """Open end of every qubit wire while a circuit is being converted."""

    def __init__(self, graph: ZXGraph, width: int) -> None:
        self.graph = graph
        self.ends: list[NodeHandle] = [graph.add_input_node(SpiderKind.Z) for _ in range(width)]
        # kind of the next edge on each wire, toggled by Hadamard gates
        self.pending: list[EdgeKind] = [EdgeKind.REGULAR] * width

    def attach(self, qubit: int, kind: SpiderKind, phase: float = 0.0) -> NodeHandle:
        node = self.graph.add_node(kind, phase)
        self.graph.add_edge(self.ends[qubit], node, self.pending[qubit])
        self.ends[qubit] = node
        self.pending[qubit] = EdgeKind.REGULAR
        return node

    def hadamard(self, qubit: int) -> None:
        self.pending[qubit] = self.pending[qubit].toggle()

    def swap(self, qubit1: int, qubit2: int) -> None:
        self.ends[qubit1], self.ends[qubit2] = self.ends[qubit2], self.ends[qubit1]
        self.pending[qubit1], self.pending[qubit2] = self.pending[qubit2], self.pending[qubit1]

    def close(self) -> None:
        for qubit, end in enumerate(self.ends):
            output = self.graph.add_output_node(SpiderKind.Z)
            self.graph.add_edge(end, output, self.pending[qubit])


def circuit_to_graph(circuit: Circuit, *, strict: bool = True) -> ZXGraph:
    """
    Convert a circuit into a ZX graph.

    Every qubit starts at a Z input spider and ends at a Z output spider.
    Gates are translated in order:

    - ``Z``, ``S``, ``T``, ``P(θ)``, ``RZ(θ)``: Z spider of phase π, π/2,
      π/4, θ, θ;
    - ``X``, ``RX(θ)``: X spider of phase π, θ;
    - ``Y``: X spider of phase π followed by Z spider of phase π;
    - ``H``: no spider, the next edge on the wire becomes a Hadamard edge;
    - ``CNOT``: Z spider on the control joined to an X spider on the target;
    - ``CZ``: Z spiders on both qubits joined by a Hadamard edge;
    - ``SWAP``: the wires are exchanged.

    Parameters
    ----------
    circuit : Circuit
        The circuit to convert.
    strict : bool, optional
        If True (the default), an untranslatable gate raises
        :class:`UnsupportedGateError`. Otherwise it is skipped with an
        :class:`UnsupportedGateWarning`.

    Returns
    -------
    ZXGraph
        The graph, with one input and one output per qubit.
    """
    return _build_graph(circuit, strict)


def _build_graph(circuit: Circuit, strict: bool) -> ZXGraph:  # noqa: FBT001
    graph = ZXGraph()
    wires = _Wires(graph, circuit.width)
    for gate in circuit.gates:
        kind = gate.kind
        q = gate.qubits[-1]
        if kind == GateKind.Z:
            wires.attach(q, SpiderKind.Z, math.pi)
        elif kind == GateKind.S:
            wires.attach(q, SpiderKind.Z, math.pi / 2)
        elif kind == GateKind.T:
            wires.attach(q, SpiderKind.Z, math.pi / 4)
        elif kind == GateKind.P or kind == GateKind.RZ:  # noqa: PLR1714
            assert gate.angle is not None
            wires.attach(q, SpiderKind.Z, gate.angle)
        elif kind == GateKind.X:
            wires.attach(q, SpiderKind.X, math.pi)
        elif kind == GateKind.RX:
            assert gate.angle is not None
            wires.attach(q, SpiderKind.X, gate.angle)
        elif kind == GateKind.Y:
            wires.attach(q, SpiderKind.X, math.pi)
            wires.attach(q, SpiderKind.Z, math.pi)
        elif kind == GateKind.H:
            wires.hadamard(q)
        elif kind == GateKind.CNOT:
            control, target = gate.qubits
            graph.add_edge(wires.attach(control, SpiderKind.Z), wires.attach(target, SpiderKind.X))
        elif kind == GateKind.CZ:
            control, target = gate.qubits
            graph.add_edge(wires.attach(control, SpiderKind.Z), wires.attach(target, SpiderKind.Z), EdgeKind.HADAMARD)
        elif kind == GateKind.SWAP:
            wires.swap(*gate.qubits)
        elif kind == GateKind.CCX:
            if strict:
                raise UnsupportedGateError(gate)
            # attribute the warning to the caller of the public entry point
            warnings.warn(f"Skipping unsupported gate {gate}", UnsupportedGateWarning, stacklevel=3)
        else:
            assert_never(kind)
    wires.close()
    return graph
