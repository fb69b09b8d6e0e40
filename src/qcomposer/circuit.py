"""
Circuit data model and copy-on-write editing.

A :class:`Circuit` is an immutable snapshot: qubit count, column count, a
placement grid (column × qubit → gate id, used for collision checks) and the
placed :class:`GateInstance` values, each carrying its own column. Editing
functions never mutate; they return a new circuit, so a snapshot handed to
the simulator cannot change while it is being evaluated.

Example
-------
>>> from qcomposer.circuit import default_circuit, add_gate
>>> qc = default_circuit(2, 4)
>>> qc = add_gate(qc, "H", 0, column=0)
>>> qc = add_gate(qc, "CNOT", (0, 1), column=1)
>>> qc.num_gates
2
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field, replace
from typing import Optional, Sequence, Tuple, Union

from qcomposer.gates import DEFAULT_THETA, GateType, parse_gate_type

logger = logging.getLogger(__name__)

MIN_QUBITS = 1
MAX_QUBITS = 8
"""Bounds enforced when the editor resizes a circuit. Cost is 2^n per gate."""

Grid = Tuple[Tuple[Optional[str], ...], ...]


class PlacementError(ValueError):
    """A gate cannot be placed where it was asked to go."""

    def __init__(
        self, message: str, column: int | None = None, qubit: int | None = None
    ) -> None:
        super().__init__(message)
        self.column = column
        self.qubit = qubit


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GateInstance:
    """
    One placed gate.

    ``qubits`` holds a single target, or ``(control, target)`` for CNOT.
    ``theta`` is only meaningful for RX/RY/RZ/P. ``column`` is the time step;
    a gate without one is never simulated.
    """

    id: str
    type: Union[GateType, str]
    qubits: Tuple[int, ...]
    theta: Optional[float] = None
    column: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "qubits", tuple(self.qubits))

    @property
    def gate_type(self) -> GateType | None:
        """Resolved type, or None when the type is not in the catalog."""
        return parse_gate_type(self.type)

    @property
    def control(self) -> int:
        return self.qubits[0]

    @property
    def target(self) -> int:
        return self.qubits[-1]


@dataclass(frozen=True)
class ColumnConflict:
    """A qubit used by more than one gate in the same column."""

    column: int
    qubit: int
    gate_ids: Tuple[str, ...]


@dataclass(frozen=True)
class Circuit:
    """
    Immutable circuit snapshot.

    Parameters
    ----------
    n_qubits : int
        Number of qubits.
    columns : int
        Width of the time axis.
    gates : sequence of GateInstance
        Placed gates, in insertion order.
    grid : tuple of tuples, optional
        ``grid[column][qubit]`` is the id of the gate occupying that cell.
        Derived from ``gates`` when omitted.
    """

    n_qubits: int
    columns: int
    gates: Tuple[GateInstance, ...] = ()
    grid: Optional[Grid] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "gates", tuple(self.gates))
        if self.grid is None:
            object.__setattr__(self, "grid", _grid_from_gates(self))
        else:
            object.__setattr__(self, "grid", tuple(tuple(row) for row in self.grid))

    # -- Queries ------------------------------------------------------------

    @property
    def num_gates(self) -> int:
        return len(self.gates)

    @property
    def used_columns(self) -> list[int]:
        """Columns holding at least one gate, ascending."""
        return sorted({g.column for g in self.gates if g.column is not None})

    def gate(self, gate_id: str) -> GateInstance | None:
        for g in self.gates:
            if g.id == gate_id:
                return g
        return None

    def gates_in_column(self, column: int) -> list[GateInstance]:
        return [g for g in self.gates if g.column == column]

    def cell(self, column: int, qubit: int) -> str | None:
        return self.grid[column][qubit]

    def __repr__(self) -> str:
        return (
            f"Circuit(n_qubits={self.n_qubits}, columns={self.columns}, "
            f"gates={self.num_gates})"
        )


def _empty_grid(n_qubits: int, columns: int) -> Grid:
    return tuple((None,) * n_qubits for _ in range(columns))


def _grid_from_gates(circuit: Circuit) -> Grid:
    rows = [[None] * circuit.n_qubits for _ in range(circuit.columns)]
    for g in circuit.gates:
        if g.column is None or not 0 <= g.column < circuit.columns:
            continue
        for q in g.qubits:
            if 0 <= q < circuit.n_qubits:
                rows[g.column][q] = g.id
    return tuple(tuple(row) for row in rows)


def _set_cells(grid: Grid, column: int, qubits: Sequence[int], value: str | None) -> Grid:
    row = list(grid[column])
    for q in qubits:
        row[q] = value
    return grid[:column] + (tuple(row),) + grid[column + 1:]


def _clear_gate(grid: Grid, gate: GateInstance) -> Grid:
    """Free the cells that still hold ``gate``'s id."""
    if gate.column is None or not 0 <= gate.column < len(grid):
        return grid
    row = grid[gate.column]
    owned = [q for q in gate.qubits if 0 <= q < len(row) and row[q] == gate.id]
    return _set_cells(grid, gate.column, owned, None) if owned else grid


def _check_placement(
    circuit: Circuit,
    gate_type: GateType,
    qubits: Tuple[int, ...],
    column: int,
    ignore_id: str | None = None,
) -> None:
    if len(qubits) != gate_type.n_qubits:
        raise PlacementError(
            f"Gate {gate_type.value} acts on {gate_type.n_qubits} qubit(s), "
            f"got {len(qubits)}",
            column=column,
        )
    if not 0 <= column < circuit.columns:
        raise PlacementError(
            f"Column {column} out of range for {circuit.columns}-column circuit",
            column=column,
        )
    for q in qubits:
        if not 0 <= q < circuit.n_qubits:
            raise PlacementError(
                f"Qubit {q} out of range for {circuit.n_qubits}-qubit circuit",
                column=column,
                qubit=q,
            )
    if len(set(qubits)) != len(qubits):
        raise PlacementError(f"Duplicate qubits in {qubits}", column=column)
    for q in qubits:
        occupant = circuit.grid[column][q]
        if occupant is not None and occupant != ignore_id:
            raise PlacementError(
                f"Cell (column {column}, qubit {q}) is occupied by gate '{occupant}'",
                column=column,
                qubit=q,
            )


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

def default_circuit(n_qubits: int, columns: int) -> Circuit:
    """Empty circuit: all-empty grid, no gates."""
    if n_qubits < 1:
        raise ValueError(f"Need at least 1 qubit, got {n_qubits}")
    if columns < 0:
        raise ValueError(f"Column count must be non-negative, got {columns}")
    return Circuit(n_qubits, columns, (), _empty_grid(n_qubits, columns))


def resize_circuit(circuit: Circuit, n_qubits: int) -> Circuit:
    """Start over with ``n_qubits`` qubits and the same number of columns."""
    if not MIN_QUBITS <= n_qubits <= MAX_QUBITS:
        raise ValueError(
            f"Qubit count must be between {MIN_QUBITS} and {MAX_QUBITS}, got {n_qubits}"
        )
    return default_circuit(n_qubits, circuit.columns)


# ---------------------------------------------------------------------------
# Editing
# ---------------------------------------------------------------------------

def add_gate(
    circuit: Circuit,
    gate_type: GateType | str,
    qubits: int | Sequence[int],
    column: int,
    theta: float | None = None,
    gate_id: str | None = None,
) -> Circuit:
    """
    Place a gate and return the new circuit.

    Parameters
    ----------
    circuit : Circuit
        Circuit to extend. Not modified.
    gate_type : GateType or str
        Gate to place.
    qubits : int or sequence of int
        Target qubit, or ``(control, target)`` for CNOT.
    column : int
        Time step.
    theta : float, optional
        Angle for RX/RY/RZ/P; defaults to pi/2. Ignored for other gates.
    gate_id : str, optional
        Identifier; a random one is generated when omitted.

    Raises
    ------
    ValueError
        If ``gate_type`` is not in the catalog.
    PlacementError
        If the qubits or column are invalid, a cell is taken, or the id is
        already used.
    """
    resolved = parse_gate_type(gate_type)
    if resolved is None:
        raise ValueError(
            f"Unknown gate type: {gate_type!r}. Available: {[t.value for t in GateType]}"
        )
    if isinstance(qubits, int):
        qubits = (qubits,)
    qubits = tuple(qubits)

    if gate_id is None:
        gate_id = uuid.uuid4().hex
    elif circuit.gate(gate_id) is not None:
        raise PlacementError(f"Duplicate gate id '{gate_id}'", column=column)

    _check_placement(circuit, resolved, qubits, column)

    if resolved.is_parameterized:
        theta = DEFAULT_THETA if theta is None else float(theta)
    else:
        theta = None

    gate = GateInstance(id=gate_id, type=resolved, qubits=qubits, theta=theta, column=column)
    return replace(
        circuit,
        gates=circuit.gates + (gate,),
        grid=_set_cells(circuit.grid, column, qubits, gate_id),
    )


def remove_gate(circuit: Circuit, gate_id: str) -> Circuit:
    """Remove a gate by id. Unknown ids leave the circuit as it is."""
    gate = circuit.gate(gate_id)
    if gate is None:
        logger.debug("remove_gate: no gate with id %r", gate_id)
        return circuit
    return replace(
        circuit,
        gates=tuple(g for g in circuit.gates if g.id != gate_id),
        grid=_clear_gate(circuit.grid, gate),
    )


def update_gate(
    circuit: Circuit,
    gate_id: str,
    theta: float | None = None,
    qubits: Sequence[int] | None = None,
) -> Circuit:
    """
    Change a gate's angle and/or qubits. ``None`` leaves a field as it is.

    Moving a placed gate re-checks its cells and raises
    :class:`PlacementError` on collision. Unknown ids leave the circuit as
    it is.
    """
    gate = circuit.gate(gate_id)
    if gate is None:
        logger.debug("update_gate: no gate with id %r", gate_id)
        return circuit

    changes = {}
    if theta is not None:
        changes["theta"] = float(theta)
    grid = circuit.grid
    if qubits is not None:
        new_qubits = tuple(qubits)
        gate_type = gate.gate_type
        if gate.column is not None and gate_type is not None:
            _check_placement(circuit, gate_type, new_qubits, gate.column, ignore_id=gate_id)
            grid = _set_cells(_clear_gate(grid, gate), gate.column, new_qubits, gate_id)
        changes["qubits"] = new_qubits

    updated = replace(gate, **changes)
    return replace(
        circuit,
        gates=tuple(updated if g.id == gate_id else g for g in circuit.gates),
        grid=grid,
    )


def column_conflicts(circuit: Circuit) -> list[ColumnConflict]:
    """
    Every (column, qubit) used by more than one evolving gate.

    MEASURE markers and gates without a column do not count.
    """
    usage: dict[tuple[int, int], list[str]] = {}
    for g in circuit.gates:
        if g.column is None or g.gate_type is GateType.MEASURE:
            continue
        for q in dict.fromkeys(g.qubits):
            usage.setdefault((g.column, q), []).append(g.id)
    return [
        ColumnConflict(column=col, qubit=q, gate_ids=tuple(ids))
        for (col, q), ids in sorted(usage.items())
        if len(ids) > 1
    ]
