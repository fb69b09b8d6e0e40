"""
Circuit evaluation.

A circuit is run column by column in ascending order; empty and
non-contiguous columns are fine. Inside a column every gate other than CNOT
and MEASURE is applied first, then every CNOT, so the single-qubit layer of
a time step is complete before any entangling gate of that step. MEASURE is
a marker for export and never changes the state.

The simulator is a pure function of its circuit snapshot: a new state
vector is built on every call and nothing is cached between calls.

Malformed gates degrade instead of failing: gates without a column, with
out-of-range qubits, or with the wrong number of qubits are skipped and
logged; unknown gate types act as the identity.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

from numpy import ndarray

from qcomposer.bloch import bloch_vector
from qcomposer.circuit import Circuit, ColumnConflict, GateInstance, column_conflicts
from qcomposer.gates import GateType, gate_matrix
from qcomposer.measurement import (
    ReducedState,
    pretty_print,
    probabilities,
    reduce_to_single_qubit,
)
from qcomposer.statevector import apply_cnot, apply_single_qubit_gate, zero_state

logger = logging.getLogger(__name__)

ATOL = 1e-9
"""Tolerance for norm checks on simulator output."""


class ColumnConflictError(ValueError):
    """Raised in strict mode when gates in one column share a qubit."""

    def __init__(self, conflicts: list[ColumnConflict]) -> None:
        details = ", ".join(
            f"column {c.column} qubit {c.qubit}: {list(c.gate_ids)}" for c in conflicts
        )
        super().__init__(f"Gates overlap within a column ({details})")
        self.conflicts = conflicts


def _fits(gate: GateInstance, n_qubits: int) -> bool:
    expected = 2 if gate.gate_type is GateType.CNOT else 1
    if len(gate.qubits) != expected:
        return False
    return all(0 <= q < n_qubits for q in gate.qubits)


def evaluate(circuit: Circuit, strict: bool = False) -> ndarray:
    """
    Compute the final state vector of ``circuit`` from |00...0⟩.

    Parameters
    ----------
    circuit : Circuit
        Snapshot to simulate. Not modified.
    strict : bool
        If True, raise :class:`ColumnConflictError` before applying anything
        when two gates in a column share a qubit. Otherwise the overlap is
        logged and gates are applied in pass order (single-qubit gates in
        list order, then CNOTs in list order).

    Returns
    -------
    ndarray
        complex128 vector of length 2^n_qubits.
    """
    n = circuit.n_qubits
    state = zero_state(n)

    conflicts = column_conflicts(circuit)
    if conflicts:
        if strict:
            raise ColumnConflictError(conflicts)
        logger.warning(
            "%d qubit overlap(s) within columns; applying in pass order", len(conflicts)
        )

    by_column: dict[int, list[GateInstance]] = {}
    for gate in circuit.gates:
        if gate.column is None:
            logger.debug("Gate %r has no column, skipping", gate.id)
            continue
        if not _fits(gate, n):
            logger.warning(
                "Gate %r (%s on %s) does not fit a %d-qubit circuit, skipping",
                gate.id, gate.type, list(gate.qubits), n,
            )
            continue
        by_column.setdefault(gate.column, []).append(gate)

    for column in sorted(by_column):
        gates = by_column[column]
        logger.debug("Column %d: %d gate(s)", column, len(gates))
        for gate in gates:
            if gate.gate_type in (GateType.CNOT, GateType.MEASURE):
                continue
            state = apply_single_qubit_gate(state, gate.qubits[0], gate_matrix(gate))
        for gate in gates:
            if gate.gate_type is GateType.CNOT:
                state = apply_cnot(state, gate.control, gate.target)

    return state


# ---------------------------------------------------------------------------
# Simulator facade
# ---------------------------------------------------------------------------

@dataclass
class SimulationResult:
    """
    Result of evaluating a circuit.

    Attributes
    ----------
    statevector : ndarray
        Final state vector (complex128, length 2^n).
    n_qubits : int
        Number of qubits.
    n_gates : int
        Number of gates in the evaluated circuit.
    """

    statevector: ndarray
    n_qubits: int
    n_gates: int = 0

    def probabilities(self) -> dict[str, float]:
        return probabilities(self.statevector)

    def pretty(self) -> str:
        return pretty_print(self.statevector)

    def reduced(self, qubit: int = 0) -> ReducedState | None:
        return reduce_to_single_qubit(self.statevector, self.n_qubits, qubit)

    def bloch(self, qubit: int = 0) -> Tuple[float, float, float] | None:
        """Bloch vector of ``qubit``, or None if the qubit does not exist."""
        reduced = self.reduced(qubit)
        return None if reduced is None else bloch_vector(reduced)

    def summary(self) -> str:
        return f"Ran {self.n_gates} gates across {self.n_qubits} qubits."


class StatevectorSimulator:
    """
    Exact statevector simulator for composer circuits.

    Parameters
    ----------
    strict : bool
        Fail on overlapping gates within a column instead of logging.

    Example
    -------
    >>> from qcomposer import StatevectorSimulator, default_circuit, add_gate
    >>> qc = add_gate(default_circuit(2, 2), "H", 0, column=0)
    >>> qc = add_gate(qc, "CNOT", (0, 1), column=1)
    >>> probs = StatevectorSimulator().run(qc).probabilities()
    >>> {k: round(v, 3) for k, v in probs.items()}
    {'00': 0.5, '01': 0.0, '10': 0.0, '11': 0.5}
    """

    def __init__(self, strict: bool = False) -> None:
        self.strict = strict

    def run(self, circuit: Circuit) -> SimulationResult:
        state = evaluate(circuit, strict=self.strict)
        result = SimulationResult(
            statevector=state, n_qubits=circuit.n_qubits, n_gates=circuit.num_gates
        )
        logger.debug(result.summary())
        return result

    def statevector(self, circuit: Circuit) -> ndarray:
        """Convenience: run circuit and return just the state vector."""
        return self.run(circuit).statevector
