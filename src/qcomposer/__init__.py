"""
qcomposer: statevector core of a visual quantum circuit composer.

Features:
- Exact statevector evaluation of column-based circuits (1-8 qubits typical)
- Immutable circuits with copy-on-write editing
- Probabilities, amplitude listings and Bloch sphere reductions
- Qiskit and OpenQASM 2.0 export

Quick Start:
    >>> from qcomposer import default_circuit, add_gate, evaluate, probabilities
    >>> qc = default_circuit(2, 4)
    >>> qc = add_gate(qc, "H", 0, column=0)
    >>> qc = add_gate(qc, "CNOT", (0, 1), column=1)
    >>> probabilities(evaluate(qc))  # {'00': ~0.5, '01': 0, '10': 0, '11': ~0.5}
"""
__version__ = "1.0.0"

from .gates import GateType, gate_matrix, DEFAULT_THETA
from .circuit import (
    Circuit,
    GateInstance,
    ColumnConflict,
    PlacementError,
    default_circuit,
    resize_circuit,
    add_gate,
    remove_gate,
    update_gate,
    column_conflicts,
)
from .statevector import zero_state, apply_single_qubit_gate, apply_cnot
from .simulator import (
    evaluate,
    StatevectorSimulator,
    SimulationResult,
    ColumnConflictError,
)
from .measurement import ReducedState, probabilities, pretty_print, reduce_to_single_qubit
from .bloch import bloch_vector, bloch_angles, populations
from .export import to_qiskit, to_qasm

__all__ = [
    # Gates
    'GateType',
    'gate_matrix',
    'DEFAULT_THETA',
    # Circuit
    'Circuit',
    'GateInstance',
    'ColumnConflict',
    'PlacementError',
    'default_circuit',
    'resize_circuit',
    'add_gate',
    'remove_gate',
    'update_gate',
    'column_conflicts',
    # Simulation
    'zero_state',
    'apply_single_qubit_gate',
    'apply_cnot',
    'evaluate',
    'StatevectorSimulator',
    'SimulationResult',
    'ColumnConflictError',
    # Reporting
    'ReducedState',
    'probabilities',
    'pretty_print',
    'reduce_to_single_qubit',
    'bloch_vector',
    'bloch_angles',
    'populations',
    # Export
    'to_qiskit',
    'to_qasm',
]
