"""
Code generation from composer circuits.

- :func:`to_qiskit`: a runnable Qiskit script
- :func:`to_qasm`: OpenQASM 2.0 source

Gates are emitted in column order (stable within a column); gates without a
column are left out, as they are by the simulator.
"""

from __future__ import annotations

from qcomposer.circuit import Circuit, GateInstance
from qcomposer.gates import DEFAULT_THETA, GateType

_FIXED_SINGLE = (GateType.X, GateType.Y, GateType.Z, GateType.H, GateType.S, GateType.T)


def _placed_gates(circuit: Circuit) -> list[GateInstance]:
    return sorted(
        (g for g in circuit.gates if g.column is not None), key=lambda g: g.column
    )


def _theta(gate: GateInstance) -> float:
    return float(DEFAULT_THETA if gate.theta is None else gate.theta)


def _type_name(gate: GateInstance) -> str:
    return gate.type.value if isinstance(gate.type, GateType) else str(gate.type)


# ---------------------------------------------------------------------------
# Qiskit
# ---------------------------------------------------------------------------

def _qiskit_line(gate: GateInstance) -> str:
    gate_type = gate.gate_type
    q0 = gate.qubits[0]
    if gate_type in _FIXED_SINGLE:
        return f"qc.{gate_type.value.lower()}({q0})"
    if gate_type is not None and gate_type.is_parameterized:
        return f"qc.{gate_type.value.lower()}({_theta(gate):.6f}, {q0})"
    if gate_type is GateType.CNOT:
        return f"qc.cx({gate.control}, {gate.target})"
    if gate_type is GateType.MEASURE:
        return f"# measurement in Z basis on q{q0} (add classical register to record)"
    return f"# {_type_name(gate)} not supported in export"


def to_qiskit(circuit: Circuit) -> str:
    """
    Export circuit as a Qiskit script.

    Example
    -------
    >>> print(to_qiskit(qc))
    from qiskit import QuantumCircuit
    qc = QuantumCircuit(2)
    qc.h(0)
    qc.cx(0, 1)
    print(qc)
    """
    lines = [
        "from qiskit import QuantumCircuit",
        f"qc = QuantumCircuit({circuit.n_qubits})",
    ]
    lines.extend(_qiskit_line(g) for g in _placed_gates(circuit))
    lines.append("print(qc)")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# OpenQASM 2.0
# ---------------------------------------------------------------------------

def to_qasm(circuit: Circuit) -> str:
    """Export circuit as OpenQASM 2.0 string."""
    gates = _placed_gates(circuit)
    measured = any(g.gate_type is GateType.MEASURE for g in gates)

    lines = [
        "OPENQASM 2.0;",
        'include "qelib1.inc";',
        f"qreg q[{circuit.n_qubits}];",
    ]
    if measured:
        lines.append(f"creg c[{circuit.n_qubits}];")

    for gate in gates:
        gate_type = gate.gate_type
        if gate_type is GateType.MEASURE:
            q = gate.qubits[0]
            lines.append(f"measure q[{q}] -> c[{q}];")
        elif gate_type is GateType.CNOT:
            lines.append(f"cx q[{gate.control}],q[{gate.target}];")
        elif gate_type is not None and gate_type.is_parameterized:
            lines.append(
                f"{gate_type.value.lower()}({_theta(gate)!r}) q[{gate.qubits[0]}];"
            )
        elif gate_type is not None:
            lines.append(f"{gate_type.value.lower()} q[{gate.qubits[0]}];")
        else:
            lines.append(f"// {_type_name(gate)} not supported in export")

    return "\n".join(lines) + "\n"
