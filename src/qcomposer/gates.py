"""
Gate catalog.

Every gate the composer can place maps to a 2x2 unitary (numpy complex128,
row-major, so ``m.ravel()`` is ``(U00, U01, U10, U11)``). CNOT and MEASURE
have no single-qubit matrix; they and any unrecognised type resolve to the
identity so the catalog never fails.

Gate categories:
    - Fixed: X, Y, Z, H, S, T
    - Parameterized (angle in radians, default pi/2): RX, RY, RZ, P
    - Handled elsewhere: CNOT (two-qubit), MEASURE (marker only)
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Callable

import numpy as np
from numpy import ndarray

logger = logging.getLogger(__name__)

# Type alias
Matrix = ndarray

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
DEFAULT_THETA = np.pi / 2
_SQRT2_INV = 1.0 / np.sqrt(2.0)


class GateType(str, enum.Enum):
    """Closed set of gate types the composer knows how to place."""

    X = "X"
    Y = "Y"
    Z = "Z"
    H = "H"
    S = "S"
    T = "T"
    RX = "RX"
    RY = "RY"
    RZ = "RZ"
    P = "P"
    CNOT = "CNOT"
    MEASURE = "MEASURE"

    @property
    def is_parameterized(self) -> bool:
        return self in (GateType.RX, GateType.RY, GateType.RZ, GateType.P)

    @property
    def n_qubits(self) -> int:
        return 2 if self is GateType.CNOT else 1


def parse_gate_type(value: Any) -> GateType | None:
    """Resolve a gate type or its name (case-insensitive); ``None`` if unknown."""
    if isinstance(value, GateType):
        return value
    if isinstance(value, str):
        try:
            return GateType(value.upper())
        except ValueError:
            return None
    return None


def _frozen(matrix: Matrix) -> Matrix:
    matrix.flags.writeable = False
    return matrix


# ---------------------------------------------------------------------------
# Fixed gates
# ---------------------------------------------------------------------------

I = _frozen(np.eye(2, dtype=np.complex128))
"""Identity, also the fallback for gates without a 2x2 matrix."""

X = _frozen(np.array([[0, 1], [1, 0]], dtype=np.complex128))
"""Pauli-X (NOT) gate."""

Y = _frozen(np.array([[0, -1j], [1j, 0]], dtype=np.complex128))
"""Pauli-Y gate."""

Z = _frozen(np.array([[1, 0], [0, -1]], dtype=np.complex128))
"""Pauli-Z gate."""

H = _frozen(np.array([[1, 1], [1, -1]], dtype=np.complex128) * _SQRT2_INV)
"""Hadamard gate."""

S = _frozen(np.array([[1, 0], [0, 1j]], dtype=np.complex128))
"""S (phase) gate: sqrt(Z)."""

T = _frozen(np.array([[1, 0], [0, np.exp(1j * np.pi / 4)]], dtype=np.complex128))
"""T gate: sqrt(S)."""

# ---------------------------------------------------------------------------
# Parameterized gates
# ---------------------------------------------------------------------------

def Rx(theta: float) -> Matrix:
    """Rotation around X-axis by angle theta."""
    c = np.cos(theta / 2)
    s = np.sin(theta / 2)
    return np.array([[c, -1j * s], [-1j * s, c]], dtype=np.complex128)


def Ry(theta: float) -> Matrix:
    """Rotation around Y-axis by angle theta."""
    c = np.cos(theta / 2)
    s = np.sin(theta / 2)
    return np.array([[c, -s], [s, c]], dtype=np.complex128)


def Rz(theta: float) -> Matrix:
    """Rotation around Z-axis by angle theta."""
    return np.array(
        [[np.exp(-1j * theta / 2), 0], [0, np.exp(1j * theta / 2)]],
        dtype=np.complex128,
    )


def P(theta: float) -> Matrix:
    """Phase gate: diagonal with entries [1, exp(i*theta)]."""
    return np.array([[1, 0], [0, np.exp(1j * theta)]], dtype=np.complex128)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

FIXED_GATES: dict[GateType, Matrix] = {
    GateType.X: X,
    GateType.Y: Y,
    GateType.Z: Z,
    GateType.H: H,
    GateType.S: S,
    GateType.T: T,
}

PARAMETERIZED_GATES: dict[GateType, Callable[[float], Matrix]] = {
    GateType.RX: Rx,
    GateType.RY: Ry,
    GateType.RZ: Rz,
    GateType.P: P,
}


def gate_matrix(gate: Any) -> Matrix:
    """
    Look up the 2x2 unitary for a placed gate.

    Parameters
    ----------
    gate : object
        Anything with ``type`` (a :class:`GateType` or its name) and
        ``theta`` (float or None) attributes, typically a
        :class:`~qcomposer.circuit.GateInstance`.

    Returns
    -------
    numpy.ndarray
        Row-major 2x2 complex matrix. Fixed gates return shared read-only
        arrays; parameterized gates return a fresh array built from
        ``theta`` (``DEFAULT_THETA`` when unset). CNOT, MEASURE and unknown
        types give the identity.
    """
    gate_type = parse_gate_type(gate.type)
    if gate_type in PARAMETERIZED_GATES:
        theta = getattr(gate, "theta", None)
        if theta is None:
            theta = DEFAULT_THETA
        return PARAMETERIZED_GATES[gate_type](theta)
    if gate_type in FIXED_GATES:
        return FIXED_GATES[gate_type]
    if gate_type is None:
        logger.debug("Unknown gate type %r, using identity", gate.type)
    return I


def is_unitary(matrix: Matrix, tol: float = 1e-9) -> bool:
    """Check U†U = I within ``tol``."""
    product = matrix.conj().T @ matrix
    return np.allclose(product, np.eye(len(matrix)), atol=tol)
