"""
State vector primitives.

Basis index ``i`` encodes qubit ``q`` in bit ``q`` (qubit 0 is the least
significant bit). Labels are written most-significant first, so on two
qubits index 1 is ``"01"`` and means qubit 0 is |1⟩.

Both applicators are pure: they return a freshly allocated vector and never
touch their input. Each costs O(2^n) and works on index arrays instead of
building the full 2^n × 2^n operator.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy import ndarray

logger = logging.getLogger(__name__)


def zero_state(n_qubits: int) -> ndarray:
    """|00...0⟩: amplitude 1 at index 0, 0 elsewhere."""
    if n_qubits < 1:
        raise ValueError(f"Need at least 1 qubit, got {n_qubits}")
    state = np.zeros(2**n_qubits, dtype=np.complex128)
    state[0] = 1.0
    return state


def num_qubits_for(state: ndarray) -> int:
    """Qubit count implied by the length of ``state``."""
    dim = len(state)
    if dim < 2 or dim & (dim - 1):
        raise ValueError(f"State length {dim} is not a power of 2")
    return dim.bit_length() - 1


def basis_label(index: int, n_qubits: int) -> str:
    """Zero-padded bitstring, qubit n-1 first."""
    return format(index, f"0{n_qubits}b")


def apply_single_qubit_gate(state: ndarray, qubit: int, matrix: ndarray) -> ndarray:
    """
    Apply a 2x2 unitary to one qubit.

    Every basis index pairs with the index that differs only in bit
    ``qubit``. The pair (amplitude with bit 0, amplitude with bit 1) is
    multiplied by ``matrix`` and both results are written back, so walking
    the bit-0 half covers the whole vector.

    Parameters
    ----------
    state : ndarray
        Input state of length 2^n. Not modified.
    qubit : int
        Target qubit in [0, n). The caller validates the range.
    matrix : ndarray
        2x2 unitary.

    Returns
    -------
    ndarray
        New state vector.
    """
    state = np.asarray(state, dtype=np.complex128)
    mask = 1 << qubit
    indices = np.arange(len(state))
    low = indices[(indices & mask) == 0]
    high = low | mask

    a = state[low]
    b = state[high]
    out = np.empty_like(state)
    out[low] = matrix[0, 0] * a + matrix[0, 1] * b
    out[high] = matrix[1, 0] * a + matrix[1, 1] * b
    return out


def apply_cnot(state: ndarray, control: int, target: int) -> ndarray:
    """
    Apply CNOT: flip bit ``target`` of every index whose ``control`` bit is 1.

    Amplitudes are accumulated into their destination rather than assigned.
    For a real CNOT the mapping is a permutation, so each destination gets
    exactly one source.

    If ``control == target`` the input is returned unchanged.
    """
    if control == target:
        logger.debug("CNOT with control == target (%d), skipping", control)
        return state

    state = np.asarray(state, dtype=np.complex128)
    indices = np.arange(len(state))
    controlled = ((indices >> control) & 1).astype(bool)
    dest = np.where(controlled, indices ^ (1 << target), indices)

    out = np.zeros_like(state)
    np.add.at(out, dest, state)
    return out
