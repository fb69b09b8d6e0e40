"""
Read-only reports derived from a finished state vector.

- :func:`probabilities`: bitstring → squared magnitude
- :func:`pretty_print`: one text line per basis state
- :func:`reduce_to_single_qubit`: two-amplitude summary of one qubit for the
  Bloch sphere
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy import ndarray

from qcomposer.amplitude import Pair, to_pair
from qcomposer.statevector import basis_label, num_qubits_for


@dataclass(frozen=True)
class ReducedState:
    """
    Single-qubit state (alpha |0⟩ + beta |1⟩) used to place the Bloch vector.

    Exact when the circuit has one qubit. For more qubits it only carries
    the marginal populations: ``alpha = sqrt(P(q=0))`` and
    ``beta = sqrt(P(q=1))``, both real, so relative phase and entanglement
    are not represented. This is an approximation, not a reduced density
    matrix.
    """

    alpha: complex
    beta: complex
    exact: bool = True

    def as_pairs(self) -> dict[str, Pair]:
        """``{"alpha": (re, im), "beta": (re, im)}`` for visualization clients."""
        return {"alpha": to_pair(self.alpha), "beta": to_pair(self.beta)}


def probabilities(state: ndarray) -> dict[str, float]:
    """
    Squared magnitude of every amplitude, keyed by basis label.

    Labels are zero-padded to the qubit count, qubit n-1 first. No
    normalization is applied.
    """
    n = num_qubits_for(state)
    probs = np.abs(np.asarray(state)) ** 2
    return {basis_label(i, n): float(p) for i, p in enumerate(probs)}


def pretty_print(state: ndarray) -> str:
    """
    Human-readable amplitude listing.

    Each line reads ``|01⟩: amp=0.707+0.000i  |amp|=0.707  φ=0.000`` with
    the phase in radians.
    """
    n = num_qubits_for(state)
    lines = []
    for i, amp in enumerate(state):
        # + 0.0 folds negative zero so it prints as 0.000
        re = float(amp.real) + 0.0
        im = float(amp.imag) + 0.0
        magnitude = np.hypot(re, im)
        phase = np.arctan2(im, re)
        sign = "+" if im >= 0 else ""
        lines.append(
            f"|{basis_label(i, n)}⟩: amp={re:.3f}{sign}{im:.3f}i  "
            f"|amp|={magnitude:.3f}  φ={phase:.3f}"
        )
    return "\n".join(lines)


def reduce_to_single_qubit(
    state: ndarray, n_qubits: int, qubit: int
) -> ReducedState | None:
    """
    Summarise one qubit of ``state`` as a :class:`ReducedState`.

    Parameters
    ----------
    state : ndarray
        State vector of length 2^n_qubits.
    n_qubits : int
        Qubit count of the circuit that produced ``state``.
    qubit : int
        Qubit to summarise.

    Returns
    -------
    ReducedState or None
        For ``n_qubits == 1`` the two amplitudes, unmodified. Otherwise
        real pseudo-amplitudes from the marginal populations of ``qubit``.
        None if ``qubit`` is out of range or ``state`` does not have
        2^n_qubits entries.
    """
    if n_qubits < 1 or not 0 <= qubit < n_qubits or len(state) != 2**n_qubits:
        return None

    if n_qubits == 1:
        return ReducedState(alpha=complex(state[0]), beta=complex(state[1]), exact=True)

    probs = np.abs(np.asarray(state)) ** 2
    bit_set = ((np.arange(len(state)) >> qubit) & 1).astype(bool)
    p0 = float(np.sum(probs[~bit_set]))
    p1 = float(np.sum(probs[bit_set]))
    return ReducedState(alpha=complex(np.sqrt(p0)), beta=complex(np.sqrt(p1)), exact=False)
