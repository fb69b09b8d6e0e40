"""
Complex amplitudes as ``(re, im)`` pairs.

Inside the simulator amplitudes are numpy ``complex128`` values. The
visualization side of the composer exchanges them as two-float pairs, so
this module holds the pair arithmetic and the conversions at that boundary.
"""

from __future__ import annotations

from typing import Iterable, Sequence, Tuple

import numpy as np
from numpy import ndarray

Pair = Tuple[float, float]


def cadd(a: Pair, b: Pair) -> Pair:
    """(a_re + b_re, a_im + b_im)"""
    return (a[0] + b[0], a[1] + b[1])


def cmul(a: Pair, b: Pair) -> Pair:
    """(a_re*b_re - a_im*b_im, a_re*b_im + a_im*b_re)"""
    ar, ai = a
    br, bi = b
    return (ar * br - ai * bi, ar * bi + ai * br)


def conj(a: Pair) -> Pair:
    return (a[0], -a[1])


def abs2(a: Pair) -> float:
    """Squared magnitude."""
    return a[0] * a[0] + a[1] * a[1]


def to_pair(z: complex) -> Pair:
    return (float(z.real), float(z.imag))


def from_pair(pair: Sequence[float]) -> complex:
    return complex(pair[0], pair[1])


def state_to_pairs(state: ndarray) -> list[Pair]:
    """Flatten a state vector into a list of ``(re, im)`` pairs."""
    return [to_pair(amp) for amp in state]


def state_from_pairs(pairs: Iterable[Sequence[float]]) -> ndarray:
    """Build a complex128 state vector from ``(re, im)`` pairs."""
    return np.array([from_pair(p) for p in pairs], dtype=np.complex128)
