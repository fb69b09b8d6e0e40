"""Bloch sphere geometry for a :class:`~qcomposer.measurement.ReducedState`."""

from __future__ import annotations

from typing import Tuple

import numpy as np

from qcomposer.amplitude import abs2, cmul, conj, to_pair
from qcomposer.measurement import ReducedState


def _normalized(state: ReducedState):
    a = to_pair(state.alpha)
    b = to_pair(state.beta)
    norm = np.sqrt(abs2(a) + abs2(b))
    if norm == 0:
        return None
    return (a[0] / norm, a[1] / norm), (b[0] / norm, b[1] / norm)


def bloch_vector(state: ReducedState) -> Tuple[float, float, float]:
    """
    Cartesian point on the Bloch sphere.

    x = 2 Re(ᾱβ), y = 2 Im(ᾱβ), z = |α|² − |β|². A zero state maps to |0⟩.
    """
    normalized = _normalized(state)
    if normalized is None:
        return (0.0, 0.0, 1.0)
    a, b = normalized
    coherence = cmul(conj(a), b)
    return (2 * coherence[0], 2 * coherence[1], abs2(a) - abs2(b))


def bloch_angles(state: ReducedState) -> Tuple[float, float]:
    """Polar angle θ = 2 acos|α| and relative phase φ = arg β − arg α."""
    normalized = _normalized(state)
    if normalized is None:
        return (0.0, 0.0)
    a, b = normalized
    theta = 2 * np.arccos(np.clip(np.sqrt(abs2(a)), 0.0, 1.0))
    phi = np.arctan2(b[1], b[0]) - np.arctan2(a[1], a[0])
    return (float(theta), float(phi))


def populations(state: ReducedState) -> Tuple[float, float]:
    """Normalized (P(0), P(1)); (1, 0) for a zero state."""
    p0 = abs2(to_pair(state.alpha))
    p1 = abs2(to_pair(state.beta))
    total = p0 + p1
    if total <= 0:
        return (1.0, 0.0)
    return (p0 / total, p1 / total)
