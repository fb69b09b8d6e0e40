"""Tests for Bloch sphere geometry."""

import numpy as np
import pytest

from qcomposer.bloch import bloch_angles, bloch_vector, populations
from qcomposer.measurement import ReducedState

SQRT2_INV = 1 / np.sqrt(2)


@pytest.mark.parametrize("alpha,beta,expected", [
    (1, 0, (0, 0, 1)),                        # |0⟩
    (0, 1, (0, 0, -1)),                       # |1⟩
    (SQRT2_INV, SQRT2_INV, (1, 0, 0)),        # |+⟩
    (SQRT2_INV, -SQRT2_INV, (-1, 0, 0)),      # |−⟩
    (SQRT2_INV, 1j * SQRT2_INV, (0, 1, 0)),   # |+i⟩
])
def test_cardinal_states(alpha, beta, expected):
    vector = bloch_vector(ReducedState(complex(alpha), complex(beta)))
    np.testing.assert_allclose(vector, expected, atol=1e-12)


def test_unnormalized_input_is_normalized():
    vector = bloch_vector(ReducedState(2 + 0j, 2 + 0j))
    np.testing.assert_allclose(vector, (1, 0, 0), atol=1e-12)


def test_zero_state_defaults_to_north_pole():
    assert bloch_vector(ReducedState(0j, 0j)) == (0.0, 0.0, 1.0)
    assert populations(ReducedState(0j, 0j)) == (1.0, 0.0)


def test_global_phase_does_not_move_vector():
    phase = np.exp(0.9j)
    plain = bloch_vector(ReducedState(0.6 + 0j, 0.8j))
    rotated = bloch_vector(ReducedState(0.6 * phase, 0.8j * phase))
    np.testing.assert_allclose(plain, rotated, atol=1e-12)


def test_angles():
    theta, phi = bloch_angles(ReducedState(SQRT2_INV + 0j, 1j * SQRT2_INV))
    assert theta == pytest.approx(np.pi / 2)
    assert phi == pytest.approx(np.pi / 2)

    theta, _ = bloch_angles(ReducedState(0j, 1 + 0j))
    assert theta == pytest.approx(np.pi)


def test_populations():
    p0, p1 = populations(ReducedState(0.6 + 0j, 0.8j))
    assert p0 == pytest.approx(0.36)
    assert p1 == pytest.approx(0.64)


def test_marginal_reduction_stays_in_xz_plane():
    vector = bloch_vector(ReducedState(np.sqrt(0.3) + 0j, np.sqrt(0.7) + 0j, exact=False))
    assert vector[1] == 0.0
    assert vector[0] >= 0.0
    assert vector[2] == pytest.approx(-0.4)
