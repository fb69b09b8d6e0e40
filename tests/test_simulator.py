"""Tests for circuit evaluation."""

import logging

import numpy as np
import pytest

from qcomposer import (
    Circuit,
    ColumnConflictError,
    GateInstance,
    StatevectorSimulator,
    add_gate,
    default_circuit,
    evaluate,
    probabilities,
)


@pytest.fixture
def simulator():
    return StatevectorSimulator()


def build(n_qubits, *placements, columns=8):
    """Build a circuit from (type, qubits, column[, theta]) tuples."""
    qc = default_circuit(n_qubits, columns)
    for placement in placements:
        gate_type, qubits, column = placement[:3]
        theta = placement[3] if len(placement) > 3 else None
        qc = add_gate(qc, gate_type, qubits, column=column, theta=theta)
    return qc


def assert_probs(state, expected):
    probs = probabilities(state)
    assert probs.keys() == expected.keys()
    for label, p in expected.items():
        assert probs[label] == pytest.approx(p, abs=1e-9), label


# ---------------------------------------------------------------------------
# Basic state preparation
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("n", [1, 2, 3, 6])
def test_empty_circuit_is_zero_state(n):
    state = evaluate(default_circuit(n, 4))
    expected = np.zeros(2**n, dtype=np.complex128)
    expected[0] = 1.0
    np.testing.assert_allclose(state, expected, atol=1e-12)


def test_x_gate_flips(simulator):
    result = simulator.run(build(1, ("X", 0, 0)))
    assert_probs(result.statevector, {"0": 0.0, "1": 1.0})


def test_double_hadamard_is_identity():
    state = evaluate(build(1, ("H", 0, 0), ("H", 0, 1)))
    np.testing.assert_allclose(state, [1, 0], atol=1e-12)


def test_bell_state():
    state = evaluate(build(2, ("H", 0, 0), ("CNOT", (0, 1), 1)))
    assert_probs(state, {"00": 0.5, "01": 0.0, "10": 0.0, "11": 0.5})
    np.testing.assert_allclose(state, np.array([1, 0, 0, 1]) / np.sqrt(2), atol=1e-12)


def test_ghz_3_qubit():
    state = evaluate(build(3, ("H", 0, 0), ("CNOT", (0, 1), 1), ("CNOT", (1, 2), 2)))
    assert_probs(state, {
        "000": 0.5, "001": 0.0, "010": 0.0, "011": 0.0,
        "100": 0.0, "101": 0.0, "110": 0.0, "111": 0.5,
    })


@pytest.mark.parametrize("theta", [0.0, 0.3, np.pi / 2, np.pi, -2.1, 5.0])
def test_rz_leaves_probabilities_unchanged(theta):
    state = evaluate(build(1, ("RZ", 0, 0, theta)))
    assert_probs(state, {"0": 1.0, "1": 0.0})


def test_rx_default_angle_is_half_pi():
    state = evaluate(build(1, ("RX", 0, 0)))
    assert_probs(state, {"0": 0.5, "1": 0.5})


def test_ry_pi_rotates_to_one():
    state = evaluate(build(1, ("RY", 0, 0, np.pi)))
    np.testing.assert_allclose(state, [0, 1], atol=1e-12)


def test_phase_kickback_through_hadamards():
    # H P(π) H = X
    state = evaluate(build(1, ("H", 0, 0), ("P", 0, 1, np.pi), ("H", 0, 2)))
    assert_probs(state, {"0": 0.0, "1": 1.0})


def test_probabilities_sum_to_one():
    qc = build(
        3,
        ("H", 0, 0), ("RY", 1, 0, 0.4), ("T", 2, 0),
        ("CNOT", (0, 2), 1), ("S", 1, 1),
        ("RX", 0, 2, 1.9), ("CNOT", (2, 1), 3), ("Y", 0, 3),
    )
    assert sum(probabilities(evaluate(qc)).values()) == pytest.approx(1.0, abs=1e-9)


# ---------------------------------------------------------------------------
# Column ordering
# ---------------------------------------------------------------------------

def test_disjoint_gates_in_a_column_commute():
    x = GateInstance("x", "X", (0,), column=0)
    z = GateInstance("z", "Z", (1,), column=0)
    h = GateInstance("h", "H", (1,), column=1)
    first = evaluate(Circuit(2, 2, gates=[x, z, h]))
    second = evaluate(Circuit(2, 2, gates=[z, x, h]))
    np.testing.assert_allclose(first, second, atol=1e-12)


def test_columns_ordered_by_index_not_list_position():
    # H then Z gives |−⟩; Z then H gives |+⟩.
    qc = Circuit(1, 10, gates=[
        GateInstance("z", "Z", (0,), column=7),
        GateInstance("h", "H", (0,), column=3),
    ])
    np.testing.assert_allclose(evaluate(qc), np.array([1, -1]) / np.sqrt(2), atol=1e-12)


def test_cnot_waits_for_earlier_column():
    qc = Circuit(2, 2, gates=[
        GateInstance("cx", "CNOT", (0, 1), column=1),
        GateInstance("x", "X", (0,), column=0),
    ])
    assert probabilities(evaluate(qc))["11"] == pytest.approx(1.0)


def test_overlap_logs_warning(caplog):
    # Pass order puts the X before the CNOT even though it is listed second.
    qc = Circuit(2, 1, gates=[
        GateInstance("cx", "CNOT", (0, 1), column=0),
        GateInstance("x", "X", (0,), column=0),
    ])
    with caplog.at_level(logging.WARNING, logger="qcomposer.simulator"):
        state = evaluate(qc)
    assert "overlap" in caplog.text
    assert probabilities(state)["11"] == pytest.approx(1.0)


def test_overlap_strict_mode_raises():
    qc = Circuit(2, 1, gates=[
        GateInstance("cx", "CNOT", (0, 1), column=0),
        GateInstance("x", "X", (0,), column=0),
    ])
    with pytest.raises(ColumnConflictError) as excinfo:
        StatevectorSimulator(strict=True).run(qc)
    assert excinfo.value.conflicts[0].gate_ids == ("cx", "x")


# ---------------------------------------------------------------------------
# Graceful degradation
# ---------------------------------------------------------------------------

def test_measure_does_not_collapse():
    state = evaluate(build(1, ("H", 0, 0), ("MEASURE", 0, 1)))
    np.testing.assert_allclose(state, np.array([1, 1]) / np.sqrt(2), atol=1e-12)


def test_gate_without_column_is_ignored():
    qc = Circuit(1, 1, gates=[GateInstance("x", "X", (0,))])
    np.testing.assert_allclose(evaluate(qc), [1, 0])


def test_unknown_gate_type_acts_as_identity():
    qc = Circuit(1, 1, gates=[GateInstance("q", "FOO", (0,), column=0)])
    np.testing.assert_allclose(evaluate(qc), [1, 0])


def test_out_of_range_qubit_is_skipped(caplog):
    qc = Circuit(2, 2, gates=[
        GateInstance("bad", "X", (5,), column=0),
        GateInstance("ok", "X", (1,), column=1),
    ])
    with caplog.at_level(logging.WARNING, logger="qcomposer.simulator"):
        state = evaluate(qc)
    assert "bad" in caplog.text
    assert probabilities(state)["10"] == pytest.approx(1.0)


def test_cnot_with_same_control_and_target_is_noop():
    qc = Circuit(2, 2, gates=[
        GateInstance("x", "X", (0,), column=0),
        GateInstance("cx", "CNOT", (0, 0), column=1),
    ])
    assert probabilities(evaluate(qc))["01"] == pytest.approx(1.0)


def test_each_evaluation_allocates_a_new_vector():
    qc = build(1, ("H", 0, 0))
    first = evaluate(qc)
    second = evaluate(qc)
    assert first is not second
    first[0] = 0
    np.testing.assert_allclose(evaluate(qc), np.array([1, 1]) / np.sqrt(2), atol=1e-12)


# ---------------------------------------------------------------------------
# Simulator facade
# ---------------------------------------------------------------------------

def test_result_reports(simulator):
    qc = build(2, ("H", 0, 0), ("CNOT", (0, 1), 1))
    result = simulator.run(qc)
    assert result.n_qubits == 2
    assert result.summary() == "Ran 2 gates across 2 qubits."
    assert result.probabilities()["11"] == pytest.approx(0.5)
    assert result.pretty().splitlines()[0].startswith("|00⟩: amp=0.707+0.000i")
    assert result.reduced(1).exact is False
    x, y, z = result.bloch(0)
    assert z == pytest.approx(0.0, abs=1e-12)
    assert result.bloch(5) is None


def test_statevector_shortcut(simulator):
    qc = build(1, ("X", 0, 0))
    np.testing.assert_allclose(simulator.statevector(qc), [0, 1])
