"""Tests for the joint two-qubit state."""

import numpy as np
import pytest

from qtms.core import (
    PAULI_X,
    CollapsedStateError,
    InvalidStateError,
    Qubit,
    QubitPair,
    hadamard,
)

S = 1 / np.sqrt(2)


@pytest.fixture
def rng():
    return np.random.default_rng(42)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

def test_default_is_00():
    np.testing.assert_allclose(QubitPair().statevector(), [1, 0, 0, 0])


def test_from_qubits_tensor_product():
    q0 = hadamard(Qubit())
    q1 = Qubit(0, 1)
    pair = QubitPair.from_qubits(q0, q1)
    np.testing.assert_allclose(pair.statevector(), [0, S, 0, S], atol=1e-15)


def test_from_collapsed_qubit_raises():
    q0 = Qubit()
    q0.measure()
    with pytest.raises(CollapsedStateError):
        QubitPair.from_qubits(q0, Qubit())


def test_invalid_norm_raises():
    with pytest.raises(InvalidStateError):
        QubitPair([1, 1, 0, 0])


def test_wrong_length_raises():
    with pytest.raises(ValueError):
        QubitPair([1, 0])


def test_statevector_is_copy():
    pair = QubitPair()
    sv = pair.statevector()
    sv[0] = 0
    assert pair.statevector()[0] == 1


# ---------------------------------------------------------------------------
# Gates
# ---------------------------------------------------------------------------

def test_x_on_each_qubit():
    np.testing.assert_allclose(QubitPair().pauli_x(0).statevector(), [0, 0, 1, 0])
    np.testing.assert_allclose(QubitPair().pauli_x(1).statevector(), [0, 1, 0, 0])


def test_apply_generic_gate():
    pair = QubitPair().apply(PAULI_X, 1).apply([[0, 1], [1, 0]], 0)
    np.testing.assert_allclose(pair.statevector(), [0, 0, 0, 1])


def test_bell_state():
    pair = QubitPair().hadamard(0).cnot(0, 1)
    np.testing.assert_allclose(pair.statevector(), [S, 0, 0, S], atol=1e-15)
    probs = pair.probabilities()
    assert probs["00"] == pytest.approx(0.5)
    assert probs["11"] == pytest.approx(0.5)
    assert probs["01"] == pytest.approx(0.0)


def test_cnot_reversed_roles():
    # |01⟩ with qubit 1 as control -> |11⟩
    pair = QubitPair().pauli_x(1).cnot(1, 0)
    np.testing.assert_allclose(pair.statevector(), [0, 0, 0, 1])


def test_cnot_control_zero_is_noop():
    pair = QubitPair().pauli_x(1).cnot(0, 1)
    np.testing.assert_allclose(pair.statevector(), [0, 1, 0, 0])


@pytest.mark.parametrize("bad", [(0, 0), (1, 1)])
def test_cnot_same_qubit_raises(bad):
    with pytest.raises(ValueError):
        QubitPair().cnot(*bad)


@pytest.mark.parametrize("index", [-1, 2])
def test_bad_index_raises(index):
    with pytest.raises(ValueError):
        QubitPair().hadamard(index)


# ---------------------------------------------------------------------------
# Measurement
# ---------------------------------------------------------------------------

def test_bell_measurements_agree(rng):
    seen = set()
    for _ in range(100):
        pair = QubitPair(rng=rng).hadamard(0).cnot(0, 1)
        first = pair.measure(0)
        assert pair.measure(1) == first
        seen.add(first)
    assert seen == {0, 1}


def test_measurement_collapses_and_renormalizes(rng):
    pair = QubitPair(rng=rng).hadamard(0).cnot(0, 1)
    r = pair.measure(0)
    expected = [1, 0, 0, 0] if r == 0 else [0, 0, 0, 1]
    np.testing.assert_allclose(pair.statevector(), expected, atol=1e-12)
    assert pair.check_norm() == pytest.approx(1.0)


def test_remeasure_returns_stored_result(rng):
    pair = QubitPair(rng=rng).hadamard(1)
    r = pair.measure(1)
    assert all(pair.measure(1) == r for _ in range(10))
    assert pair.measured == {1: r}


def test_gate_on_measured_qubit_raises(rng):
    pair = QubitPair(rng=rng).hadamard(0)
    pair.measure(0)
    with pytest.raises(CollapsedStateError):
        pair.hadamard(0)
    with pytest.raises(CollapsedStateError):
        pair.cnot(0, 1)
    # unmeasured qubit is still usable
    pair.pauli_x(1)
