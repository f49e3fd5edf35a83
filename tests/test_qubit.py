"""Tests for the single-qubit state."""

import numpy as np
import pytest

from qtms.core import qubit as qubit_module
from qtms.core import (
    NORM_TOLERANCE,
    CollapsedStateError,
    InvalidStateError,
    Qubit,
    QubitError,
    hadamard,
    seed,
)

S = 1 / np.sqrt(2)


class CountingRng:
    """Stand-in generator returning a fixed sample and counting draws."""

    def __init__(self, value):
        self.value = value
        self.calls = 0

    def random(self):
        self.calls += 1
        return self.value


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture(autouse=True)
def restore_shared_rng():
    saved = qubit_module.get_default_rng()
    yield
    qubit_module._rng = saved


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

def test_default_is_zero_state():
    q = Qubit()
    assert q.alpha == 1 + 0j
    assert q.beta == 0j
    assert not q.collapsed


@pytest.mark.parametrize("alpha,beta", [
    (S, S),
    (0, 1),
    (0.6, 0.8j),
    (S, -1j * S),
    ((0.6, 0.0), (0.0, 0.8)),
    ({"re": 0.6, "im": 0.0}, {"re": 0.0, "im": 0.8}),
    (np.complex128(0.8), np.float64(0.6)),
])
def test_valid_states_construct(alpha, beta):
    q = Qubit(alpha, beta)
    assert abs(q.check_norm() - 1) <= NORM_TOLERANCE


@pytest.mark.parametrize("alpha,beta", [
    (1, 1),
    (0, 0),
    (0.5, 0.5),
    (1, 1e-4),
    ({"re": 1, "im": 1}, 0),
])
def test_unnormalized_states_rejected(alpha, beta):
    with pytest.raises(InvalidStateError):
        Qubit(alpha, beta)


def test_tolerance_boundary():
    # 1 + 1e-12 is inside the tolerance, 1 + 1e-8 is not
    Qubit(1, 1e-6)
    with pytest.raises(InvalidStateError):
        Qubit(1, 1e-4)


def test_invalid_state_error_carries_norm():
    with pytest.raises(InvalidStateError) as exc:
        Qubit(1, 1)
    assert exc.value.norm == pytest.approx(2.0)
    assert "2" in str(exc.value)


def test_error_hierarchy():
    assert issubclass(InvalidStateError, QubitError)
    assert issubclass(InvalidStateError, ValueError)
    assert issubclass(CollapsedStateError, QubitError)


@pytest.mark.parametrize("bad", ["0.5", True, (1, 2, 3), object()])
def test_uninterpretable_amplitude(bad):
    with pytest.raises(TypeError):
        Qubit(bad, 0)


# ---------------------------------------------------------------------------
# Measurement
# ---------------------------------------------------------------------------

def test_measure_zero_state_always_zero(rng):
    for _ in range(50):
        assert Qubit(rng=rng).measure() == 0


def test_measure_one_state_always_one(rng):
    for _ in range(50):
        assert Qubit(0, 1, rng=rng).measure() == 1


def test_sample_below_prob0_gives_zero():
    q = Qubit(S, S)
    assert q.measure(CountingRng(0.49)) == 0


def test_sample_at_or_above_prob0_gives_one():
    q = Qubit(0.6, 0.8)  # prob0 = 0.36
    assert q.measure(CountingRng(0.36)) == 1


@pytest.mark.parametrize("sample", [0.1, 0.9])
def test_collapse_matches_result(sample):
    q = Qubit(S, 1j * S)
    r = q.measure(CountingRng(sample))
    state = q.get_state()
    assert state.collapsed
    if r == 0:
        assert (state.alpha, state.beta) == (1, 0)
    else:
        assert (state.alpha, state.beta) == (0, 1)


def test_remeasure_returns_fixed_value_without_drawing():
    fake = CountingRng(0.99)
    q = Qubit(S, S)
    first = q.measure(fake)
    assert first == 1
    assert q.measure(fake) == 1
    assert q.measure(CountingRng(0.0)) == 1
    assert fake.calls == 1


def test_injected_rng_is_reproducible():
    def run(seed_value):
        rng = np.random.default_rng(seed_value)
        results = []
        for _ in range(32):
            q = Qubit(rng=rng)
            hadamard(q)
            results.append(q.measure())
        return results

    assert run(7) == run(7)


def test_shared_rng_seed_is_reproducible():
    def run():
        results = []
        for _ in range(32):
            q = Qubit()
            hadamard(q)
            results.append(q.measure())
        return results

    seed(123)
    first = run()
    seed(123)
    assert run() == first


def test_measure_argument_overrides_constructor_rng():
    held = CountingRng(0.99)
    q = Qubit(S, S, rng=held)
    assert q.measure(CountingRng(0.01)) == 0
    assert held.calls == 0


# ---------------------------------------------------------------------------
# Generic unitary application
# ---------------------------------------------------------------------------

def test_apply_unitary_with_record_matrix():
    h = {"re": S, "im": 0}
    minus_h = {"re": -S, "im": 0}
    q = Qubit()
    q.apply_unitary([[h, h], [h, minus_h]])
    np.testing.assert_allclose([q.alpha, q.beta], [S, S], atol=1e-15)


def test_apply_unitary_complex_phase():
    # S gate: |1⟩ -> i|1⟩
    q = Qubit(0, 1)
    q.apply_unitary(np.array([[1, 0], [0, 1j]]))
    assert q.beta == 1j


def test_apply_unitary_does_not_revalidate():
    q = Qubit()
    q.apply_unitary([[2, 0], [0, 1]])
    assert q.alpha == 2
    with pytest.raises(InvalidStateError) as exc:
        q.check_norm()
    assert exc.value.norm == pytest.approx(4.0)


def test_apply_unitary_on_collapsed_raises_and_keeps_state():
    q = Qubit(0, 1)
    q.measure()
    before = q.get_state()
    with pytest.raises(CollapsedStateError):
        q.apply_unitary([[0, 1], [1, 0]])
    assert q.get_state() == before


def test_apply_unitary_rejects_wrong_shape():
    with pytest.raises(ValueError):
        Qubit().apply_unitary(np.eye(3))


# ---------------------------------------------------------------------------
# Snapshots
# ---------------------------------------------------------------------------

def test_get_state_has_no_side_effects():
    q = Qubit(0.6, 0.8)
    s1 = q.get_state()
    s2 = q.get_state()
    assert s1 == s2
    assert not q.collapsed


def test_snapshot_to_dict():
    q = Qubit(0.6, 0.8j)
    assert q.get_state().to_dict() == {
        "collapsed": False,
        "alpha": {"re": 0.6, "im": 0.0},
        "beta": {"re": 0.0, "im": 0.8},
    }


def test_probabilities():
    p0, p1 = Qubit(0.6, 0.8).probabilities()
    assert p0 == pytest.approx(0.36)
    assert p1 == pytest.approx(0.64)


@pytest.mark.parametrize("alpha,beta,expected", [
    (1, 0, (0, 0, 1)),
    (0, 1, (0, 0, -1)),
    (S, S, (1, 0, 0)),
    (S, 1j * S, (0, 1, 0)),
])
def test_bloch_vector(alpha, beta, expected):
    np.testing.assert_allclose(Qubit(alpha, beta).bloch_vector(), expected, atol=1e-12)
