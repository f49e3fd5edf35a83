"""Tests for the repeated-trial scenarios."""

import numpy as np
import pytest

from qtms.trials import (
    PairOutcome,
    TrialCounts,
    run_entanglement_trials,
    run_superposition_trials,
    summarize_pairs,
)


# ---------------------------------------------------------------------------
# Superposition statistics
# ---------------------------------------------------------------------------

def test_hadamard_measure_is_fair():
    """100k fresh |0⟩ qubits through H land within 45–55% on each outcome."""
    counts = run_superposition_trials(100_000, rng=np.random.default_rng(2024))
    assert counts.total == 100_000
    assert 0.45 <= counts.fraction(0) <= 0.55
    assert 0.45 <= counts.fraction(1) <= 0.55


def test_superposition_is_reproducible():
    a = run_superposition_trials(500, rng=np.random.default_rng(9))
    b = run_superposition_trials(500, rng=np.random.default_rng(9))
    assert a == b


def test_zero_trials():
    counts = run_superposition_trials(0)
    assert counts.total == 0
    assert counts.fraction(0) == 0.0


def test_negative_trials_rejected():
    with pytest.raises(ValueError):
        run_superposition_trials(-1)
    with pytest.raises(ValueError):
        run_entanglement_trials(-5)


def test_counts_to_dict():
    assert TrialCounts(3, 1).to_dict() == {
        "zeros": 3, "ones": 1, "total": 4,
        "fraction_zeros": 0.75, "fraction_ones": 0.25,
    }


# ---------------------------------------------------------------------------
# Entanglement scenario
# ---------------------------------------------------------------------------

def test_literal_cnot_never_fires_after_hadamard():
    """The classical-control CNOT sees a superposed control and does nothing."""
    outcomes = run_entanglement_trials(200, rng=np.random.default_rng(1))
    assert all(not o.control_fired for o in outcomes)
    assert all(o.second == 0 for o in outcomes)
    assert {o.first for o in outcomes} == {0, 1}


def test_literal_cnot_with_measured_control_agrees():
    outcomes = run_entanglement_trials(200, rng=np.random.default_rng(1),
                                       measure_control_first=True)
    assert all(o.agree for o in outcomes)
    assert all(o.control_fired == (o.first == 1) for o in outcomes)
    assert any(o.control_fired for o in outcomes)


def test_joint_state_always_agrees():
    outcomes = run_entanglement_trials(200, rng=np.random.default_rng(1), joint=True)
    assert all(o.agree for o in outcomes)
    assert {o.first for o in outcomes} == {0, 1}


def test_summarize_pairs():
    outcomes = [PairOutcome(0, 0, False), PairOutcome(1, 1, True), PairOutcome(1, 0, False)]
    summary = summarize_pairs(outcomes)
    assert summary["trials"] == 3
    assert summary["agree"] == 2
    assert summary["agreement_rate"] == pytest.approx(2 / 3)
    assert summary["control_fired"] == 1


def test_summarize_empty():
    assert summarize_pairs([])["agreement_rate"] == 0.0
