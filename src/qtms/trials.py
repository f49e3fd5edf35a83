"""
Repeated-trial demos over the qubit core.

Superposition: |0⟩ → H → measure, counted over many fresh qubits.
Entanglement: two |0⟩ qubits, H on the first, CNOT, measure both.

Usage:
    from qtms.trials import run_superposition_trials

    counts = run_superposition_trials(100_000, rng=np.random.default_rng(7))
    print(counts.fraction(0))  # ~0.5
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .core import Qubit, QubitPair, cnot, get_default_rng, hadamard


@dataclass
class TrialCounts:
    """Tally of classical outcomes."""
    zeros: int = 0
    ones: int = 0

    @property
    def total(self) -> int:
        return self.zeros + self.ones

    def fraction(self, bit: int) -> float:
        if self.total == 0:
            return 0.0
        return (self.zeros if bit == 0 else self.ones) / self.total

    def to_dict(self) -> dict:
        return {
            "zeros": self.zeros,
            "ones": self.ones,
            "total": self.total,
            "fraction_zeros": self.fraction(0),
            "fraction_ones": self.fraction(1),
        }


@dataclass
class PairOutcome:
    """Measured bits of one entanglement trial."""
    first: int
    second: int
    control_fired: bool

    @property
    def agree(self) -> bool:
        return self.first == self.second

    def to_dict(self) -> dict:
        return {
            "first": self.first,
            "second": self.second,
            "control_fired": self.control_fired,
            "agree": self.agree,
        }


def run_superposition_trials(n: int, rng: Optional[np.random.Generator] = None) -> TrialCounts:
    """Measure ``n`` fresh qubits after a Hadamard."""
    if n < 0:
        raise ValueError(f"Number of trials must be >= 0, got {n}")
    rng = rng if rng is not None else get_default_rng()

    counts = TrialCounts()
    for _ in range(n):
        q = Qubit(rng=rng)
        hadamard(q)
        if q.measure() == 0:
            counts.zeros += 1
        else:
            counts.ones += 1
    return counts


def _literal_trial(rng: np.random.Generator, measure_control_first: bool) -> PairOutcome:
    q1 = Qubit(rng=rng)
    q2 = Qubit(rng=rng)
    hadamard(q1)

    if measure_control_first:
        first = q1.measure()
        fired = first == 1
        # A measured control cannot enter CNOT; rebuild it from its classical value.
        control = Qubit(0, 1) if fired else Qubit(1, 0)
        cnot(control, q2)
    else:
        fired = q1.alpha == 0 and q1.beta == 1
        cnot(q1, q2)
        first = q1.measure()

    return PairOutcome(first, q2.measure(), fired)


def _joint_trial(rng: np.random.Generator) -> PairOutcome:
    pair = QubitPair(rng=rng)
    pair.hadamard(0).cnot(0, 1)
    first = pair.measure(0)
    return PairOutcome(first, pair.measure(1), first == 1)


def run_entanglement_trials(
    n: int,
    rng: Optional[np.random.Generator] = None,
    joint: bool = False,
    measure_control_first: bool = False,
) -> List[PairOutcome]:
    """
    Run ``n`` H-then-CNOT trials on two fresh |0⟩ qubits.

    Parameters
    ----------
    n : int
        Number of trials.
    rng : numpy.random.Generator, optional
        Measurement source.
    joint : bool
        Use :class:`QubitPair` (true CNOT) instead of the literal
        classical-control CNOT.
    measure_control_first : bool
        Literal mode only: measure the control before CNOT so the
        control check can fire.

    Returns
    -------
    list[PairOutcome]
    """
    if n < 0:
        raise ValueError(f"Number of trials must be >= 0, got {n}")
    rng = rng if rng is not None else get_default_rng()

    if joint:
        return [_joint_trial(rng) for _ in range(n)]
    return [_literal_trial(rng, measure_control_first) for _ in range(n)]


def summarize_pairs(outcomes: List[PairOutcome]) -> dict:
    """Agreement statistics for a list of pair outcomes."""
    total = len(outcomes)
    agree = sum(1 for o in outcomes if o.agree)
    fired = sum(1 for o in outcomes if o.control_fired)
    return {
        "trials": total,
        "agree": agree,
        "agreement_rate": agree / total if total else 0.0,
        "control_fired": fired,
    }
