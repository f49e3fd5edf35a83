"""Tests for text rendering of states and counts."""

import numpy as np
import pytest

from qtms.core import Qubit, QubitPair, hadamard, pauli_x
from qtms.trials import TrialCounts
from qtms.visualization import (
    ascii_bloch,
    bloch_to_angles,
    counts_ascii,
    hemisphere_marker,
    pair_probabilities_ascii,
    trial_histogram,
)


def test_counts_ascii():
    text = counts_ascii({"1": 25, "0": 75})
    lines = text.splitlines()
    assert lines[0] == "Measurement Results:"
    assert lines[2].startswith("|0⟩: " + "█" * 30)
    assert "75.0%" in lines[2]
    assert "25.0%" in lines[3]


def test_counts_ascii_empty_total():
    assert "0.0%" in counts_ascii({"0": 0, "1": 0})


def test_trial_histogram():
    text = trial_histogram(TrialCounts(zeros=1, ones=3))
    assert "|0⟩" in text and "|1⟩" in text
    assert "75.0%" in text


def test_pair_probabilities_hides_empty_states():
    text = pair_probabilities_ascii(QubitPair().hadamard(0).cnot(0, 1))
    assert "|00⟩" in text and "|11⟩" in text
    assert "|01⟩" not in text and "|10⟩" not in text


@pytest.mark.parametrize("xyz,expected", [
    ((0.0, 0.0, 1.0), (0.0, 0.0)),
    ((0.0, 0.0, -1.0), (np.pi, 0.0)),
    ((1.0, 0.0, 0.0), (np.pi / 2, 0.0)),
    ((0.0, 1.0, 0.0), (np.pi / 2, np.pi / 2)),
])
def test_bloch_to_angles(xyz, expected):
    assert bloch_to_angles(*xyz) == pytest.approx(expected)


def _gauge_line(text, label):
    return next(line for line in text.splitlines() if line.startswith(f"  {label}"))


@pytest.mark.parametrize("prepare,marker,index", [
    (lambda q: q, "●", 0),
    (pauli_x, "○", 20),
    (hadamard, "◐", 10),
])
def test_ascii_bloch_polar_gauge(prepare, marker, index):
    line = _gauge_line(ascii_bloch(prepare(Qubit())), "θ")
    gauge = line.split("|0⟩ ")[1].split(" |1⟩")[0]
    assert len(gauge) == 21
    assert gauge.index(marker) == index


def test_ascii_bloch_azimuth():
    text = ascii_bloch(hadamard(Qubit()))
    gauge = _gauge_line(text, "φ").split("-π ")[1].split(" π")[0]
    assert gauge.index("◐") == 10
    assert "(pole)" in _gauge_line(ascii_bloch(Qubit()), "φ")


def test_ascii_bloch_coordinates():
    text = ascii_bloch(hadamard(Qubit()))
    assert "x=1.000" in text
    assert "θ=1.571 rad" in text


def test_hemisphere_marker():
    assert [hemisphere_marker(z) for z in (1.0, 0.0, -1.0)] == ["●", "◐", "○"]
