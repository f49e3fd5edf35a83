"""
Text rendering of qubit states and trial results.

Features:
- Measurement histograms for trial counts
- Probability bars for a QubitPair
- Bloch sphere sketch for a single qubit
"""
from typing import Dict, Optional, Tuple

import numpy as np

from .core import Qubit, QubitPair
from .trials import TrialCounts

BAR_WIDTH = 40
GAUGE_WIDTH = 21


def _bar(fraction: float) -> str:
    return '█' * int(fraction * BAR_WIDTH)


def counts_ascii(counts: Dict[str, int], total: Optional[int] = None) -> str:
    """Display measurement counts as histogram."""
    if total is None:
        total = sum(counts.values())

    lines = ["Measurement Results:", "─" * 50]
    for bitstring in sorted(counts):
        count = counts[bitstring]
        prob = count / total if total else 0.0
        lines.append(f"|{bitstring}⟩: {_bar(prob):{BAR_WIDTH}s} {count:6d} ({prob * 100:5.1f}%)")

    return '\n'.join(lines)


def trial_histogram(counts: TrialCounts) -> str:
    """Histogram of a superposition run."""
    return counts_ascii({"0": counts.zeros, "1": counts.ones}, counts.total)


def pair_probabilities_ascii(pair: QubitPair, threshold: float = 0.01) -> str:
    """Probability bars for the four basis states of a pair."""
    lines = ["Probabilities:", "─" * 50]
    for bitstring, prob in pair.probabilities().items():
        if prob < threshold:
            continue
        lines.append(f"|{bitstring}⟩: {_bar(prob):{BAR_WIDTH}s} {prob * 100:5.1f}%")
    return '\n'.join(lines)


def bloch_to_angles(x: float, y: float, z: float) -> Tuple[float, float]:
    """Convert Bloch coordinates to spherical angles (θ, φ)."""
    theta = np.arccos(np.clip(z, -1, 1))
    phi = np.arctan2(y, x)
    return float(theta), float(phi)


def _gauge(value: float, low: float, high: float, marker: str) -> str:
    cells = ['·'] * GAUGE_WIDTH
    pos = int(round((np.clip(value, low, high) - low) / (high - low) * (GAUGE_WIDTH - 1)))
    cells[pos] = marker
    return ''.join(cells)


def hemisphere_marker(z: float) -> str:
    if z > 0.3:
        return '●'
    if z < -0.3:
        return '○'
    return '◐'


def ascii_bloch(qubit: Qubit) -> str:
    """
    Bloch coordinates plus two gauges: polar angle from |0⟩ to |1⟩ and
    azimuth around the equator. The azimuth is undefined at the poles.
    """
    x, y, z = qubit.bloch_vector()
    theta, phi = bloch_to_angles(x, y, z)
    marker = hemisphere_marker(z)

    lines = [
        "Bloch Sphere:",
        "─" * 40,
        f"  Coordinates: x={x:.3f}, y={y:.3f}, z={z:.3f}",
        f"  Angles: θ={theta:.3f} rad, φ={phi:.3f} rad",
        "",
        f"  θ  |0⟩ {_gauge(theta, 0.0, np.pi, marker)} |1⟩",
    ]
    if np.hypot(x, y) > 1e-9:
        lines.append(f"  φ   -π {_gauge(phi, -np.pi, np.pi, marker)} π")
    else:
        lines.append("  φ   (pole)")
    lines.append("")
    lines.append("  ● = |0⟩ hemisphere  ○ = |1⟩ hemisphere  ◐ = near equator")

    return '\n'.join(lines)
