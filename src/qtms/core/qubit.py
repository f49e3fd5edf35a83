"""
Single-qubit state: a normalized pair of complex amplitudes.

A qubit starts in superposition (any normalized |ψ⟩ = α|0⟩ + β|1⟩),
is mutated in place by gates, and is collapsed irreversibly by
measurement into |0⟩ or |1⟩.

    >>> from qtms.core import Qubit, hadamard
    >>> q = Qubit()
    >>> _ = hadamard(q)
    >>> q.measure()  # 0 or 1, each with probability 1/2
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import numpy as np

NORM_TOLERANCE = 1e-10


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class QubitError(Exception):
    """Base class for qubit state errors."""


class CollapsedStateError(QubitError):
    """A gate was applied to a qubit that has already been measured."""


class InvalidStateError(QubitError, ValueError):
    """Amplitudes are not normalized within NORM_TOLERANCE."""
    def __init__(self, norm: float) -> None:
        super().__init__(f"Invalid qubit state: norm must be 1, but got {norm}")
        self.norm = norm


# ---------------------------------------------------------------------------
# Shared random source
# ---------------------------------------------------------------------------

_rng = np.random.default_rng()


def get_default_rng() -> np.random.Generator:
    """Generator used by measure() when none is injected."""
    return _rng


def seed(value: int | None) -> None:
    """Reseed the shared generator (``None`` draws fresh OS entropy)."""
    global _rng
    _rng = np.random.default_rng(value)


def as_complex(value: Any) -> complex:
    """
    Convert an amplitude to ``complex``.

    Accepts numbers, ``(re, im)`` pairs and ``{"re": .., "im": ..}``
    records (the transport format).
    """
    if isinstance(value, Mapping):
        return complex(float(value.get("re", 0.0)), float(value.get("im", 0.0)))
    if isinstance(value, (tuple, list)):
        if len(value) != 2:
            raise TypeError(f"Amplitude pair must have 2 components, got {len(value)}")
        return complex(float(value[0]), float(value[1]))
    if isinstance(value, (bool, str)):
        raise TypeError(f"Cannot interpret {value!r} as a complex amplitude")
    try:
        return complex(value)
    except (TypeError, ValueError) as e:
        raise TypeError(f"Cannot interpret {value!r} as a complex amplitude") from e


def _amplitude_dict(z: complex) -> dict[str, float]:
    return {"re": float(z.real), "im": float(z.imag)}


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class QubitState:
    """Read-only snapshot of a qubit."""

    collapsed: bool
    alpha: complex
    beta: complex

    def probabilities(self) -> tuple[float, float]:
        """Return (P(0), P(1))."""
        return abs(self.alpha) ** 2, abs(self.beta) ** 2

    def to_dict(self) -> dict:
        """Plain-data form for JSON transport."""
        return {
            "collapsed": self.collapsed,
            "alpha": _amplitude_dict(self.alpha),
            "beta": _amplitude_dict(self.beta),
        }


# ---------------------------------------------------------------------------
# Qubit
# ---------------------------------------------------------------------------

class Qubit:
    """
    A single two-level quantum system.

    Parameters
    ----------
    alpha : complex-like
        Amplitude of |0⟩. Defaults to 1.
    beta : complex-like
        Amplitude of |1⟩. Defaults to 0.
    rng : numpy.random.Generator, optional
        Source for measurement sampling. Falls back to the shared
        module generator (see :func:`seed`).

    Raises
    ------
    InvalidStateError
        If |α|² + |β|² differs from 1 by more than NORM_TOLERANCE.
    """

    def __init__(self, alpha: Any = 1, beta: Any = 0,
                 rng: np.random.Generator | None = None) -> None:
        self._alpha = as_complex(alpha)
        self._beta = as_complex(beta)
        self._collapsed = False
        self._rng = rng
        self.check_norm()

    @property
    def alpha(self) -> complex:
        return self._alpha

    @property
    def beta(self) -> complex:
        return self._beta

    @property
    def collapsed(self) -> bool:
        return self._collapsed

    def norm(self) -> float:
        """|α|² + |β|²."""
        a, b = self._alpha, self._beta
        return a.real * a.real + a.imag * a.imag + b.real * b.real + b.imag * b.imag

    def check_norm(self) -> float:
        """Return the norm, raising InvalidStateError if out of tolerance."""
        norm = self.norm()
        if abs(norm - 1) > NORM_TOLERANCE:
            raise InvalidStateError(norm)
        return norm

    def _ensure_not_collapsed(self, what: str = "apply gate") -> None:
        if self._collapsed:
            raise CollapsedStateError(
                f"Cannot {what}: qubit has collapsed due to measurement"
            )

    def set_amplitudes(self, alpha: complex, beta: complex) -> None:
        """Overwrite both amplitudes in place. Does not check the norm."""
        self._ensure_not_collapsed("set amplitudes")
        self._alpha = complex(alpha)
        self._beta = complex(beta)

    def apply_unitary(self, gate: Any) -> None:
        """
        Apply a 2x2 matrix to (α, β).

        The matrix is trusted to be unitary; the norm is not re-checked.

        Parameters
        ----------
        gate : GateMatrix or array-like
            Anything :meth:`GateMatrix.from_array` accepts.
        """
        from qtms.core.gates import GateMatrix

        self._ensure_not_collapsed()
        matrix = GateMatrix.from_array(gate)
        self._alpha, self._beta = matrix.apply(self._alpha, self._beta)

    def measure(self, rng: np.random.Generator | None = None) -> int:
        """
        Measure in the computational basis and collapse.

        A collapsed qubit returns its fixed classical value without
        drawing a new sample.
        """
        if self._collapsed:
            return 0 if self._alpha == 1 else 1

        prob0 = abs(self._alpha) ** 2
        source = rng or self._rng or _rng
        result = 0 if source.random() < prob0 else 1
        self._collapse(result)
        return result

    def _collapse(self, result: int) -> None:
        if result == 0:
            self._alpha, self._beta = 1 + 0j, 0j
        else:
            self._alpha, self._beta = 0j, 1 + 0j
        self._collapsed = True

    def get_state(self) -> QubitState:
        """Snapshot of {collapsed, alpha, beta}."""
        return QubitState(self._collapsed, self._alpha, self._beta)

    def probabilities(self) -> tuple[float, float]:
        return self.get_state().probabilities()

    def bloch_vector(self) -> tuple[float, float, float]:
        """Bloch sphere coordinates (x, y, z) via Pauli expectations."""
        psi = np.array([self._alpha, self._beta], dtype=np.complex128)
        rho = np.outer(psi, psi.conj())
        x = float(2 * rho[0, 1].real)
        y = float(-2 * rho[0, 1].imag)
        z = float((rho[0, 0] - rho[1, 1]).real)
        return x, y, z

    def __repr__(self) -> str:
        tag = "collapsed" if self._collapsed else "superposition"
        return f"Qubit(alpha={self._alpha}, beta={self._beta}, {tag})"
