"""
Unitary gates acting on :class:`~qtms.core.qubit.Qubit` objects.

Gates mutate the qubit in place. Each named gate checks that its
qubit(s) are still in superposition before touching them and
re-validates normalization afterwards.

CNOT here is the classical-control approximation: it inspects the
control's amplitudes and flips the target only when the control is
exactly |1⟩. For a true two-qubit CNOT over a joint state see
:class:`qtms.core.pair.QubitPair`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

import numpy as np

from qtms.core.qubit import CollapsedStateError, Qubit, as_complex

SQRT2 = math.sqrt(2)


# =============================================================================
# MATRIX VALUE TYPE
# =============================================================================

@dataclass(frozen=True)
class GateMatrix:
    """
    2x2 complex matrix [[m00, m01], [m10, m11]].
    """

    m00: complex
    m01: complex
    m10: complex
    m11: complex

    @classmethod
    def from_array(cls, obj: Any) -> "GateMatrix":
        """
        Build from a numpy (2, 2) array or a nested 2x2 sequence.

        Entries may be numbers, ``(re, im)`` pairs or ``{"re", "im"}``
        records.

        Raises
        ------
        ValueError
            If the input is not 2x2.
        """
        if isinstance(obj, cls):
            return obj
        if isinstance(obj, np.ndarray):
            if obj.shape != (2, 2):
                raise ValueError(f"Gate matrix must be 2x2, got shape {obj.shape}")
            return cls(*(complex(v) for v in obj.ravel()))
        try:
            rows = list(obj)
            if len(rows) != 2 or any(len(row) != 2 for row in rows):
                raise ValueError("Gate matrix must be 2x2")
        except TypeError as e:
            raise ValueError(f"Cannot build a gate matrix from {obj!r}") from e
        (a, b), (c, d) = rows
        return cls(as_complex(a), as_complex(b), as_complex(c), as_complex(d))

    def to_array(self) -> np.ndarray:
        return np.array([[self.m00, self.m01], [self.m10, self.m11]],
                        dtype=np.complex128)

    def apply(self, alpha: complex, beta: complex) -> tuple[complex, complex]:
        """Matrix-vector product on the amplitude pair."""
        return (self.m00 * alpha + self.m01 * beta,
                self.m10 * alpha + self.m11 * beta)

    def dagger(self) -> "GateMatrix":
        """Conjugate transpose."""
        return GateMatrix(self.m00.conjugate(), self.m10.conjugate(),
                          self.m01.conjugate(), self.m11.conjugate())

    def __matmul__(self, other: "GateMatrix") -> "GateMatrix":
        if not isinstance(other, GateMatrix):
            return NotImplemented
        return GateMatrix(
            self.m00 * other.m00 + self.m01 * other.m10,
            self.m00 * other.m01 + self.m01 * other.m11,
            self.m10 * other.m00 + self.m11 * other.m10,
            self.m10 * other.m01 + self.m11 * other.m11,
        )

    def is_unitary(self, tol: float = 1e-10) -> bool:
        """U†U == I within ``tol``."""
        m = self.to_array()
        return np.allclose(m.conj().T @ m, np.eye(2), atol=tol)


IDENTITY = GateMatrix(1, 0, 0, 1)
HADAMARD = GateMatrix(1 / SQRT2, 1 / SQRT2, 1 / SQRT2, -1 / SQRT2)
PAULI_X = GateMatrix(0, 1, 1, 0)


# =============================================================================
# NAMED GATES
# =============================================================================

def hadamard(qubit: Qubit) -> Qubit:
    """H: α' = (α + β)/√2, β' = (α - β)/√2."""
    if qubit.collapsed:
        raise CollapsedStateError("(H) The qubit is collapsed")

    a, b = qubit.alpha, qubit.beta
    qubit.set_amplitudes(
        complex((a.real + b.real) / SQRT2, (a.imag + b.imag) / SQRT2),
        complex((a.real - b.real) / SQRT2, (a.imag - b.imag) / SQRT2),
    )
    qubit.check_norm()
    return qubit


def pauli_x(qubit: Qubit) -> Qubit:
    """X (bit flip): swaps α and β."""
    if qubit.collapsed:
        raise CollapsedStateError("(X) The qubit is collapsed")

    qubit.set_amplitudes(qubit.beta, qubit.alpha)
    qubit.check_norm()
    return qubit


def _is_exactly_one(qubit: Qubit) -> bool:
    # Exact comparison: residues left by earlier rotations do not count as |1⟩.
    a, b = qubit.alpha, qubit.beta
    return a.real == 0 and a.imag == 0 and b.real == 1 and b.imag == 0


def cnot(control: Qubit, target: Qubit) -> tuple[Qubit, Qubit]:
    """
    Controlled-NOT with a classical-looking control.

    Applies X to ``target`` only if ``control`` is exactly
    α = 0, β = 1. A superposed control leaves the target untouched.
    """
    if control.collapsed or target.collapsed:
        raise CollapsedStateError("(CNOT) One or both qubits are collapsed")

    if _is_exactly_one(control):
        pauli_x(target)
    return control, target


H = hadamard
X = pauli_x
CNOT = cnot
