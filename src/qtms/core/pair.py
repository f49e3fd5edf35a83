"""
Joint two-qubit state with a real CNOT.

The amplitude vector is ordered |q0 q1⟩ = 00, 01, 10, 11, with qubit 0
as the most significant bit. Unlike :func:`qtms.core.gates.cnot`, the
CNOT here acts on superposed controls and produces entanglement:

    >>> pair = QubitPair()
    >>> _ = pair.hadamard(0).cnot(0, 1)
    >>> pair.measure(0) == pair.measure(1)
    True
"""

from __future__ import annotations

import numpy as np
from numpy import ndarray

from qtms.core.gates import HADAMARD, PAULI_X, GateMatrix
from qtms.core.qubit import (
    NORM_TOLERANCE,
    CollapsedStateError,
    InvalidStateError,
    Qubit,
    get_default_rng,
)

CNOT_MATRIX = np.array([
    [1, 0, 0, 0],
    [0, 1, 0, 0],
    [0, 0, 0, 1],
    [0, 0, 1, 0],
], dtype=np.complex128)


class QubitPair:
    """
    Two qubits held as one 4-amplitude state vector.

    Parameters
    ----------
    state : array-like, optional
        Initial amplitudes (length 4). Defaults to |00⟩.
    rng : numpy.random.Generator, optional
        Measurement source; falls back to the shared generator.
    """

    def __init__(self, state=None, rng: np.random.Generator | None = None) -> None:
        if state is None:
            self._state = np.zeros(4, dtype=np.complex128)
            self._state[0] = 1.0
        else:
            self._state = np.array(state, dtype=np.complex128).copy()
            if self._state.shape != (4,):
                raise ValueError(f"Pair state must have 4 amplitudes, got shape {self._state.shape}")
        self._rng = rng
        self.measured: dict[int, int] = {}
        self.check_norm()

    @classmethod
    def from_qubits(cls, q0: Qubit, q1: Qubit,
                    rng: np.random.Generator | None = None) -> "QubitPair":
        """Tensor product |q0⟩ ⊗ |q1⟩ of two uncollapsed qubits."""
        if q0.collapsed or q1.collapsed:
            raise CollapsedStateError("Cannot combine collapsed qubits into a pair")
        return cls(np.kron([q0.alpha, q0.beta], [q1.alpha, q1.beta]), rng=rng)

    # ------------------------------------------------------------------
    # Invariants
    # ------------------------------------------------------------------

    def check_norm(self) -> float:
        norm = float(np.vdot(self._state, self._state).real)
        if abs(norm - 1) > NORM_TOLERANCE:
            raise InvalidStateError(norm)
        return norm

    @staticmethod
    def _check_index(qubit: int) -> None:
        if qubit not in (0, 1):
            raise ValueError(f"Qubit index must be 0 or 1, got {qubit}")

    def _ensure_unmeasured(self, *qubits: int) -> None:
        for q in qubits:
            self._check_index(q)
            if q in self.measured:
                raise CollapsedStateError(f"Qubit {q} of the pair has been measured")

    # ------------------------------------------------------------------
    # Gates
    # ------------------------------------------------------------------

    def apply(self, gate, qubit: int) -> "QubitPair":
        """Apply a single-qubit gate to qubit 0 or 1."""
        self._ensure_unmeasured(qubit)
        m = GateMatrix.from_array(gate).to_array()
        full = np.kron(m, np.eye(2)) if qubit == 0 else np.kron(np.eye(2), m)
        self._state = full @ self._state
        self.check_norm()
        return self

    def hadamard(self, qubit: int) -> "QubitPair":
        return self.apply(HADAMARD, qubit)

    def pauli_x(self, qubit: int) -> "QubitPair":
        return self.apply(PAULI_X, qubit)

    def cnot(self, control: int, target: int) -> "QubitPair":
        """Flip ``target`` on the |1⟩ branch of ``control``."""
        self._ensure_unmeasured(control, target)
        if control == target:
            raise ValueError("control and target must differ")
        if control == 0:
            self._state = CNOT_MATRIX @ self._state
        else:
            # swap |01⟩ <-> |11⟩
            self._state[[1, 3]] = self._state[[3, 1]]
        self.check_norm()
        return self

    # ------------------------------------------------------------------
    # Measurement
    # ------------------------------------------------------------------

    def _mask(self, qubit: int, value: int) -> ndarray:
        shift = 1 - qubit
        return np.array([((i >> shift) & 1) == value for i in range(4)])

    def measure(self, qubit: int, rng: np.random.Generator | None = None) -> int:
        """Projective measurement of one qubit; repeat calls return the stored bit."""
        self._check_index(qubit)
        if qubit in self.measured:
            return self.measured[qubit]

        probs = np.abs(self._state) ** 2
        p0 = float(np.sum(probs[self._mask(qubit, 0)]))
        source = rng or self._rng or get_default_rng()
        outcome = 0 if source.random() < p0 else 1

        keep = self._mask(qubit, outcome)
        new_state = np.where(keep, self._state, 0)
        norm = np.sqrt(p0 if outcome == 0 else 1 - p0)
        if norm > 1e-15:
            new_state = new_state / norm
        self._state = new_state.astype(np.complex128)
        self.measured[qubit] = outcome
        return outcome

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    def statevector(self) -> ndarray:
        return self._state.copy()

    def probabilities(self) -> dict[str, float]:
        """Bitstring -> probability for every basis state."""
        probs = np.abs(self._state) ** 2
        return {format(i, "02b"): float(p) for i, p in enumerate(probs)}

    def __repr__(self) -> str:
        return f"QubitPair(state={np.round(self._state, 6).tolist()}, measured={self.measured})"
