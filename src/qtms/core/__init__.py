"""Qubit state, gates and the two-qubit joint state."""
from .qubit import (
    NORM_TOLERANCE,
    CollapsedStateError,
    InvalidStateError,
    Qubit,
    QubitError,
    QubitState,
    as_complex,
    get_default_rng,
    seed,
)
from .gates import (
    CNOT,
    H,
    HADAMARD,
    IDENTITY,
    PAULI_X,
    X,
    GateMatrix,
    cnot,
    hadamard,
    pauli_x,
)
from .pair import QubitPair

__all__ = [
    'NORM_TOLERANCE',
    'Qubit',
    'QubitState',
    'QubitError',
    'CollapsedStateError',
    'InvalidStateError',
    'as_complex',
    'get_default_rng',
    'seed',
    'GateMatrix',
    'IDENTITY',
    'HADAMARD',
    'PAULI_X',
    'hadamard',
    'pauli_x',
    'cnot',
    'H',
    'X',
    'CNOT',
    'QubitPair',
]
