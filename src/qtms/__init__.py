"""
qtms: a minimal qubit simulator with a toy message channel.

Features:
- Qubit as a normalized complex amplitude pair, checked to 1e-10
- Hadamard, Pauli-X and CNOT gates acting in place
- Irreversible, seedable measurement
- Joint two-qubit state with a true CNOT
- Delayed-choice message encoder, parameter presets and a REST API

Quick Start:
    >>> from qtms import Qubit, hadamard
    >>> q = Qubit()
    >>> _ = hadamard(q)
    >>> q.measure()  # 0 or 1
"""
__version__ = "1.0.0"

# Core components
from .core import (
    CNOT,
    H,
    X,
    CollapsedStateError,
    GateMatrix,
    InvalidStateError,
    Qubit,
    QubitError,
    QubitPair,
    QubitState,
    cnot,
    hadamard,
    pauli_x,
    seed,
)

# Demo layer
from .encoder import MessageEncoder
from .experiment import DelayedChoiceExperiment
from .parameters import ParametersManager
from .trials import run_entanglement_trials, run_superposition_trials

__all__ = [
    # Core
    'Qubit',
    'QubitState',
    'QubitPair',
    'GateMatrix',
    'QubitError',
    'CollapsedStateError',
    'InvalidStateError',
    'hadamard',
    'pauli_x',
    'cnot',
    'H',
    'X',
    'CNOT',
    'seed',
    # Demo layer
    'DelayedChoiceExperiment',
    'MessageEncoder',
    'ParametersManager',
    'run_superposition_trials',
    'run_entanglement_trials',
]
