"""
Delayed-choice interferometer model used to carry one bit.

A particle (a :class:`~qtms.core.Qubit`) passes a first beam splitter
(Hadamard) into superposition. Only afterwards is the second beam
splitter inserted or left out: inserted means wave behaviour
(interference decides the detector), left out means particle behaviour
(a which-path measurement of the qubit decides it). Hidden parameters
bias the outcome towards a predetermined result.

    >>> exp = DelayedChoiceExperiment(rng=np.random.default_rng(1))
    >>> result = exp.encode_bit(1)
    >>> exp.decode_bit(result, True) in (0, 1)
    True
"""
from __future__ import annotations

import math
from typing import Dict, Optional

import numpy as np

from .core import Qubit, get_default_rng, hadamard

DEFAULT_HIDDEN_PARAMETERS: Dict[str, float] = {
    "predetermination_factor": 0.95,
    "temporal_correlation": 0.9,
    "time_entanglement": 0.85,
    "consistency_parameter": 0.98,
}


class DelayedChoiceExperiment:
    """
    One run of the delayed-choice experiment.

    Args:
        hidden_parameters: Overrides for DEFAULT_HIDDEN_PARAMETERS. Extra
            keys are kept but unused.
        rng: Random source for the phase, hidden choices and measurement.
    """

    def __init__(self, hidden_parameters: Optional[Dict[str, float]] = None,
                 rng: Optional[np.random.Generator] = None):
        self.hidden_parameters = {**DEFAULT_HIDDEN_PARAMETERS, **(hidden_parameters or {})}
        self._rng = rng

        self.particle = Qubit(rng=self._rng)
        self.phase = float(self.rng.random() * 2 * math.pi)
        self.hidden_path: Optional[int] = None
        self.interference_pattern: Optional[float] = None

        self.first_splitter_passed = False
        self.second_splitter_present: Optional[bool] = None
        self.measurement_performed = False
        self.result: Optional[int] = None

        self._predetermined = self._generate_predetermined_result()

    @property
    def rng(self) -> np.random.Generator:
        """Injected generator, else the shared one at the time of the call."""
        return self._rng if self._rng is not None else get_default_rng()

    def _generate_predetermined_result(self) -> Optional[int]:
        if self.rng.random() < self.hidden_parameters["predetermination_factor"]:
            return 0 if self.rng.random() < 0.5 else 1
        return None

    def pass_first_beam_splitter(self) -> None:
        """Put the particle into superposition."""
        if self.first_splitter_passed:
            raise RuntimeError("Particle has already passed the first beam splitter")

        hadamard(self.particle)
        self.first_splitter_passed = True
        if self._predetermined is not None:
            self.hidden_path = self._predetermined

    def set_second_beam_splitter(self, present: bool) -> None:
        """Make the delayed choice."""
        if not self.first_splitter_passed:
            raise RuntimeError("Particle must first pass through the first beam splitter")
        if self.second_splitter_present is not None:
            raise RuntimeError("The choice about the second beam splitter has already been made")

        self.second_splitter_present = bool(present)

        if self.hidden_parameters["temporal_correlation"] > self.rng.random():
            if self._predetermined is not None and present:
                self.interference_pattern = self.interference()

    def interference(self) -> float:
        """cos²(phase), scaled by the consistency parameter."""
        return math.cos(self.phase) ** 2 * self.hidden_parameters["consistency_parameter"]

    def measure(self) -> int:
        """Detector outcome (0 or 1). Repeat calls return the first result."""
        if not self.first_splitter_passed:
            raise RuntimeError("Particle must first pass through the first beam splitter")
        if self.second_splitter_present is None:
            raise RuntimeError("You must first decide whether to install the second beam splitter")
        if self.measurement_performed:
            return self.result

        if (self._predetermined is not None
                and self.rng.random() < self.hidden_parameters["consistency_parameter"]):
            result = self._predetermined
        elif self.second_splitter_present:
            result = 1 if self.interference() > 0.5 else 0
        else:
            # which-path detector
            result = self.particle.measure(self.rng)

        self.measurement_performed = True
        self.result = result
        return result

    def run(self, second_splitter_present: bool) -> int:
        """Full experiment with the given choice."""
        self.pass_first_beam_splitter()
        self.set_second_beam_splitter(second_splitter_present)
        return self.measure()

    def encode_bit(self, bit: int) -> int:
        """Encode ``bit`` as the presence (1) or absence (0) of the second splitter."""
        if bit not in (0, 1) or isinstance(bit, bool):
            raise ValueError(f"Bit must be 0 or 1, got {bit!r}")
        return self.run(bit == 1)

    def decode_bit(self, experiment_result: int, second_splitter_present: bool) -> int:
        """Recover the bit from the recorded choice, subject to time-entanglement noise."""
        if self.rng.random() < self.hidden_parameters["time_entanglement"]:
            return 1 if second_splitter_present else 0
        return 0 if self.rng.random() < 0.5 else 1

    def get_state(self) -> dict:
        particle = self.particle.get_state().to_dict()
        particle.update({
            "superposition": not self.particle.collapsed,
            "phase": self.phase,
            "hidden_path": self.hidden_path,
            "interference_pattern": self.interference_pattern,
        })
        return {
            "particle": particle,
            "experiment": {
                "first_splitter_passed": self.first_splitter_passed,
                "second_splitter_present": self.second_splitter_present,
                "measurement_performed": self.measurement_performed,
                "result": self.result,
            },
        }

    def __repr__(self) -> str:
        return (f"DelayedChoiceExperiment(second_splitter={self.second_splitter_present}, "
                f"result={self.result})")
