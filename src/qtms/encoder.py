"""
Text messages carried bit-by-bit through delayed-choice experiments.

Pipeline: text → UTF-8 bits → repetition code → one
:class:`~qtms.experiment.DelayedChoiceExperiment` per bit → decode →
majority vote → text.

Usage:
    from qtms.encoder import MessageEncoder

    encoder = MessageEncoder({"redundancy_factor": 3})
    result = encoder.simulate_transmission("hi")
    print(result.decoded_message, result.accuracy)
"""
from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

import numpy as np

from .experiment import DelayedChoiceExperiment

logger = logging.getLogger(__name__)

DEFAULT_REDUNDANCY = 2


@dataclass
class EncodingResult:
    """Output of :meth:`MessageEncoder.encode_message`."""
    original_message: str
    message_bits: List[int]
    redundant_bits: List[int]
    experiment_results: List[int]
    second_splitter_choices: List[bool]
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class TransmissionResult:
    """Output of :meth:`MessageEncoder.simulate_transmission`."""
    original_message: str
    decoded_message: str
    accuracy: float
    experiment_count: int
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        return asdict(self)


def text_to_bits(text: str) -> List[int]:
    """UTF-8 bytes of ``text``, 8 bits each, most significant first."""
    return [(byte >> j) & 1 for byte in text.encode("utf-8") for j in range(7, -1, -1)]


def bits_to_text(bits: Sequence[int]) -> str:
    """Inverse of :func:`text_to_bits`; zero-pads a partial final byte."""
    bits = list(bits)
    if len(bits) % 8:
        logger.warning("Number of bits (%d) is not a multiple of 8. Adding zeros for alignment.",
                       len(bits))
        bits.extend([0] * (8 - len(bits) % 8))

    data = bytearray()
    for i in range(0, len(bits), 8):
        byte = 0
        for bit in bits[i:i + 8]:
            byte = (byte << 1) | (bit & 1)
        data.append(byte)
    return data.decode("utf-8", errors="replace")


def transmission_accuracy(original: str, decoded: str) -> float:
    """Matching characters over the longer length."""
    min_len = min(len(original), len(decoded))
    length_diff = abs(len(original) - len(decoded))
    if min_len + length_diff == 0:
        return 1.0
    matches = sum(1 for a, b in zip(original, decoded) if a == b)
    return matches / (min_len + length_diff)


class MessageEncoder:
    """
    Encode and decode messages with a repetition code.

    Args:
        hidden_parameters: Parameter mapping, typically
            ``ParametersManager.get_parameters()``. ``redundancy_factor``
            sets the repetition count; the rest configures each experiment.
        rng: Random source shared by all experiments. Unset means the
            shared generator, looked up when each experiment draws.
    """

    def __init__(self, hidden_parameters: Optional[Mapping[str, Any]] = None,
                 rng: Optional[np.random.Generator] = None):
        self.hidden_parameters: Dict[str, Any] = dict(hidden_parameters or {})
        redundancy = int(self.hidden_parameters.get("redundancy_factor", DEFAULT_REDUNDANCY))
        if redundancy < 1:
            raise ValueError(f"redundancy_factor must be >= 1, got {redundancy}")
        self.redundancy_factor = redundancy
        self._rng = rng
        self.experiment_log: List[dict] = []

    text_to_bits = staticmethod(text_to_bits)
    bits_to_text = staticmethod(bits_to_text)

    def _new_experiment(self) -> DelayedChoiceExperiment:
        return DelayedChoiceExperiment(self.hidden_parameters, rng=self._rng)

    def add_redundancy(self, bits: Sequence[int]) -> List[int]:
        """Repeat every bit ``redundancy_factor`` times."""
        return [bit for bit in bits for _ in range(self.redundancy_factor)]

    def remove_redundancy(self, redundant_bits: Sequence[int]) -> List[int]:
        """Majority vote over each group of ``redundancy_factor`` bits."""
        reps = self.redundancy_factor
        bits = list(redundant_bits)
        if len(bits) % reps:
            logger.warning(
                "Number of bits (%d) is not a multiple of the redundancy factor (%d). "
                "Adding zeros for alignment.", len(bits), reps)
            bits.extend([0] * (reps - len(bits) % reps))

        return [1 if sum(bits[i:i + reps]) > reps / 2 else 0
                for i in range(0, len(bits), reps)]

    def encode_message(self, message: str) -> EncodingResult:
        """Run one experiment per redundant bit of ``message``."""
        message_bits = self.text_to_bits(message)
        redundant_bits = self.add_redundancy(message_bits)

        results, choices = [], []
        for bit in redundant_bits:
            experiment = self._new_experiment()
            result = experiment.encode_bit(bit)
            results.append(result)
            choices.append(bit == 1)
            self.experiment_log.append({
                "original_bit": bit,
                "experiment_result": result,
                "second_splitter_present": bit == 1,
                "experiment_state": experiment.get_state(),
            })

        return EncodingResult(message, message_bits, redundant_bits, results, choices)

    def decode_message(self, experiment_results: Sequence[int],
                       second_splitter_choices: Sequence[bool]) -> str:
        """
        Recover the text from experiment results and the recorded choices.

        Raises
        ------
        ValueError
            If the two sequences differ in length.
        """
        if len(experiment_results) != len(second_splitter_choices):
            raise ValueError(
                "Number of experiment results does not match the number of beam splitter choices"
            )

        decoded = [
            self._new_experiment().decode_bit(result, choice)
            for result, choice in zip(experiment_results, second_splitter_choices)
        ]
        return self.bits_to_text(self.remove_redundancy(decoded))

    def simulate_transmission(self, message: str) -> TransmissionResult:
        """Encode then decode ``message`` and score the round trip."""
        logger.info("Starting transmission of %r", message)
        encoding = self.encode_message(message)
        logger.info("Message encoded into %d bits (with redundancy)", len(encoding.redundant_bits))

        decoded = self.decode_message(encoding.experiment_results,
                                      encoding.second_splitter_choices)
        accuracy = transmission_accuracy(message, decoded)
        logger.info("Message decoded: %r (accuracy %.2f%%)", decoded, accuracy * 100)

        return TransmissionResult(message, decoded, accuracy, len(encoding.experiment_results))

    def transmission_steps(self, message: str) -> Iterator[dict]:
        """
        Yield progress events for one transmission.

        Events, in order: ``transmission_started``, ``message_to_bits``,
        ``redundancy_added``, one ``experiment_update`` per redundant bit,
        ``transmission_completed``.
        """
        yield {"event": "transmission_started", "message": message}

        message_bits = self.text_to_bits(message)
        yield {"event": "message_to_bits", "message_bits": message_bits}

        redundant_bits = self.add_redundancy(message_bits)
        yield {"event": "redundancy_added", "redundant_bits": redundant_bits}

        results, choices = [], []
        for index, bit in enumerate(redundant_bits):
            experiment = self._new_experiment()
            result = experiment.encode_bit(bit)
            results.append(result)
            choices.append(bit == 1)
            yield {
                "event": "experiment_update",
                "index": index,
                "bit": bit,
                "result": result,
                "experiment_state": experiment.get_state(),
            }

        decoded = self.decode_message(results, choices)
        yield {
            "event": "transmission_completed",
            "original_message": message,
            "decoded_message": decoded,
            "accuracy": transmission_accuracy(message, decoded),
            "experiment_count": len(results),
        }
