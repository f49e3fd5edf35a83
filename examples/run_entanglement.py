"""Example: H + CNOT, classical-control CNOT vs. the joint two-qubit state."""
import numpy as np

from qtms.core import QubitPair
from qtms.trials import run_entanglement_trials, summarize_pairs
from qtms.visualization import pair_probabilities_ascii

print("=" * 50)
print("qtms: Entanglement Example")
print("=" * 50)

for label, kwargs in [
    ("classical-control CNOT", {}),
    ("control measured first", {"measure_control_first": True}),
    ("joint state", {"joint": True}),
]:
    outcomes = run_entanglement_trials(10, rng=np.random.default_rng(1), **kwargs)
    print(f"\n{label}:")
    for o in outcomes:
        print(f"  q1: {o.first} -- q2: {o.second}")
    summary = summarize_pairs(outcomes)
    print(f"  agreement: {summary['agree']}/{summary['trials']}")

print("\nJoint state after H(0), CNOT(0, 1):")
print(pair_probabilities_ascii(QubitPair().hadamard(0).cnot(0, 1)))
