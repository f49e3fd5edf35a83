"""Example: Hadamard + measurement statistics on fresh qubits."""
import numpy as np

from qtms.trials import run_superposition_trials

print("=" * 50)
print("qtms: Superposition Example")
print("=" * 50)

rng = np.random.default_rng(2024)
for n in [1, 10, 100, 1_000, 10_000, 100_000]:
    counts = run_superposition_trials(n, rng=rng)
    print(f"\nResults for n={n}:")
    print(f"  0: {counts.zeros} times ({100 * counts.fraction(0):.2f}%)")
    print(f"  1: {counts.ones} times ({100 * counts.fraction(1):.2f}%)")

print("\nExpected: ~50% each for large n")
