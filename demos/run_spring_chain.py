#!/usr/bin/env python3
"""
RUN_SPRING_CHAIN: Punch File Round Trip and Modal Check
=======================================================

This demo shows the complete extraction workflow on a model small enough to
check by hand:
1. Assemble K and M for a fixed-free chain of springs and masses
2. Write them to a punch file as KAAX / MAAX DMIG records
3. Read both matrices back with read_matrices()
4. Compare natural frequencies with the closed-form solution

For n equal masses m and springs k (fixed at one end, free at the other):

    ω_r = 2·sqrt(k/m)·sin((2r - 1)·π / (2(2n + 1))),   r = 1..n

Run with:
    python demos/run_spring_chain.py
"""

import sys
import tempfile
from pathlib import Path

import numpy as np

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from pchmat import DofTable, MatrixKind, read_matrices, write_punch
from pchmat.kernel import natural_frequencies


def print_header(text: str):
    """Print a formatted section header."""
    print("\n" + "=" * 60)
    print(f"  {text}")
    print("=" * 60)


def spring_chain(n: int, k: float, m: float):
    """K and M of a fixed-free chain (the fixed end is not a DOF)."""
    K = np.zeros((n, n))
    for i in range(n):
        # Spring below mass i
        K[i, i] += k
        if i > 0:
            K[i - 1, i - 1] += k
            K[i - 1, i] -= k
            K[i, i - 1] -= k
    M = m * np.eye(n)
    return K, M


def main():
    n = 6
    k = 1.0e4   # N/m
    m = 2.5     # kg

    print_header("STEP 1: Assemble Spring-Mass Chain")
    K, M = spring_chain(n, k, m)
    # Scalar points 101, 102, ... one DOF each
    table = DofTable({100 + i + 1: 1 for i in range(n)})
    print(f"{n} masses, k = {k:.0f} N/m, m = {m} kg -> {table.ndof()} DOFs")

    with tempfile.TemporaryDirectory() as tmp:
        pch = Path(tmp) / "spring_chain.pch"

        print_header("STEP 2: Write Punch File")
        write_punch(pch, {MatrixKind.STIFFNESS: K, MatrixKind.MASS: M}, table)
        lines = pch.read_text().splitlines()
        print(f"{pch.name}: {len(lines)} lines")
        for line in lines[:10]:
            print("  " + line)
        print("  ...")

        print_header("STEP 3: Read Matrices Back")
        mats = read_matrices(pch)
        K2 = mats[MatrixKind.STIFFNESS]
        M2 = mats[MatrixKind.MASS]

    print(f"K max error: {np.max(np.abs(K2 - K)):.3e}")
    print(f"M max error: {np.max(np.abs(M2 - M)):.3e}")

    print_header("STEP 4: Natural Frequencies")
    freqs, _ = natural_frequencies(K2, M2, n_modes=n)
    r = np.arange(1, n + 1)
    exact = 2.0 * np.sqrt(k / m) * np.sin((2 * r - 1) * np.pi / (2 * (2 * n + 1))) / (2 * np.pi)

    print(f"{'Mode':>6} {'pchmat (Hz)':>14} {'exact (Hz)':>14}")
    for i in range(n):
        print(f"{i + 1:>6} {freqs[i]:>14.5f} {exact[i]:>14.5f}")

    ok = np.allclose(freqs, exact, rtol=1e-8)
    print("\n" + ("✓ Frequencies match the closed-form solution" if ok else "✗ Frequency mismatch"))


if __name__ == "__main__":
    main()
