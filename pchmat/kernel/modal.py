# pchmat/kernel/modal.py
"""
MODAL CHECK: Natural Frequencies of an Extracted K, M Pair
==========================================================

Once both system matrices are read from the same punch file, the quickest
physical check is the eigenproblem

    K·φ = ω²·M·φ

Punch files often carry DOFs with no mass at all (scalar points used for
stiffness-only springs, rotations of lumped masses). They make M singular and
have to leave the problem first. natural_frequencies() can do this itself
(drop_massless=True), or the caller can pass them as fixed_dofs.
"""

from typing import Iterable, List, Tuple

import numpy as np
from scipy.linalg import eigh


def massless_dofs(M: np.ndarray, tol: float = 0.0) -> List[int]:
    """Global DOF indices whose diagonal mass is <= tol."""
    return [int(i) for i in np.flatnonzero(np.diag(M) <= tol)]


def _active_dofs(ndof: int, excluded: Iterable[int]) -> np.ndarray:
    keep = np.ones(ndof, dtype=bool)
    keep[list(excluded)] = False
    return np.flatnonzero(keep)


def natural_frequencies(
    K: np.ndarray,
    M: np.ndarray,
    fixed_dofs: Iterable[int] = (),
    n_modes: int = 5,
    drop_massless: bool = False,
    mass_tol: float = 0.0
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Lowest natural frequencies and mode shapes of an extracted system.

    Parameters:
    -----------
    K, M : np.ndarray
        Stiffness and mass matrices, same square shape
    fixed_dofs : Iterable[int]
        Global DOFs held at zero
    n_modes : int
        Number of modes wanted (capped at the number of active DOFs)
    drop_massless : bool
        Also remove every DOF whose diagonal mass is <= mass_tol
    mass_tol : float
        Threshold used by drop_massless

    Returns:
    --------
    frequencies_hz : np.ndarray
        Ascending, in Hz
    mode_shapes : np.ndarray
        One column per mode over the active DOFs (n_active x n_modes)

    Raises:
    -------
    ValueError
        Mismatched shapes, nothing left to solve, a mass matrix that is
        not positive on the active DOFs, or a failed eigensolve
    """
    if K.ndim != 2 or K.shape[0] != K.shape[1] or K.shape != M.shape:
        raise ValueError(f"K {K.shape} and M {M.shape} must be square and the same size")

    excluded = set(fixed_dofs)
    if drop_massless:
        excluded.update(massless_dofs(M, mass_tol))

    active = _active_dofs(K.shape[0], excluded)
    if active.size == 0:
        raise ValueError("No free DOFs - cannot compute modes")

    sub = np.ix_(active, active)
    K_a, M_a = K[sub], M[sub]
    if np.any(np.diag(M_a) <= 0):
        raise ValueError("Mass matrix has non-positive diagonal entries")

    last = min(n_modes, active.size) - 1
    try:
        omega_sq, shapes = eigh(K_a, M_a, subset_by_index=[0, last])
    except np.linalg.LinAlgError as e:
        raise ValueError(f"Eigenvalue solve failed: {e}") from e

    # Round-off can leave rigid-body modes slightly negative
    frequencies_hz = np.sqrt(np.clip(omega_sq, 0.0, None)) / (2.0 * np.pi)
    return frequencies_hz, shapes
