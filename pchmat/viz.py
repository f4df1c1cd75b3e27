# pchmat/viz.py
"""
VISUALIZATION: MATRIX SPARSITY PLOTS
====================================

A spy plot is the quickest sanity check on an extracted matrix: it should be
symmetric, and the non-zero pattern should follow the model's connectivity.
Optional grid lines mark where each node's DOFs start.
"""

import os
from typing import Optional

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np

from .kernel.dof import DofTable

COLORS = {
    'entry': '#2C3E50',         # Dark blue-gray
    'node_grid': '#BDC3C7',     # Light gray
    'background': '#FAFAFA',
}


def plot_sparsity(
    matrix: np.ndarray,
    outpath: str,
    table: Optional[DofTable] = None,
    title: Optional[str] = None,
    precision: float = 0.0
) -> str:
    """
    Save a spy plot of the non-zero entries of a matrix.

    Parameters:
    -----------
    matrix : np.ndarray
        Square matrix to plot
    outpath : str
        Output image path (.png, .pdf, ...)
    table : DofTable, optional
        When given, draw a line at the first DOF of every node
    title : str, optional
        Plot title (default: size and number of non-zeros)
    precision : float
        Entries with |value| <= precision are treated as zero

    Returns:
    --------
    str
        The path written
    """
    n = matrix.shape[0]
    nnz = int(np.count_nonzero(np.abs(matrix) > precision))

    fig, ax = plt.subplots(figsize=(6, 6))
    fig.patch.set_facecolor(COLORS['background'])

    marker = max(0.5, min(6.0, 300.0 / max(n, 1)))
    ax.spy(matrix, precision=precision, markersize=marker, color=COLORS['entry'])

    # Node boundaries (skip the first node, its offset is 0)
    if table is not None and len(table) > 1 and len(table) <= 200:
        for offset in list(table.offsets().values())[1:]:
            ax.axhline(offset - 0.5, color=COLORS['node_grid'], linewidth=0.5, zorder=0)
            ax.axvline(offset - 0.5, color=COLORS['node_grid'], linewidth=0.5, zorder=0)

    ax.set_title(title or f"{n} x {n}, {nnz} non-zeros")
    ax.set_xlabel("Global DOF")
    ax.set_ylabel("Global DOF")

    outdir = os.path.dirname(outpath)
    if outdir:
        os.makedirs(outdir, exist_ok=True)

    plt.savefig(outpath, dpi=150, bbox_inches='tight', facecolor=COLORS['background'])
    plt.close(fig)

    return outpath
