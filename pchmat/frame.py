# pchmat/frame.py
"""
LABELLED MATRICES AND EXPORT
============================

A bare numpy matrix loses track of which (node, dof) pair each row belongs
to. to_dataframe() puts the labels back as a pandas MultiIndex:

                 id   82  546            547
                 dof   1    1    2    3    1    2 ...
    id  dof
    82  1            ...
    546 1            ...

export_matrix() writes an extracted matrix to disk:
    .csv  labelled frame (two header rows, two index columns)
    .npz  raw matrix plus the DOF table (nodes, counts)
"""

from pathlib import Path

import numpy as np
import pandas as pd

from .kernel.dof import DofTable

# File suffixes accepted by export_matrix
EXPORT_FORMATS = ('.csv', '.npz')


def dof_index(table: DofTable) -> pd.MultiIndex:
    """MultiIndex of (id, dof) pairs in global DOF order."""
    return pd.MultiIndex.from_tuples(table.labels(), names=["id", "dof"])


def to_dataframe(matrix: np.ndarray, table: DofTable) -> pd.DataFrame:
    """
    Wrap an extracted matrix in a DataFrame labelled by (node, dof).

    Raises:
        ValueError: If the matrix size does not match the table
    """
    n = table.ndof()
    if matrix.shape != (n, n):
        raise ValueError(f"Matrix shape {matrix.shape} does not match DOF table size {n}")
    index = dof_index(table)
    return pd.DataFrame(matrix, index=index, columns=index)


def export_matrix(matrix: np.ndarray, table: DofTable, path) -> Path:
    """
    Write a matrix to .csv or .npz, chosen by the file suffix.

    Returns:
        The path written

    Raises:
        ValueError: For any other suffix
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == '.csv':
        to_dataframe(matrix, table).to_csv(path)
    elif suffix == '.npz':
        np.savez(
            path,
            matrix=matrix,
            nodes=np.array(table.nodes, dtype=int),
            counts=np.array(table.counts, dtype=int),
        )
    else:
        raise ValueError(f"Unsupported export format {suffix!r} (use {' or '.join(EXPORT_FORMATS)})")

    return path


def load_npz(path):
    """
    Read back an .npz export.

    Returns:
        (matrix, table)
    """
    with np.load(path) as data:
        matrix = data['matrix']
        table = DofTable({int(n): int(c) for n, c in zip(data['nodes'], data['counts'])})
    return matrix, table
