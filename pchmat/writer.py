# pchmat/writer.py
"""
PUNCH WRITER: Symmetric Matrices as DMIG Records
================================================

Writes dense symmetric matrices back out in the record layout read_matrix()
understands, one DMIG block per matrix:

    SPOINT        82
    DMIG    KAAX           0       6       2       0               6
    DMIG*   KAAX                              82               0
    *                     82               0  1.000000000D+02
    DMIG*   KAAX                             546               1
    ...

Single-DOF nodes are written as scalar points (SPOINT, component 0). Every
column gets a DMIG* header, even when it holds no entries on or below the
diagonal, so that reading the file back rebuilds the same DOF table. Only the
lower triangle (rows >= column) is written; the reader mirrors it. Values are
always preceded by a blank so they never run into the component field.
"""

from typing import Dict

import numpy as np

from .kernel.dof import DofTable
from .kernel.extract import MatrixKind


def _check(matrix: np.ndarray, table: DofTable, name: str) -> None:
    n = table.ndof()
    if matrix.shape != (n, n):
        raise ValueError(f"{name}: shape {matrix.shape} does not match DOF table size {n}")
    if not np.allclose(matrix, matrix.T):
        raise ValueError(f"{name}: matrix is not symmetric")


def write_punch(path, matrices: Dict[MatrixKind, np.ndarray], table: DofTable) -> None:
    """
    Write one or more symmetric matrices to a punch file.

    Parameters:
    -----------
    path : str or os.PathLike
        Output file (overwritten)
    matrices : Dict[MatrixKind, np.ndarray]
        Matrices to write, all sized table.ndof()
    table : DofTable
        Layout of the matrices

    Raises:
    -------
    ValueError
        If a matrix is not square, symmetric and sized to the table
    """
    for kind, matrix in matrices.items():
        _check(matrix, table, kind.identifier)

    labels = table.labels()
    # Scalar points carry component 0 on DMIG records
    components = [0 if table[nid] == 1 else dof for nid, dof in labels]
    ndof = table.ndof()

    with open(path, 'w') as f:
        for nid in table.nodes:
            if table[nid] == 1:
                f.write(f"{'SPOINT':<8s}{nid:8d}\n")

        for kind, matrix in matrices.items():
            name = kind.identifier
            #        DMIG  NAME  0    IFO  TIN  TOUT        NCOL
            f.write(f"{'DMIG':<8s}{name:<8s}{0:8d}{6:8d}{2:8d}{0:8d}{'':16s}{ndof:8d}\n")

            for col in range(ndof):
                gj = labels[col][0]
                f.write(f"{'DMIG*':<8s}{name:<16s}{gj:16d}{components[col]:16d}\n")
                for row in range(col, ndof):
                    num = matrix[row, col]
                    if num != 0.0:
                        # "-1.000000000D-100" fills 17 columns; keep a blank before it
                        num_str = f" {num:16.9E}".replace("E", "D")
                        f.write(f"{'*':<8s}{labels[row][0]:16d}{components[row]:16d}{num_str}\n")
