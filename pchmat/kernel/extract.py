# pchmat/kernel/extract.py
"""
EXTRACTION: Dense System Matrices from Punch Files
==================================================

PURPOSE:
--------
Read the mass or stiffness matrix written as DMIG records into a dense,
symmetric numpy array indexed by global DOF.

ALGORITHM:
----------
    table = build_dof_table(path)             # pass 1: node -> DOF count
    M = zeros(ndof x ndof)
    for each record in path:                  # pass 2: RowScanner
        DMIG* <type> <node> <dof>   -> row = table.idx(node, dof)
        *     <node> <dof> <value>  -> col = table.idx(node, dof)
                                       M[row, col] = M[col, row] = value

The file stores each off-diagonal pair once, so every entry is mirrored.

USAGE:
------
    K = read_matrix("model.pch", MatrixKind.STIFFNESS)

    # Build the table once when several matrices come from the same file
    mats = read_matrices("model.pch")
    K, M = mats[MatrixKind.STIFFNESS], mats[MatrixKind.MASS]
"""

from enum import Enum
from typing import Dict, Iterable, Optional

import numpy as np

from ..config import CONFIG
from ..log import get_logger
from .dof import DofTable, build_dof_table, dofs_before
from .records import PchError, PunchFormatError, tokenize, locate
from .scan import RowScanner

logger = get_logger(__name__)


class MatrixKind(Enum):
    """Which system matrix to extract."""
    MASS = "MASS"
    STIFFNESS = "STIFFNESS"

    @property
    def identifier(self) -> str:
        """Matrix name used on DMIG* records ("MAAX" / "KAAX")."""
        return CONFIG.identifiers[self.value]

    @classmethod
    def from_name(cls, name: str) -> "MatrixKind":
        """
        Look up a kind by name, short symbol or file identifier.

        >>> MatrixKind.from_name("k")
        <MatrixKind.STIFFNESS: 'STIFFNESS'>
        >>> MatrixKind.from_name("MAAX")
        <MatrixKind.MASS: 'MASS'>
        """
        key = name.strip().upper()
        key = KIND_ALIASES.get(key, key)
        for kind in cls:
            if key in (kind.value, kind.identifier.upper()):
                return kind
        raise ValueError(f"Unknown matrix kind: {name!r}")


# Short names accepted by MatrixKind.from_name
KIND_ALIASES = {'M': 'MASS', 'K': 'STIFFNESS', 'STIF': 'STIFFNESS'}


def allocate_matrix(table: DofTable) -> np.ndarray:
    """
    Zero-initialized square matrix sized from the DOF table.

    The size is the offset of the last node plus its own DOF count.

    Raises:
        PunchFormatError: If the table holds no nodes
    """
    if len(table) == 0:
        raise PunchFormatError("DOF table is empty; no DMIG* column headers found")
    last = table.nodes[-1]
    ndof = dofs_before(last, table) + table[last]
    return np.zeros((ndof, ndof), dtype=float)


def fill_matrix(
    path,
    kind: MatrixKind,
    table: DofTable,
    strict: Optional[bool] = None
) -> np.ndarray:
    """
    Second pass: read one matrix from path using a prebuilt DOF table.

    Parameters:
    -----------
    path : str or os.PathLike
        Punch file
    kind : MatrixKind
        Matrix to extract
    table : DofTable
        DOF table of the same file (see build_dof_table)
    strict : bool, optional
        Fail on references to nodes absent from the table
        (default CONFIG.strict_references)

    Returns:
    --------
    np.ndarray
        Dense symmetric matrix, shape (ndof, ndof)

    Raises:
    -------
    OSError
        If the file cannot be opened
    PunchFormatError
        If a record is malformed
    NodeReferenceError
        In strict mode, if a record references an unknown node or DOF
    """
    if strict is None:
        strict = CONFIG.strict_references

    matrix = allocate_matrix(table)
    scanner = RowScanner(kind.identifier, table, strict=strict)
    n_entries = 0

    with open(path, 'r') as f:
        for line_no, line in enumerate(f, start=1):
            try:
                entry = scanner.feed(tokenize(line))
            except PchError as err:
                located = locate(err, path, line_no)
                if located is err:
                    raise
                raise located from err

            if entry is None:
                continue
            matrix[entry.row, entry.col] = entry.value
            matrix[entry.col, entry.row] = entry.value
            n_entries += 1

    if n_entries == 0:
        logger.debug("%s: no %s records, returning zero matrix", path, kind.identifier)
    else:
        logger.debug("%s: %d %s entries read into %dx%d matrix",
                     path, n_entries, kind.identifier, *matrix.shape)

    return matrix


def read_matrix(path, kind: MatrixKind, strict: Optional[bool] = None) -> np.ndarray:
    """
    Extract the requested system matrix (mass or stiffness) from a punch file.

    Builds a fresh DOF table (pass 1) and then fills the matrix (pass 2).

    Example:
    --------
        DMIG*           KAAX                 546       3
        *                    547       2         5.26D3

    row = dofs_before(546) + 3 - 1
    col = dofs_before(547) + 2 - 1
    K[row, col] = K[col, row] = 5260.0
    """
    table = build_dof_table(path)
    return fill_matrix(path, kind, table, strict=strict)


def read_matrices(
    path,
    kinds: Iterable[MatrixKind] = (MatrixKind.MASS, MatrixKind.STIFFNESS),
    table: Optional[DofTable] = None,
    strict: Optional[bool] = None
) -> Dict[MatrixKind, np.ndarray]:
    """
    Extract several matrices from one file, building the DOF table only once.

    Returns:
        {kind: matrix} for every requested kind
    """
    if table is None:
        table = build_dof_table(path)
    return {kind: fill_matrix(path, kind, table, strict=strict) for kind in kinds}
