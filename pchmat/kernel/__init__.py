# pchmat/kernel - Punch-file reading core
"""
KERNEL: FROM PUNCH RECORDS TO SYSTEM MATRICES
=============================================

Everything needed to turn the DMIG records of a punch file into dense
matrices:

- records.py   tokenizing, number parsing, error types
- dof.py       DofTable: node ID -> DOF count, global DOF indexing
- scan.py      RowScanner: IDLE / ROW_ACTIVE state machine over records
- extract.py   read_matrix / read_matrices / fill_matrix
- modal.py     natural frequencies of an extracted K, M pair
"""

from .records import PchError, PunchFormatError, NodeReferenceError, parse_real
from .dof import DofTable, build_dof_table, dofs_before
from .scan import RowScanner, ScanState, Entry
from .extract import MatrixKind, read_matrix, read_matrices, fill_matrix
from .modal import natural_frequencies, massless_dofs

__all__ = [
    'PchError', 'PunchFormatError', 'NodeReferenceError', 'parse_real',
    'DofTable', 'build_dof_table', 'dofs_before',
    'RowScanner', 'ScanState', 'Entry',
    'MatrixKind', 'read_matrix', 'read_matrices', 'fill_matrix',
    'natural_frequencies', 'massless_dofs',
]
