# pchmat - DMIG System Matrix Extraction
"""
PCHMAT: System Matrices from Punch Files
========================================

Reads the mass (MAAX) and stiffness (KAAX) matrices written as DMIG records
in a punch file into dense numpy arrays indexed by global DOF.

ARCHITECTURE:
-------------
    kernel/         Record parsing, DOF table, row scanner, extraction, modal
    frame.py        pandas (node, dof) labelled view, CSV/NPZ export
    writer.py       Symmetric matrices back out as DMIG records
    viz.py          Sparsity plots
    cli.py          `pchmat` command
    config.py       Global configuration (CONFIG)
    log.py          Logger setup
"""

# Version
__version__ = "0.1.0"

# Re-export kernel components for convenience
from .kernel import (
    MatrixKind, read_matrix, read_matrices, fill_matrix,
    DofTable, build_dof_table, dofs_before,
    PchError, PunchFormatError, NodeReferenceError,
)
from .writer import write_punch
