# pchmat/kernel/scan.py
"""
ROW SCANNER: Two-State Machine for DMIG Column Blocks
=====================================================

A DMIG matrix is written as a sequence of blocks. Each block opens with a
DMIG* header naming the matrix and one (node, dof) pair, followed by "*"
continuation records, each holding one (node, dof, value) entry:

    DMIG*   KAAX                 546       3        <- header: row (546, 3)
    *                    546       3         1.2D4  <- entry (546,3)-(546,3)
    *                    547       2         5.26D3 <- entry (546,3)-(547,2)
    DMIG*   MAAX                 546       3        <- other matrix: skip block

The scanner has two states:

    IDLE        not inside a block of the selected matrix; "*" lines ignored
    ROW_ACTIVE  inside a block; each "*" line yields one matrix entry

It consumes token lists, not files, so the pairing of headers and entries and
the matrix-type filter can be exercised directly.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from ..config import CONFIG
from .dof import DofTable, dofs_before
from .records import PunchFormatError, keyword, require_fields, parse_int, parse_real


class ScanState(Enum):
    IDLE = "idle"
    ROW_ACTIVE = "row_active"


@dataclass(frozen=True)
class Entry:
    """One matrix entry resolved to global indices."""
    row: int
    col: int
    value: float


class RowScanner:
    """
    Turns DMIG*/"*" records into global (row, col, value) entries.

    Parameters:
    -----------
    identifier : str
        Matrix name to collect ("KAAX", "MAAX", ...)
    table : DofTable
        DOF table used to resolve (node, dof) pairs
    strict : bool
        True: unknown nodes raise NodeReferenceError.
        False: unknown nodes resolve through dofs_before() (offset = all DOFs);
        indices that then fall outside the matrix raise PunchFormatError.
    """

    def __init__(self, identifier: str, table: DofTable, strict: bool = True):
        self.identifier = identifier
        self.table = table
        self.strict = strict
        self.ndof = table.ndof()
        self.state = ScanState.IDLE
        self.row: Optional[int] = None

    def reset(self) -> None:
        self.state = ScanState.IDLE
        self.row = None

    def _resolve(self, node_id: int, local_dof: int) -> int:
        if self.strict:
            return self.table.idx(node_id, local_dof)

        index = dofs_before(node_id, self.table) + max(local_dof, 1) - 1
        if not 0 <= index < self.ndof:
            raise PunchFormatError(
                f"node {node_id} DOF {local_dof} maps to index {index}, "
                f"outside the {self.ndof}x{self.ndof} matrix"
            )
        return index

    def feed(self, tokens: Sequence[str]) -> Optional[Entry]:
        """
        Advance the machine by one record.

        Returns:
            Entry for a "*" record inside an active block, otherwise None
        """
        key = keyword(tokens)

        if key == CONFIG.column_token:
            matrix_type, = require_fields(tokens, 1, CONFIG.column_token)
            if matrix_type != self.identifier:
                self.reset()
                return None

            _, node_id, local_dof = require_fields(tokens, 3, CONFIG.column_token)
            self.row = self._resolve(parse_int(node_id, "node ID"), parse_int(local_dof, "DOF"))
            self.state = ScanState.ROW_ACTIVE
            return None

        if key == CONFIG.entry_token and self.state is ScanState.ROW_ACTIVE:
            node_id, local_dof, value = require_fields(tokens, 3, CONFIG.entry_token)
            col = self._resolve(parse_int(node_id, "node ID"), parse_int(local_dof, "DOF"))
            return Entry(self.row, col, parse_real(value))

        return None
