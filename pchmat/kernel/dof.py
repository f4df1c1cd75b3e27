# pchmat/kernel/dof.py
"""
DOF TABLE: Node-Ordered Degree of Freedom Indexing
==================================================

PURPOSE:
--------
This module handles the mapping from (node_id, local_dof) to global DOF indices
for matrices read from punch files. Unlike a model where every node carries the
same number of DOFs, a DMIG matrix mixes node types:

    SPOINT 82           -> 1 DOF  (scalar point)
    DMIG* KAAX 546 3    -> node 546 has (at least) 3 DOFs
    DMIG* KAAX 547 6    -> node 547 has 6 DOFs

The global layout is nodes in ASCENDING ID ORDER, each contributing its DOF
count. The global index of a DOF is therefore a prefix sum:

    idx(node, dof) = (sum of counts of all nodes with smaller ID) + dof - 1

Example: table {82: 1, 546: 3, 547: 6}
    idx(82, 1)  = 0
    idx(546, 1) = 1, idx(546, 3) = 3
    idx(547, 2) = 1 + 3 + 2 - 1 = 5
    ndof        = 10

USAGE:
------
    table = build_dof_table("model.pch")
    table.ndof()              # matrix dimension
    table.idx(546, 3)         # global row/column index
    dofs_before(546, table)   # offset of node 546 (old, lenient resolver)
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

from ..config import CONFIG
from ..log import get_logger
from .records import (
    PunchFormatError, NodeReferenceError,
    tokenize, keyword, require_fields, parse_int, locate,
)

logger = get_logger(__name__)


@dataclass
class DofTable:
    """
    Ordered mapping from node ID to number of DOFs.

    Lookups go through a dict; the global layout always follows ascending node
    ID, whatever order the nodes were registered in.

    Attributes:
    -----------
    counts_by_node : Dict[int, int]
        Node ID -> DOF count
    declared_ndof : int, optional
        Total DOF count read from the DMIG header line. Informational only,
        never checked against the table.

    Examples:
    ---------
    >>> table = DofTable({547: 6, 82: 1, 546: 3})
    >>> table.nodes
    [82, 546, 547]
    >>> table.idx(547, 2)
    5
    >>> table.ndof()
    10
    """
    counts_by_node: Dict[int, int] = field(default_factory=dict)
    declared_ndof: Optional[int] = None
    _offsets: Optional[Dict[int, int]] = field(default=None, init=False, repr=False, compare=False)

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def register_spoint(self, node_id: int) -> None:
        """Register a scalar point with 1 DOF. An existing entry is never downgraded."""
        if node_id not in self.counts_by_node:
            self.counts_by_node[node_id] = 1
            self._offsets = None

    def assign(self, node_id: int, n_dofs: int) -> None:
        """Set the DOF count of a node, overwriting any previous value."""
        self.counts_by_node[node_id] = n_dofs
        self._offsets = None

    # ------------------------------------------------------------------
    # Ordered views
    # ------------------------------------------------------------------

    @property
    def nodes(self) -> List[int]:
        """Node IDs in global (ascending) order."""
        return sorted(self.counts_by_node)

    @property
    def counts(self) -> List[int]:
        """DOF counts aligned with `nodes`."""
        return [self.counts_by_node[n] for n in self.nodes]

    def offsets(self) -> Dict[int, int]:
        """
        Offset of every node: number of DOFs belonging to all nodes before it.

        Computed once as an exclusive prefix sum and cached until the table
        changes.
        """
        if self._offsets is None:
            nodes = self.nodes
            counts = np.array([self.counts_by_node[n] for n in nodes], dtype=int)
            starts = np.concatenate(([0], np.cumsum(counts)[:-1])) if len(nodes) else []
            self._offsets = {n: int(s) for n, s in zip(nodes, starts)}
        return self._offsets

    def ndof(self) -> int:
        """Total number of DOFs (size of the system matrix)."""
        return int(sum(self.counts_by_node.values()))

    def __len__(self) -> int:
        return len(self.counts_by_node)

    def __contains__(self, node_id) -> bool:
        return node_id in self.counts_by_node

    def __getitem__(self, node_id: int) -> int:
        return self.counts_by_node[node_id]

    def __iter__(self) -> Iterator[int]:
        return iter(self.nodes)

    def items(self) -> List[Tuple[int, int]]:
        """(node_id, n_dofs) pairs in global order."""
        return [(n, self.counts_by_node[n]) for n in self.nodes]

    # ------------------------------------------------------------------
    # Indexing
    # ------------------------------------------------------------------

    def offset(self, node_id: int) -> int:
        """
        Number of DOFs belonging to the nodes before node_id.

        Raises:
            NodeReferenceError: If node_id is not in the table
        """
        try:
            return self.offsets()[node_id]
        except KeyError:
            raise NodeReferenceError(f"node {node_id} is not in the DOF table") from None

    def idx(self, node_id: int, local_dof: int) -> int:
        """
        Get the global DOF index for a node's local DOF.

        Parameters:
        -----------
        node_id : int
            The node identifier
        local_dof : int
            The local DOF number within the node, counted from 1.
            0 addresses the single component of a scalar point.

        Returns:
        --------
        int
            0-based row/column index in the system matrix

        Raises:
        -------
        NodeReferenceError
            If the node is unknown or local_dof exceeds its DOF count
        """
        base = self.offset(node_id)
        if local_dof == 0:
            local_dof = 1
        n_dofs = self.counts_by_node[node_id]
        if not 1 <= local_dof <= n_dofs:
            raise NodeReferenceError(
                f"DOF {local_dof} out of range for node {node_id} ({n_dofs} DOFs)"
            )
        return base + local_dof - 1

    def node_dofs(self, node_id: int) -> List[int]:
        """
        Get all global DOF indices for a single node.

        >>> DofTable({82: 1, 546: 3}).node_dofs(546)
        [1, 2, 3]
        """
        base = self.offset(node_id)
        return list(range(base, base + self.counts_by_node[node_id]))

    def labels(self) -> List[Tuple[int, int]]:
        """(node_id, local_dof) for every global index, in order."""
        return [(n, d) for n, count in self.items() for d in range(1, count + 1)]


def dofs_before(node_id: int, table: DofTable) -> int:
    """
    Given a node ID, return the number of DOFs belonging to the nodes before it.

    Walks the table in ascending node order summing DOF counts and stops when
    it reaches node_id. A node that is not in the table is never reached, so
    the result is then the sum of ALL counts (table.ndof()). DofTable.offset
    is the strict version.

    Examples:
    ---------
    >>> table = DofTable({82: 1, 546: 3, 547: 6})
    >>> dofs_before(547, table)
    4
    >>> dofs_before(999, table)
    10
    """
    dofs = 0
    for nid, count in table.items():
        if nid == node_id:
            break
        dofs += count
    return dofs


def build_dof_table(path) -> DofTable:
    """
    Build the DOF table of a punch file in a single forward scan.

    PHASE 1: up to the first DMIG header line
        - "SPOINT <id>" registers node <id> with 1 DOF (if not present yet)
        - the DMIG line's last field is kept as declared_ndof
    PHASE 2: DMIG* column headers of the first matrix
        - "DMIG* <type> <id> <dof>" sets table[<id>] = <dof> (last write wins)
        - headers with dof "0" are skipped (scalar points, already registered)
        - the next bare DMIG line ends the scan

    Parameters:
    -----------
    path : str or os.PathLike
        Punch file to read

    Returns:
    --------
    DofTable

    Raises:
    -------
    OSError
        If the file cannot be opened
    PunchFormatError
        If a field fails to parse or the file has no DMIG header line
    """
    table = DofTable()
    header_seen = False

    with open(path, 'r') as f:
        line_no = 0
        try:
            # Phase 1: scalar points up to the DMIG header
            for line in f:
                line_no += 1
                tokens = tokenize(line)
                key = keyword(tokens)

                if key == CONFIG.spoint_token:
                    node_id, = require_fields(tokens, 1, CONFIG.spoint_token)
                    table.register_spoint(parse_int(node_id, "node ID"))
                    continue

                if key == CONFIG.header_token:
                    if len(tokens) < 2:
                        raise PunchFormatError("DMIG header line has no fields")
                    table.declared_ndof = parse_int(tokens[-1], "DOF count")
                    header_seen = True
                    break

            # Phase 2: column headers of the first matrix
            for line in f:
                line_no += 1
                tokens = tokenize(line)
                key = keyword(tokens)

                if key == CONFIG.header_token:
                    break
                if key != CONFIG.column_token:
                    continue

                _, node_id, local_dof = require_fields(tokens, 3, CONFIG.column_token)
                if local_dof == "0":
                    continue
                n_dofs = parse_int(local_dof, "DOF")
                if n_dofs < 1:
                    raise PunchFormatError(f"invalid DOF field {local_dof!r} (must be >= 1)")
                table.assign(parse_int(node_id, "node ID"), n_dofs)
        except PunchFormatError as err:
            located = locate(err, path, line_no)
            if located is err:
                raise
            raise located from err

    if not header_seen:
        raise PunchFormatError("no DMIG header line found", str(path))

    if table.declared_ndof is not None and table.declared_ndof != table.ndof():
        logger.debug(
            "%s: DMIG header declares %d DOFs, table holds %d",
            path, table.declared_ndof, table.ndof()
        )
    logger.debug("%s: DOF table with %d nodes, %d DOFs", path, len(table), table.ndof())

    return table
