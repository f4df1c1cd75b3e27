# tests/test_frame_export.py
"""
Test the (node, dof) labelled DataFrame view and the CSV/NPZ exports.
"""

import numpy as np
import pandas as pd
import pytest

from pchmat import DofTable, MatrixKind, read_matrix, build_dof_table
from pchmat.frame import dof_index, to_dataframe, export_matrix, load_npz


def make_table():
    return DofTable({547: 2, 82: 1, 546: 3})


def test_dof_index():
    table = make_table()
    index = dof_index(table)

    assert isinstance(index, pd.MultiIndex)
    assert index.names == ["id", "dof"]
    assert list(index) == [(82, 1), (546, 1), (546, 2), (546, 3), (547, 1), (547, 2)]


def test_dataframe_lookup_by_node_and_dof(two_matrix_pch):
    """
    The DataFrame answers "what couples node 546 DOF 3 with node 547 DOF 2?"
    without computing global indices by hand.
    """
    table = build_dof_table(two_matrix_pch)
    K = read_matrix(two_matrix_pch, MatrixKind.STIFFNESS)

    df = to_dataframe(K, table)

    assert df.shape == (6, 6)
    assert df.loc[(546, 3), (547, 2)] == 5260.0
    assert df.loc[(547, 2), (546, 3)] == 5260.0
    assert df.loc[(82, 1), (82, 1)] == 100.0


def test_dataframe_size_mismatch():
    table = make_table()
    with pytest.raises(ValueError, match="does not match"):
        to_dataframe(np.zeros((3, 3)), table)


def test_export_csv(two_matrix_pch, tmp_path):
    table = build_dof_table(two_matrix_pch)
    K = read_matrix(two_matrix_pch, MatrixKind.STIFFNESS)

    out = export_matrix(K, table, tmp_path / "K.csv")
    assert out.exists()

    df = pd.read_csv(out, header=[0, 1], index_col=[0, 1])
    np.testing.assert_allclose(df.values, K)
    assert list(df.index) == table.labels()


def test_export_npz(two_matrix_pch, tmp_path):
    table = build_dof_table(two_matrix_pch)
    M = read_matrix(two_matrix_pch, MatrixKind.MASS)

    out = export_matrix(M, table, tmp_path / "M.npz")
    matrix, table2 = load_npz(out)

    np.testing.assert_array_equal(matrix, M)
    assert table2.counts_by_node == table.counts_by_node


def test_export_unknown_format(tmp_path):
    table = make_table()
    with pytest.raises(ValueError, match="Unsupported export format"):
        export_matrix(np.zeros((6, 6)), table, tmp_path / "K.mat")
