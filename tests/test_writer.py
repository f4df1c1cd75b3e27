# tests/test_writer.py
"""
Test writing symmetric matrices as DMIG records.
"""

import numpy as np
import pytest

from pchmat import DofTable, MatrixKind, build_dof_table, read_matrices, write_punch


def test_written_file_layout(tmp_path):
    table = DofTable({82: 1, 546: 3})
    K = np.zeros((4, 4))
    K[0, 0] = 100.0
    K[1, 3] = K[3, 1] = -2.5

    path = tmp_path / "out.pch"
    write_punch(path, {MatrixKind.STIFFNESS: K}, table)
    lines = path.read_text().splitlines()

    assert lines[0].split() == ["SPOINT", "82"]
    assert lines[1].split() == ["DMIG", "KAAX", "0", "6", "2", "0", "4"]
    # Scalar point header uses component 0, every column gets a header
    headers = [line.split() for line in lines if line.startswith("DMIG*")]
    assert headers == [
        ["DMIG*", "KAAX", "82", "0"],
        ["DMIG*", "KAAX", "546", "1"],
        ["DMIG*", "KAAX", "546", "2"],
        ["DMIG*", "KAAX", "546", "3"],
    ]
    # Lower triangle only: -2.5 appears once
    entries = [line.split() for line in lines if line.startswith("* ")]
    assert ["*", "82", "0", "1.000000000D+02"] in entries
    assert ["*", "546", "3", "-2.500000000D+00"] in entries
    assert len(entries) == 2


def test_read_back_rebuilds_table_and_matrices(two_matrix_pch, tmp_path):
    """
    Writing what was read and reading it again gives the same table and
    the same matrices.
    """
    table = build_dof_table(two_matrix_pch)
    mats = read_matrices(two_matrix_pch, table=table)

    path = tmp_path / "copy.pch"
    write_punch(path, mats, table)

    table2 = build_dof_table(path)
    assert table2.counts_by_node == table.counts_by_node
    assert table2.declared_ndof == table.ndof()

    mats2 = read_matrices(path, table=table2)
    for kind in mats:
        np.testing.assert_allclose(mats2[kind], mats[kind], rtol=1e-9)


def test_rejects_bad_matrices(tmp_path):
    table = DofTable({1: 2})

    with pytest.raises(ValueError, match="not symmetric"):
        write_punch(tmp_path / "a.pch", {MatrixKind.MASS: np.array([[1.0, 2.0], [0.0, 1.0]])}, table)

    with pytest.raises(ValueError, match="does not match"):
        write_punch(tmp_path / "b.pch", {MatrixKind.MASS: np.eye(3)}, table)


def test_extreme_exponents_keep_fields_apart(tmp_path):
    """
    A three-digit exponent fills 17 columns ("-1.000000000D-100"). The value
    must still come out as its own field, not glued to the component.
    """
    table = DofTable({1: 2})
    K = np.array([[1.0e+100, -1.0e-100],
                  [-1.0e-100, -1.0e+100]])

    path = tmp_path / "extreme.pch"
    write_punch(path, {MatrixKind.STIFFNESS: K}, table)

    entries = [line.split() for line in path.read_text().splitlines() if line.startswith("* ")]
    assert ["*", "1", "2", "-1.000000000D-100"] in entries
    assert all(len(fields) == 4 for fields in entries)

    K2 = read_matrices(path, kinds=[MatrixKind.STIFFNESS])[MatrixKind.STIFFNESS]
    np.testing.assert_array_equal(K2, K)
    print(f"✓ Read back: {K2.ravel()}")
