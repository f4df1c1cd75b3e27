# tests/test_viz_cli.py
"""
Smoke tests for the sparsity plot and the pchmat command.
"""

import numpy as np

from pchmat import MatrixKind, build_dof_table, read_matrix
from pchmat.cli import main
from pchmat.viz import plot_sparsity


def test_plot_sparsity_writes_file(two_matrix_pch, tmp_path):
    table = build_dof_table(two_matrix_pch)
    K = read_matrix(two_matrix_pch, MatrixKind.STIFFNESS)

    out = plot_sparsity(K, str(tmp_path / "plots" / "K.png"), table=table)

    assert out.endswith("K.png")
    assert (tmp_path / "plots" / "K.png").stat().st_size > 0


def test_plot_sparsity_zero_matrix(tmp_path):
    out = plot_sparsity(np.zeros((4, 4)), str(tmp_path / "zero.png"))
    assert (tmp_path / "zero.png").exists()
    assert out == str(tmp_path / "zero.png")


def test_cli_summary(two_matrix_pch, capsys):
    code = main([str(two_matrix_pch)])
    out = capsys.readouterr().out

    assert code == 0
    assert "DOFs:           6" in out
    assert "MASS (MAAX)" in out
    assert "STIFFNESS (KAAX)" in out
    assert "Symmetric:      True" in out


def test_cli_export_both(two_matrix_pch, tmp_path, capsys):
    code = main([str(two_matrix_pch), "--export", str(tmp_path / "sys.npz"),
                 "--spy", str(tmp_path / "sys.png")])

    assert code == 0
    assert (tmp_path / "sys_kaax.npz").exists()
    assert (tmp_path / "sys_maax.npz").exists()
    assert (tmp_path / "sys_kaax.png").exists()


def test_cli_single_matrix_export(two_matrix_pch, tmp_path, capsys):
    code = main([str(two_matrix_pch), "--matrix", "stiffness", "--export", str(tmp_path / "K.csv")])

    assert code == 0
    assert (tmp_path / "K.csv").exists()
    assert "MASS (MAAX)" not in capsys.readouterr().out


def test_cli_modes(two_matrix_pch, capsys):
    code = main([str(two_matrix_pch), "--modes", "3"])
    out = capsys.readouterr().out

    assert code == 0
    assert "NATURAL FREQUENCIES" in out
    assert out.count(" Hz") == 3


def test_cli_modes_needs_both(two_matrix_pch, capsys):
    code = main([str(two_matrix_pch), "--matrix", "mass", "--modes", "3"])
    assert code == 2
    assert "--modes needs" in capsys.readouterr().err


def test_cli_errors(write_pch, tmp_path, capsys):
    assert main([str(tmp_path / "missing.pch")]) == 1
    assert "error:" in capsys.readouterr().err

    bad = write_pch("DMIG KAAX 0 6 2 0 1\nDMIG* KAAX 1 1\n* 2 1 1.0D0\n", name="bad.pch")
    assert main([str(bad)]) == 1
    assert "node 2" in capsys.readouterr().err

    # Lenient mode turns the unknown node into an out-of-range index
    assert main([str(bad), "--lenient"]) == 1
    assert "outside" in capsys.readouterr().err


def test_cli_export_errors_are_reported(two_matrix_pch, tmp_path, capsys):
    code = main([str(two_matrix_pch), "--export", str(tmp_path / "K.mat")])
    assert code == 1
    err = capsys.readouterr().err
    assert "unsupported export format '.mat'" in err
    assert not list(tmp_path.glob("K*.mat"))

    code = main([str(two_matrix_pch), "--matrix", "stiffness",
                 "--export", str(tmp_path / "nodir" / "K.csv")])
    assert code == 1
    assert "error:" in capsys.readouterr().err
