# tests/conftest.py
"""Shared punch-file fixtures."""

import pytest


# Scalar point 82 (1 DOF), node 546 (3 DOFs), node 547 (2 DOFs) -> 6 DOFs
# Layout: 82 -> [0], 546 -> [1, 2, 3], 547 -> [4, 5]
TWO_MATRIX_PCH = """\
$ Punch file with stiffness and mass DMIG blocks
SPOINT        82
DMIG    KAAX           0       6       2       0                       6
DMIG*   KAAX                  82               0
*                     82               0         1.0D+2
DMIG*   KAAX                 546               1
*                    546               1         2.0D3
DMIG*   KAAX                 546               2
*                    546               2         3.0D3
*                    547               1        -1.5D2
DMIG*   KAAX                 546               3
*                    546               3         4.0D3
*                    547               2         5.26D3
DMIG*   KAAX                 547               1
*                    547               1         6.0D3
DMIG*   KAAX                 547               2
*                    547               2         7.0D3
DMIG    MAAX           0       6       2       0                       6
DMIG*   MAAX                  82               0
*                     82               0         1.0D0
DMIG*   MAAX                 546               1
*                    546               1         2.0D0
DMIG*   MAAX                 546               2
*                    546               2         2.0D0
DMIG*   MAAX                 546               3
*                    546               3         2.0D0
DMIG*   MAAX                 547               1
*                    547               1         3.0D0
DMIG*   MAAX                 547               2
*                    547               2         3.0D0
"""

# Stiffness only, ended by a bare DMIG line
STIFFNESS_ONLY_PCH = """\
SPOINT 82
DMIG KAAX 0 6 2 0 6
DMIG* KAAX 546 3
* 546 3 4.0D3
* 547 2 5.26D3
DMIG* KAAX 547 2
* 547 2 7.0D3
DMIG
"""


@pytest.fixture
def write_pch(tmp_path):
    """Factory: write text to a punch file under tmp_path and return its path."""
    def _write(text: str, name: str = "model.pch"):
        path = tmp_path / name
        path.write_text(text)
        return path
    return _write


@pytest.fixture
def two_matrix_pch(write_pch):
    return write_pch(TWO_MATRIX_PCH)


@pytest.fixture
def stiffness_only_pch(write_pch):
    return write_pch(STIFFNESS_ONLY_PCH)
