# pchmat/cli.py
"""
PCHMAT COMMAND LINE
===================

Extract DMIG system matrices from a punch file and report on them.

EXAMPLE USAGE:
--------------
    pchmat model.pch
    pchmat model.pch --matrix stiffness --export artifacts/K.csv
    pchmat model.pch --matrix both --modes 6 --spy artifacts/K.png
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import numpy as np

from . import __version__
from .config import CONFIG
from .frame import EXPORT_FORMATS, export_matrix
from .kernel import (
    MatrixKind, PchError, build_dof_table, read_matrices,
    natural_frequencies, massless_dofs,
)
from .log import set_level
from .viz import plot_sparsity


def print_header(text: str):
    """Print a formatted section header."""
    print("\n" + "=" * 60)
    print(f"  {text}")
    print("=" * 60)


def _kinds(choice: str) -> List[MatrixKind]:
    if choice == 'both':
        return [MatrixKind.MASS, MatrixKind.STIFFNESS]
    return [MatrixKind.from_name(choice)]


def _with_suffix_tag(path: Path, kind: MatrixKind, n_kinds: int) -> Path:
    # One output file per matrix when several are extracted: K.csv -> K_kaax.csv
    if n_kinds == 1:
        return path
    return path.with_name(f"{path.stem}_{kind.identifier.lower()}{path.suffix}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='pchmat',
        description='Extract DMIG mass/stiffness matrices from a punch file',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pchmat model.pch --matrix stiffness --export K.csv
  pchmat model.pch --matrix both --modes 6
        """
    )
    parser.add_argument('pch', type=Path, help='Punch (.pch) file to read')
    parser.add_argument(
        '--matrix',
        choices=['mass', 'stiffness', 'both'],
        default='both',
        help='Matrix to extract (default: both)'
    )
    parser.add_argument(
        '--export',
        type=Path,
        default=None,
        help='Write the matrix to .csv or .npz (tagged per matrix when extracting both)'
    )
    parser.add_argument(
        '--spy',
        type=Path,
        default=None,
        help='Save a sparsity plot (tagged per matrix when extracting both)'
    )
    parser.add_argument(
        '--modes',
        type=int,
        default=0,
        help=f'Print the first N natural frequencies (needs both matrices, e.g. {CONFIG.default_n_modes})'
    )
    parser.add_argument(
        '--lenient',
        action='store_true',
        help='Resolve unknown node references to the end of the DOF table instead of failing'
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        set_level(logging.DEBUG)

    kinds = _kinds(args.matrix)
    if args.modes > 0 and len(kinds) != 2:
        print("error: --modes needs --matrix both", file=sys.stderr)
        return 2

    if args.export is not None and args.export.suffix.lower() not in EXPORT_FORMATS:
        print(f"error: unsupported export format {args.export.suffix!r} "
              f"(use {' or '.join(EXPORT_FORMATS)})", file=sys.stderr)
        return 1

    try:
        table = build_dof_table(args.pch)
        matrices = read_matrices(args.pch, kinds, table=table, strict=not args.lenient)
    except (PchError, OSError) as err:
        print(f"error: {err}", file=sys.stderr)
        return 1

    print_header(f"{CONFIG.app_name.upper()}: {args.pch.name}")
    print(f"Nodes:          {len(table)}")
    print(f"DOFs:           {table.ndof()}")
    if table.declared_ndof is not None:
        print(f"Declared DOFs:  {table.declared_ndof}")

    for kind, matrix in matrices.items():
        print_header(f"{kind.value} ({kind.identifier})")
        print(f"Shape:          {matrix.shape[0]} x {matrix.shape[1]}")
        print(f"Non-zeros:      {np.count_nonzero(matrix)}")
        print(f"Symmetric:      {np.array_equal(matrix, matrix.T)}")
        print(f"Max |value|:    {np.max(np.abs(matrix)):.6g}")

        try:
            if args.export is not None:
                out = export_matrix(matrix, table, _with_suffix_tag(args.export, kind, len(kinds)))
                print(f"Exported:       {out}")
            if args.spy is not None:
                out = plot_sparsity(
                    matrix, str(_with_suffix_tag(args.spy, kind, len(kinds))), table=table,
                    title=f"{kind.identifier}: {matrix.shape[0]} DOFs"
                )
                print(f"Sparsity plot:  {out}")
        except (ValueError, OSError) as err:
            print(f"error: {err}", file=sys.stderr)
            return 1

    if args.modes > 0:
        K = matrices[MatrixKind.STIFFNESS]
        M = matrices[MatrixKind.MASS]
        n_massless = len(massless_dofs(M))
        print_header("NATURAL FREQUENCIES")
        if n_massless:
            print(f"Dropping {n_massless} massless DOFs")
        try:
            freqs, _ = natural_frequencies(K, M, n_modes=args.modes, drop_massless=True)
        except ValueError as err:
            print(f"error: {err}", file=sys.stderr)
            return 1
        for i, f in enumerate(freqs, start=1):
            print(f"  Mode {i:3d}: {f:12.4f} Hz")

    return 0


if __name__ == '__main__':
    sys.exit(main())
