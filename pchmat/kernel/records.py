# pchmat/kernel/records.py
"""
PUNCH RECORDS: Tokenizing and Parsing DMIG Lines
================================================

PURPOSE:
--------
Every pass over a punch file looks at one line at a time and only cares about
the leading keyword and a handful of fields after it:

    SPOINT       82
    DMIG    KAAX           0       6       2       0                       6
    DMIG*   KAAX                 546       3
    *                    547       2         5.26D3

This module turns raw lines into token lists and token strings into numbers,
and defines the errors raised when that fails. Nothing here touches files.

FORTRAN REALS:
--------------
Double-precision values are written with 'D' as the exponent marker
("5.26D3", "1.0D+2"). Python's float() only understands 'E', so every 'D' is
replaced before parsing.
"""

from typing import List, Optional, Sequence

from ..config import CONFIG


class PchError(RuntimeError):
    """
    Base class for errors raised while reading punch files.

    path and line_no locate the offending record when known; the raw
    message is kept in .message.
    """

    def __init__(self, message: str, path: Optional[str] = None, line_no: Optional[int] = None):
        self.message = message
        self.path = path
        self.line_no = line_no
        if path is not None and line_no is not None:
            message = f"{path}:{line_no}: {message}"
        elif path is not None:
            message = f"{path}: {message}"
        super().__init__(message)


class PunchFormatError(PchError, ValueError):
    """Raised when a record is missing a field or a field fails to parse."""
    pass


class NodeReferenceError(PchError, KeyError):
    """Raised when a record references a node (or DOF) missing from the DOF table."""

    def __str__(self):
        # KeyError quotes its argument; show the message as written
        return str(self.args[0]) if self.args else ''


def tokenize(line: str) -> List[str]:
    """Split a punch line into whitespace-separated tokens."""
    return line.split()


def keyword(tokens: Sequence[str]) -> str:
    """Leading token of a record, or '' for a blank line."""
    return tokens[0] if tokens else ''


def require_fields(tokens: Sequence[str], n: int, record: str) -> List[str]:
    """
    Return the n tokens following the keyword.

    Raises:
        PunchFormatError: If the record has fewer than n fields
    """
    fields = list(tokens[1:1 + n])
    if len(fields) < n:
        raise PunchFormatError(
            f"{record} record needs {n} fields after the keyword, got {len(fields)}"
        )
    return fields


def parse_int(token: str, field: str = "integer") -> int:
    """
    Parse an integer field.

    Raises:
        PunchFormatError: If the token is not an integer literal
    """
    try:
        return int(token)
    except ValueError as err:
        raise PunchFormatError(f"invalid {field} field {token!r}") from err


def parse_real(token: str) -> float:
    """
    Parse a real field written in Fortran notation.

    Examples:
    ---------
    >>> parse_real("5.26D3")
    5260.0
    >>> parse_real("1.0D+2")
    100.0
    >>> parse_real("-2.5E-1")
    -0.25
    """
    text = token.replace(CONFIG.exponent_marker, 'E')
    try:
        return float(text)
    except ValueError as err:
        raise PunchFormatError(f"invalid real field {token!r}") from err


def locate(err: PchError, path, line_no: int) -> PchError:
    """Return err (same type) with the file name and line number attached, if missing."""
    if err.line_no is not None:
        return err
    return type(err)(err.message, str(path), line_no)
