# pchmat/config.py
"""
Extraction configuration and defaults.
"""

import logging
from dataclasses import dataclass
from typing import Dict


@dataclass
class ExtractConfig:
    """Global extraction configuration."""

    # Package metadata
    app_name: str = "pchmat"
    app_subtitle: str = "DMIG Matrix Extractor"

    # Punch-file record keywords
    spoint_token: str = "SPOINT"
    header_token: str = "DMIG"
    column_token: str = "DMIG*"
    entry_token: str = "*"

    # Fortran double-precision exponent marker, replaced by 'E' before parsing
    exponent_marker: str = "D"

    # Matrix kind name -> identifier used on DMIG* records
    identifiers: Dict[str, str] = None

    # Raise NodeReferenceError for records naming nodes absent from the table.
    # False restores the old "sum of all DOFs" offset for unknown nodes.
    strict_references: bool = True

    # Modal analysis
    default_n_modes: int = 5

    # Logging
    log_level: int = logging.INFO

    def __post_init__(self):
        if self.identifiers is None:
            self.identifiers = {'MASS': 'MAAX', 'STIFFNESS': 'KAAX'}


# Global config instance
CONFIG = ExtractConfig()
