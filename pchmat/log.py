# pchmat/log.py
"""Standardised loggers for pchmat modules."""

import logging
import os
import sys
from typing import Optional

from .config import CONFIG


def _default_filename_for(name: str) -> str:
    # 'pchmat.kernel.extract' -> 'pchmat_kernel_extract.log'
    return f"{name.replace('.', '_')}.log"


def get_logger(
    name: str,
    outdir: Optional[str] = None,
    filename: Optional[str] = None,
    level: Optional[int] = None,
    force: bool = False
) -> logging.Logger:
    """
    Return a configured logger.

    The logger always writes to stdout. When outdir is given, messages are
    also written to a logfile inside it.

    Args:
        name: Logger name, usually ``__name__``
        outdir: Directory for the logfile (None = stdout only)
        filename: Logfile name (default derived from name)
        level: Log level (default CONFIG.log_level)
        force: Replace existing handlers so the logger can be reconfigured

    Returns:
        The logger object
    """
    logger = logging.getLogger(name)

    if force:
        for h in list(logger.handlers):
            logger.removeHandler(h)
            h.close()

    # Already configured
    if logger.handlers:
        return logger

    logger.setLevel(CONFIG.log_level if level is None else level)

    sh = logging.StreamHandler(sys.stdout)
    sh.setFormatter(logging.Formatter('%(message)s'))
    logger.addHandler(sh)

    if outdir is not None:
        os.makedirs(outdir, exist_ok=True)
        filepath = os.path.join(outdir, filename or _default_filename_for(name))
        fh = logging.FileHandler(filepath)
        fh.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(name)s: %(message)s'))
        logger.addHandler(fh)

    logger.propagate = False

    return logger


def set_level(level: int) -> None:
    """Set the level of every pchmat logger created so far."""
    CONFIG.log_level = level
    for name, logger in logging.Logger.manager.loggerDict.items():
        if name.startswith('pchmat') and isinstance(logger, logging.Logger):
            logger.setLevel(level)
