from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = "[%(levelname)s] %(asctime)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_logger = logging.getLogger("padstore")


def setup_logging(level: str = "INFO", log_file: Optional[Path] = None) -> None:
    """Configure the `padstore` logger hierarchy for console (and optional file) output.

    Safe to call more than once; existing handlers installed by a previous call
    are replaced.
    """
    for h in list(_logger.handlers):
        _logger.removeHandler(h)

    fmt = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    stream = logging.StreamHandler(sys.stdout)
    stream.setFormatter(fmt)
    _logger.addHandler(stream)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(fmt)
        _logger.addHandler(fh)

    resolved = logging.getLevelName(level.upper())
    _logger.setLevel(resolved if isinstance(resolved, int) else logging.INFO)


def console(msg: str) -> None:
    """Emit an INFO line on the service logger."""
    _logger.info(msg)


def log_exception(prefix: str, exc: BaseException) -> None:
    _logger.error("%s: %s", prefix, exc)
