"""Logging setup for microbench.

Console output goes to stderr so that exported tables and CSV written
to stdout stay clean.  An optional file handler always records DEBUG,
which includes the per-sample execution order chosen by the engine.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Callable

_LOGGER_NAME = "microbench"
_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
_CONSOLE_FORMAT = "%(message)s"
_VERBOSE_CONSOLE_FORMAT = "%(levelname)-8s %(message)s"


def setup_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure and return the microbench logger.

    Args:
        verbose: Console level DEBUG.
        quiet: Console level WARNING.  Ignored if *verbose* is True.
        log_file: If given, also log everything at DEBUG to this path.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    # Allow reconfiguration (the CLI may be invoked repeatedly in tests).
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    if verbose:
        console.setLevel(logging.DEBUG)
        console.setFormatter(logging.Formatter(_VERBOSE_CONSOLE_FORMAT))
    else:
        console.setLevel(logging.WARNING if quiet else logging.INFO)
        console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(fh)

    return logger


def progress_to_log(
    logger: logging.Logger | None = None,
    level: int = logging.INFO,
) -> Callable[[str], None]:
    """Adapt a logger into a progress sink for ``Benchmark.run``."""
    target = logger or logging.getLogger(_LOGGER_NAME)

    def _sink(message: str) -> None:
        target.log(level, message)

    return _sink
