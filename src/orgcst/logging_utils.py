"""Logging setup for orgcst entry points."""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

PACKAGE_LOGGER_NAME = "orgcst"


def resolve_log_level(log_level: int | str) -> int:
    """Turn a numeric level or a level name such as ``"debug"`` into an int."""
    if isinstance(log_level, int):
        return log_level
    return getattr(logging, str(log_level).upper(), logging.WARNING)


def configure_logging(
    log_level: int | str,
    trace_mode: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Configure the package logger used by the command line entry point.

    Library modules only ever call ``logging.getLogger(__name__)``; handlers
    are attached here, once, by whoever owns the process.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or string name (e.g., "INFO").
    trace_mode : bool, default False
        When true, emit timestamps and logger names for debugging traces.
    stream : TextIO, optional
        Destination for log records. Defaults to ``sys.stderr`` so that
        stdout stays reserved for serialized output.

    Returns
    -------
    logging.Logger
        The configured ``orgcst`` logger.

    """
    resolved_level = resolve_log_level(log_level)

    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(resolved_level)
    package_logger.handlers.clear()
    package_logger.propagate = False

    format_str = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s" if trace_mode else "%(levelname)s: %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S" if trace_mode else None

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(resolved_level)
    handler.setFormatter(logging.Formatter(format_str, datefmt=date_format))
    package_logger.addHandler(handler)

    return package_logger
