"""
Logging setup for export-diff.

Modules get a logger with:
    from .logging_utils import get_logger
    logger = get_logger(__name__)

Configuration happens once, in the CLI entrypoint, via configure_logging().
"""

import logging
import sys


DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

# Subsystem tags, prefixed to log messages so output stays greppable.
RECONCILE = "[RECONCILE]"
FETCH = "[FETCH]"
STORE = "[STORE]"
CLI = "[CLI]"


def configure_logging(level: int | str = logging.INFO, fmt: str = DEFAULT_FORMAT, stream=None):
    """
    Configure the root logging handler.

    Logs go to stderr by default so JSON written to stdout stays parseable.
    Calling this more than once only updates the level.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(handler)

    root.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger. Does not configure anything."""
    return logging.getLogger(name)
