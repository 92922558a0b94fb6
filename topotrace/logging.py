"""Logging setup for topotrace.

Every package logger hangs off the ``topotrace`` logger, which owns the only
handler. Records go to stderr so ``topotrace run --json`` leaves stdout as a
clean JSON document. Algorithm traces are result data and never pass through
here; modules only log short run summaries at DEBUG.
"""

import logging
import sys
from typing import Optional

ROOT_LOGGER_NAME = "topotrace"

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured = False


def setup_root_logger(
    level: int = logging.INFO,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Attach the package handler to the ``topotrace`` logger.

    Only the first call has an effect; later calls are ignored until
    ``reset_logging()``.

    Args:
        level: Initial level of the package logger.
        format_string: Record format, ``DEFAULT_FORMAT`` if omitted.
        handler: Destination, a stderr ``StreamHandler`` if omitted.
    """
    global _configured
    if _configured:
        return

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.handlers.clear()
    package_logger.setLevel(level)

    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    package_logger.addHandler(handler)

    # caplog listens on the Python root logger
    package_logger.propagate = True
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a topotrace module (pass ``__name__``).

    The logger has no handler or level of its own and follows the package
    logger.
    """
    setup_root_logger()
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: int) -> None:
    """Apply ``level`` to the package logger and its handler."""
    setup_root_logger()
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(level)
    for handler in package_logger.handlers:
        handler.setLevel(level)


def level_for_flags(verbose: bool, quiet: bool) -> int:
    """Map the CLI ``--verbose`` / ``--quiet`` flags to a level; verbose wins."""
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def enable_debug_logging() -> None:
    set_global_log_level(logging.DEBUG)


def disable_debug_logging() -> None:
    set_global_log_level(logging.INFO)


def reset_logging() -> None:
    """Drop the package handler and level so the next setup starts fresh.

    Used by tests.
    """
    global _configured
    _configured = False
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)


setup_root_logger()
