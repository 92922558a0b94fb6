"""Tests for centralized logging behavior and configuration."""

import logging
import sys
from io import StringIO

import pytest

from topotrace.algorithms import run_algorithm
from topotrace.logging import (
    DEFAULT_FORMAT,
    ROOT_LOGGER_NAME,
    disable_debug_logging,
    enable_debug_logging,
    get_logger,
    level_for_flags,
    reset_logging,
    set_global_log_level,
    setup_root_logger,
)
from topotrace.model.graph import SAMPLE_GRAPH


@pytest.fixture(autouse=True)
def _reset_logging_each_test():
    """Reset logging state before and after each test to avoid cross-test bleed."""
    reset_logging()
    yield
    reset_logging()
    setup_root_logger()


def test_debug_toggle_controls_emission():
    """INFO passes by default, DEBUG only while debug logging is enabled."""
    logger = get_logger("topotrace.test")

    capture = StringIO()
    handler = logging.StreamHandler(capture)
    handler.setLevel(logging.DEBUG)
    logger.handlers.clear()
    logger.addHandler(handler)

    logger.info("info-1")
    assert "info-1" in capture.getvalue()

    logger.debug("debug-1")
    assert "debug-1" not in capture.getvalue()

    enable_debug_logging()
    logger.debug("debug-2")
    assert "debug-2" in capture.getvalue()

    disable_debug_logging()
    logger.debug("debug-3")
    assert "debug-3" not in capture.getvalue()
    logger.handlers.clear()


def test_children_follow_global_level():
    """Existing and new child loggers inherit the level set on the package root."""
    first = get_logger("topotrace.algorithms.spf")
    assert first.getEffectiveLevel() == logging.INFO

    set_global_log_level(logging.WARNING)
    assert first.getEffectiveLevel() == logging.WARNING
    assert get_logger("topotrace.late").getEffectiveLevel() == logging.WARNING


def test_setup_is_idempotent():
    """Repeated setup neither stacks handlers nor overrides an explicit level."""
    capture = StringIO()
    setup_root_logger(level=logging.INFO, handler=logging.StreamHandler(capture))
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    assert len(root_logger.handlers) == 1

    setup_root_logger(level=logging.DEBUG)
    assert len(root_logger.handlers) == 1

    set_global_log_level(logging.ERROR)
    assert root_logger.level == logging.ERROR


def test_custom_format_string_applied():
    capture = StringIO()
    fmt = "LEVEL:%(levelname)s|NAME:%(name)s|MSG:%(message)s"
    setup_root_logger(level=logging.INFO, format_string=fmt, handler=logging.StreamHandler(capture))

    get_logger("topotrace.test.format").info("hello")
    out = capture.getvalue()
    assert "LEVEL:INFO" in out
    assert "NAME:topotrace.test.format" in out
    assert "MSG:hello" in out


def test_algorithm_debug_summary_is_logged(caplog):
    """Algorithms log a one-line debug summary, separate from their step trace."""
    enable_debug_logging()
    with caplog.at_level(logging.DEBUG, logger=ROOT_LOGGER_NAME):
        result = run_algorithm("bfs", SAMPLE_GRAPH, "n1")
    assert "BFS from n1 reached 5 of 5 nodes" in caplog.text
    # The step trace never goes through the logger
    assert result.logs[0] not in caplog.text


def test_default_handler_writes_to_stderr():
    """Log records stay off stdout so JSON output can be piped."""
    setup_root_logger()
    handlers = logging.getLogger(ROOT_LOGGER_NAME).handlers
    assert len(handlers) == 1
    assert handlers[0].stream is sys.stderr
    assert handlers[0].formatter._fmt == DEFAULT_FORMAT


@pytest.mark.parametrize(
    "verbose,quiet,expected",
    [
        (False, False, logging.INFO),
        (True, False, logging.DEBUG),
        (False, True, logging.WARNING),
        (True, True, logging.DEBUG),
    ],
)
def test_level_for_flags(verbose, quiet, expected):
    assert level_for_flags(verbose, quiet) == expected
