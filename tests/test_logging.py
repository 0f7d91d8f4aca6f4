"""Tests for logging utilities."""

import logging
from io import StringIO

import numpy as np

from descent.logging import configure_logging, get_logger, set_log_level
from descent.optimize import bfgs
from descent.problems import quadratic_bowl


def test_get_logger_returns_prefixed_logger():
    """Test that get_logger returns a logger under the package namespace."""
    logger = get_logger("test_module")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "descent.test_module"
    assert get_logger("descent.optimize.newton").name == "descent.optimize.newton"
    assert get_logger().name == "descent"


def test_get_logger_caching():
    """Test that get_logger caches loggers."""
    assert get_logger("test_module") is get_logger("test_module")
    assert get_logger("module1") is not get_logger("module2")


def test_set_log_level_accepts_strings_and_ints():
    logger = get_logger("test_module")
    try:
        set_log_level("DEBUG")
        assert logger.level == logging.DEBUG
        set_log_level(logging.ERROR)
        assert logger.level == logging.ERROR
    finally:
        set_log_level(logging.WARNING)


def test_configure_logging_redirects_output():
    logger = get_logger("test_module")
    stream = StringIO()
    try:
        configure_logging(level=logging.DEBUG, stream=stream)
        logger.debug("Debug message")
        assert "Debug message" in stream.getvalue()
        assert "descent.test_module" in stream.getvalue()
    finally:
        configure_logging(level=logging.WARNING)


def test_solver_reports_progress_at_info():
    get_logger("descent.optimize.quasi_newton")
    stream = StringIO()
    try:
        configure_logging(level=logging.INFO, stream=stream)
        bfgs(quadratic_bowl(2), np.ones(2))
        assert "BFGS finished after" in stream.getvalue()
    finally:
        configure_logging(level=logging.WARNING)


def test_logger_does_not_propagate():
    """Test that loggers don't propagate to root logger."""
    assert get_logger("test_module").propagate is False


def test_log_level_environment_variable(monkeypatch):
    """Test that DESCENT_LOG_LEVEL sets the default level at import time."""
    import os
    import subprocess
    import sys

    monkeypatch.setenv("DESCENT_LOG_LEVEL", "debug")
    result = subprocess.run(
        [
            sys.executable,
            "-c",
            "from descent.logging import get_logger; print(get_logger('env').level)",
        ],
        capture_output=True,
        text=True,
        check=False,
        env=dict(os.environ),
        timeout=30,
    )
    assert result.returncode == 0, result.stderr
    assert result.stdout.strip() == str(logging.DEBUG)
