"""Shared fixtures for p4unity tests."""
import logging
from pathlib import Path

import pytest


def pytest_sessionfinish(session, exitstatus):
    """Fail a --cov run that produced no .coverage data.

    An empty data file usually means the tests imported a stray checkout of
    p4unity instead of the editable install.
    """
    if not any("--cov" in str(arg) for arg in session.config.args):
        return

    if not list(Path.cwd().glob(".coverage*")):
        pytest.exit(
            "--cov produced no coverage data; is p4unity installed with "
            "`pip install -e .[test]` in this environment?",
            returncode=1,
        )


@pytest.fixture
def logger() -> logging.Logger:
    """Silent logger for core components."""
    log = logging.getLogger("p4unity.tests")
    log.addHandler(logging.NullHandler())
    log.propagate = False
    return log
