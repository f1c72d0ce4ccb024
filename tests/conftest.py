"""
Pytest Configuration

Puts ``src`` on ``sys.path`` so the suite runs from a plain checkout, and
isolates each test from environment and working-directory changes (settings
are ENV-aware, so a leaked ``PARQUETGEN_*`` variable would change defaults).
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture(autouse=True)
def _restore_environ() -> None:
    """Snapshot environment variables, strip PARQUETGEN_*, and restore after each test."""

    original = os.environ.copy()
    for key in list(os.environ):
        if key.startswith("PARQUETGEN_"):
            del os.environ[key]
    try:
        yield
    finally:
        os.environ.clear()
        os.environ.update(original)


@pytest.fixture(autouse=True)
def _restore_cwd() -> None:
    """Ensure tests leave the current working directory unchanged."""

    original_cwd = Path.cwd()
    try:
        yield
    finally:
        os.chdir(original_cwd)


@pytest.fixture(autouse=True)
def _reset_package_logger() -> None:
    """Drop handlers installed by CLI runs so each test starts unconfigured."""

    yield
    logger = logging.getLogger("ParquetGen")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
