"""Tests for CLI logging setup."""

from __future__ import annotations

import sys

import pytest
from loguru import logger

from alchemykit.cli.shared import logging_utils


@pytest.fixture
def restore_logger():
    yield
    logger.remove()
    logging_utils._SINK_IDS.clear()
    logger.add(sys.stderr)
    logger.enable("alchemykit")


def test_rotating_log_file_is_added_once(tmp_path, restore_logger) -> None:
    first = logging_utils.ensure_rotating_log_file("transfers")
    second = logging_utils.ensure_rotating_log_file("transfers")
    assert first == second == tmp_path / ".alchemykit" / "logs" / "transfers.log"
    assert list(logging_utils._SINK_IDS) == ["transfers"]
    assert first.parent.is_dir()


def test_log_file_option_writes_to_rotating_file(tmp_path, restore_logger) -> None:
    path = logging_utils.configure_console_logging(verbose=False, log_file=True)
    assert path == tmp_path / ".alchemykit" / "logs" / "alchemykit.log"
    logger.info("written through the file sink")
    logger.complete()
    logger.remove()
    assert "written through" in path.read_text()


def test_quiet_mode_returns_no_file(restore_logger) -> None:
    assert logging_utils.configure_console_logging(verbose=False) is None
