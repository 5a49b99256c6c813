"""Loguru helpers for consistent logging in CLI commands."""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

_SINK_IDS: dict[str, int] = {}


def log_dir() -> Path:
    return Path.home() / ".alchemykit" / "logs"


def ensure_rotating_log_file(name: str, level: str = "INFO") -> Path:
    """Ensure a rotating log sink for the given command name."""
    log_path = log_dir() / f"{name}.log"
    if name in _SINK_IDS:
        return log_path
    log_path.parent.mkdir(parents=True, exist_ok=True)
    sink_id = logger.add(
        str(log_path),
        level=level,
        rotation="10 MB",
        retention="14 days",
        enqueue=True,
        encoding="utf-8",
        backtrace=False,
        diagnose=False,
    )
    _SINK_IDS[name] = sink_id
    return log_path


def configure_console_logging(verbose: bool, log_file: bool = False) -> Path | None:
    """
    Verbose: full request flow on stderr. With a log file, stderr only gets
    warnings and the file gets INFO and up. Otherwise library logs stay quiet.
    """
    if not verbose and not log_file:
        logger.disable("alchemykit")
        return None
    logger.remove()
    _SINK_IDS.clear()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "WARNING",
        format="<dim>{time:HH:mm:ss.SSS}</dim> | <level>{level: <8}</level> | <level>{message}</level>",
    )
    logger.enable("alchemykit")
    if log_file:
        return ensure_rotating_log_file("alchemykit", "DEBUG" if verbose else "INFO")
    return None
