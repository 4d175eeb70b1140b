"""Centralized logging utilities for rnapipe.

Provides a single place to configure logging, fetch namespaced loggers and
attach the per-project run log.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional


APP_LOGGER = "rnapipe"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
CONSOLE_FORMAT = "%(levelname)s: %(message)s"
RUN_LOG_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"
RUN_LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: int = logging.INFO, log_file: Optional[Path] = None) -> None:
    """Configure logging for the 'rnapipe' namespace.

    Args:
        level: Logging level for the application logger
        log_file: Optional path for a run-wide log file

    Notes:
        - Root logger kept at WARNING to suppress third-party noise
        - Console handler uses concise format; file handler (if any) is detailed at DEBUG
    """
    # Keep root quiet
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.WARNING)

    app_logger = logging.getLogger(APP_LOGGER)
    app_logger.setLevel(min(level, logging.DEBUG) if log_file else level)
    # Avoid duplicate logs if called multiple times
    for h in list(app_logger.handlers):
        app_logger.removeHandler(h)
        h.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    app_logger.addHandler(console)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
        app_logger.addHandler(file_handler)

    # Do not propagate to root to avoid double-printing
    app_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Return a namespaced logger under 'rnapipe' root."""
    base = logging.getLogger(APP_LOGGER)
    return base.getChild(name)


@contextmanager
def project_run_log(log_file: Path, level: int = logging.INFO) -> Iterator[Path]:
    """Append every 'rnapipe' record to a project-local log while active.

    Entries are a timestamp plus the message; the console handler installed
    by :func:`setup_logging` keeps mirroring them to the operator. The file is
    opened in append mode and never rotated so re-runs accumulate history.
    """
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(RUN_LOG_FORMAT, datefmt=RUN_LOG_DATEFMT))

    app_logger = logging.getLogger(APP_LOGGER)
    if app_logger.level == logging.NOTSET or app_logger.level > level:
        app_logger.setLevel(level)
    app_logger.addHandler(handler)
    try:
        yield log_file
    finally:
        app_logger.removeHandler(handler)
        handler.close()


class LogTemplates:
    """Standard log message templates for stage transitions.

    Example usage:
        logger.info(LogTemplates.STAGE_START.format(stage="trim", unit="A"))
    """

    RUN_START = "Starting run for project {project} ({count} samples)"
    RUN_COMPLETED = "Project {project} completed"
    RUN_FAILED = "Project {project} failed at stage {stage}"

    STAGE_SKIPPED = "[{unit}] {stage}: skipped-already-done"
    STAGE_DISABLED = "[{unit}] {stage}: disabled ({reason})"
    STAGE_START = "[{unit}] {stage}: running"
    STAGE_SUCCESS = "[{unit}] {stage}: succeeded in {duration:.1f}s"
    STAGE_FAILURE = "[{unit}] {stage}: failed - {error}"
    STAGE_CANCELLED = "[{unit}] {stage}: not started (run cancelled)"
    STALE_REMOVED = "[{unit}] {stage}: removed stale artifact {path}"

    TOOL_START = "Running {tool_name}: {command}"
    TOOL_FAILURE = "{tool_name} failed with exit code {exit_code}"
