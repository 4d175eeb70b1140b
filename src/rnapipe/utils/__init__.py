"""Utility functions (rnapipe)."""

from rnapipe.utils.logging import get_logger, project_run_log, setup_logging

__all__ = ["get_logger", "project_run_log", "setup_logging"]
