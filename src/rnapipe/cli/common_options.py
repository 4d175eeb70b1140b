"""Shared Click options for the rnapipe CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, TypeVar

import click

F = TypeVar("F", bound=Callable[..., None])


def config_option(func: F) -> F:
    """Configuration file option."""
    return click.option(
        "-c",
        "--config",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="Configuration file (YAML)",
    )(func)


def threads_option(func: F) -> F:
    """Threads option."""
    return click.option(
        "-t",
        "--threads",
        type=click.IntRange(min=1),
        default=None,
        help="Threads per collaborator invocation [default: 4]",
    )(func)


def verbose_option(func: F) -> F:
    """Verbosity option."""
    return click.option(
        "-v",
        "--verbose",
        count=True,
        help="Increase log verbosity (-v for INFO, -vv for DEBUG)",
    )(func)


def log_file_option(func: F) -> F:
    """Run-wide log file option."""
    return click.option(
        "--log-file",
        type=click.Path(dir_okay=False, path_type=Path),
        help="Additional run-wide log file",
    )(func)


def dry_run_option(func: F) -> F:
    """Dry run option."""
    return click.option(
        "--dry-run",
        is_flag=True,
        help="Show which stages would run or be skipped, without executing",
    )(func)


def common_pipeline_options(func: F) -> F:
    """Apply the standard pipeline options to a command."""
    decorators = [
        config_option,
        threads_option,
        verbose_option,
        log_file_option,
        dry_run_option,
    ]
    # Click applies them bottom-up
    for decorator in reversed(decorators):
        func = decorator(func)
    return func
