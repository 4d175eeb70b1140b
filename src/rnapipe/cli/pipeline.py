"""Shared pipeline execution helpers for the CLI."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

import click

from rnapipe.config import Config, load_config
from rnapipe.core.driver import PipelineDriver, PlannedUnit
from rnapipe.core.stages.definitions import PIPELINE_STAGES
from rnapipe.utils.dependency_checker import DependencyChecker
from rnapipe.utils.logging import setup_logging
from rnapipe.utils.validators import validate_installation

LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

PLAN_MARKERS = {"done": "✓", "pending": "○", "disabled": "-"}


@dataclass
class PipelineOptions:
    """Container for pipeline execution options."""

    projects: List[Path] = field(default_factory=list)
    config_path: Optional[Path] = None
    threads: Optional[int] = None  # None means use config or default
    verbose: int = 0
    log_file: Optional[Path] = None
    dry_run: bool = False


def resolve_log_level(verbose: int, cfg: Config) -> int:
    """CLI verbosity wins over the configured level."""
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return LEVEL_MAP.get(str(cfg.runtime.log_level).upper(), logging.INFO)


def build_config(opts: PipelineOptions) -> Config:
    """Defaults, then config file, then CLI overrides."""
    cfg = load_config(opts.config_path) if opts.config_path else Config()
    if opts.threads is not None:
        cfg.threads = opts.threads
    if opts.log_file is not None:
        cfg.runtime.log_file = opts.log_file
    return cfg


def show_pipeline_stages() -> None:
    """Print the fixed stage order without touching any project."""
    click.echo("\nrnapipe Pipeline Stages:")
    click.echo("-" * 60)
    for i, stage in enumerate(PIPELINE_STAGES, 1):
        notes = [stage.scope]
        if stage.toggle:
            notes.append(f"toggle: {stage.toggle}")
        if not stage.fatal:
            notes.append("non-fatal")
        click.echo(f"  {i}. {stage.name:<14} - {stage.description} ({', '.join(notes)})")
    click.echo("-" * 60)
    click.echo(f"Total: {len(PIPELINE_STAGES)} stages\n")


def show_plan(planned: Sequence[PlannedUnit]) -> None:
    """Print the resume status of every stage unit."""
    current: Optional[Path] = None
    for unit in planned:
        if unit.project != current:
            current = unit.project
            click.echo(f"\nProject: {current}")
        marker = PLAN_MARKERS.get(unit.status, "?")
        click.echo(f"  {marker} {unit.stage:<14} [{unit.unit}] {unit.status}")
    pending = sum(1 for u in planned if u.status == "pending")
    click.echo(f"\n{pending} unit(s) would run, {len(planned) - pending} would be skipped\n")


def check_tools(cfg: Config, logger: logging.Logger) -> bool:
    """Print a dependency report; True if the installation is usable."""
    issues = validate_installation()
    for issue in issues:
        click.echo(f"✗ {issue}", err=True)

    checker = DependencyChecker(cfg, logger=logger)
    ok = checker.check_all()
    checker.print_report()
    return ok and not issues


def execute_pipeline(opts: PipelineOptions, logger: logging.Logger) -> None:
    """Load configuration, then run (or plan) every project in order.

    Raises:
        RnaPipeError: Any fatal configuration, dependency, sample or stage error
    """
    cfg = build_config(opts)
    setup_logging(level=resolve_log_level(opts.verbose, cfg), log_file=cfg.runtime.log_file)

    # Fail fast on user errors like missing reference files
    cfg.validate()

    driver = PipelineDriver(cfg, logger=logger)
    if opts.dry_run:
        logger.info("Dry run mode - showing what would be executed:")
        show_plan(driver.plan(opts.projects))
        return

    outcomes = driver.run(opts.projects)
    for outcome in outcomes:
        logger.info(f"{outcome.project}: {outcome.status} (log: {outcome.log_file})")
