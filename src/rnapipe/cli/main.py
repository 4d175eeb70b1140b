"""Click application entrypoint for rnapipe."""

from __future__ import annotations

import signal
import sys
from pathlib import Path
from types import FrameType
from typing import Optional, Tuple

import click

from rnapipe import __version__
from rnapipe.cli.exit_codes import (
    EXIT_ERROR,
    EXIT_SIGINT,
    EXIT_SIGTERM,
    EXIT_SUCCESS,
    EXIT_USAGE,
)
from rnapipe.cli.common_options import common_pipeline_options
from rnapipe.cli.pipeline import (
    PipelineOptions,
    build_config,
    check_tools,
    execute_pipeline,
    resolve_log_level,
    show_pipeline_stages,
)
from rnapipe.exceptions import RnaPipeError
from rnapipe.utils.logging import get_logger, setup_logging


class TerminationRequested(KeyboardInterrupt):
    """SIGTERM delivered while the pipeline was running."""


def _handle_signal(signum: int, frame: Optional[FrameType]) -> None:
    """Handle interrupt signals for graceful shutdown."""
    sig_name = "SIGINT" if signum == signal.SIGINT else "SIGTERM"
    click.echo(f"\n{sig_name} received, stopping after cleanup...", err=True)
    if signum == signal.SIGTERM:
        raise TerminationRequested(sig_name)
    raise KeyboardInterrupt(sig_name)


def _print_version(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if value and not ctx.resilient_parsing:
        click.echo(f"rnapipe {__version__}")
        ctx.exit()


def _print_stages(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if value and not ctx.resilient_parsing:
        show_pipeline_stages()
        ctx.exit()


def _print_config(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if value and not ctx.resilient_parsing:
        from rnapipe.resources import get_default_config

        click.echo(get_default_config(), nl=False)
        ctx.exit()


@click.command(context_settings=dict(help_option_names=["-h", "--help"]))
@click.argument(
    "projects",
    nargs=-1,
    type=click.Path(file_okay=False, path_type=Path),
)
@common_pipeline_options
@click.option(
    "--check-tools",
    "check_tools_only",
    is_flag=True,
    help="Check external tools and exit",
)
@click.option(
    "--show-stages",
    is_flag=True,
    is_eager=True,
    expose_value=False,
    callback=_print_stages,
    help="Show pipeline stages and exit",
)
@click.option(
    "--init-config",
    is_flag=True,
    is_eager=True,
    expose_value=False,
    callback=_print_config,
    help="Print a template configuration file and exit",
)
# Version option (use -V to avoid conflict with -v/--verbose)
@click.option(
    "-V",
    "--version",
    is_flag=True,
    is_eager=True,
    expose_value=False,
    callback=_print_version,
    help="Show the version and exit.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    projects: Tuple[Path, ...],
    config: Optional[Path],
    threads: Optional[int],
    verbose: int,
    log_file: Optional[Path],
    dry_run: bool,
    check_tools_only: bool,
) -> None:
    """rnapipe: resumable paired-end RNA-seq pipeline.

    Each PROJECT directory must contain a raw/ folder with
    <sample>_R1.fastq.gz / <sample>_R2.fastq.gz pairs. Projects are processed
    in the order given; completed stages are skipped on re-runs.
    """
    opts = PipelineOptions(
        projects=list(projects),
        config_path=config,
        threads=threads,
        verbose=verbose,
        log_file=log_file,
        dry_run=dry_run,
    )

    if check_tools_only:
        try:
            cfg = build_config(opts)
        except RnaPipeError as exc:
            click.echo(f"Error: {exc}", err=True)
            ctx.exit(EXIT_ERROR)
        setup_logging(level=resolve_log_level(verbose, cfg))
        ok = check_tools(cfg, get_logger("cli"))
        ctx.exit(EXIT_SUCCESS if ok else EXIT_ERROR)

    if not projects:
        click.echo(ctx.get_usage(), err=True)
        click.echo("Error: at least one PROJECT directory is required", err=True)
        ctx.exit(EXIT_USAGE)

    logger = get_logger("cli")
    try:
        execute_pipeline(opts, logger)
    except TerminationRequested:
        logger.warning("Pipeline terminated")
        ctx.exit(EXIT_SIGTERM)
    except KeyboardInterrupt:
        logger.warning("Pipeline interrupted by user")
        ctx.exit(EXIT_SIGINT)
    except RnaPipeError as exc:
        logger.error(f"Pipeline error: {exc}")
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(EXIT_ERROR)


def main(argv: list[str] | None = None) -> int:
    """Main entry point with signal handling."""
    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    try:
        cli(argv)
        return EXIT_SUCCESS
    except TerminationRequested:
        return EXIT_SIGTERM
    except KeyboardInterrupt:
        return EXIT_SIGINT
    except SystemExit as exc:
        # Preserve explicit exit codes from cli()
        return exc.code if isinstance(exc.code, int) else EXIT_ERROR
    except Exception as exc:
        click.echo(f"Error: {exc}", err=True)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
