"""Command line interface for rnapipe."""

from rnapipe.cli.main import cli, main

__all__ = ["cli", "main"]
