"""
screenspec CLI utilities.

Shared helpers used by the CLI commands.
"""

from __future__ import annotations

import logging
import platform

import typer
from rich.console import Console

console = Console()

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def get_version() -> str:
    from .. import __version__

    return __version__


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"screenspec {get_version()}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route library logging to stderr; DEBUG with --verbose, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        force=True,
    )
