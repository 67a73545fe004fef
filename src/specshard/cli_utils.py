"""Shared helpers for specshard CLI commands.

Console output, logging setup, exit codes and input validation used by
every subcommand.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Final

import typer
from rich.console import Console
from rich.logging import RichHandler

EXIT_SUCCESS: Final[int] = 0
EXIT_ERROR: Final[int] = 1
EXIT_CONFIG_ERROR: Final[int] = 2

console = Console()
err_console = Console(stderr=True)


def _setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure root logging with a Rich handler on stderr.

    Args:
        verbose: Log at DEBUG level.
        quiet: Only log errors.

    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=verbose, rich_tracebacks=True)],
        force=True,
    )


def _error(message: str) -> None:
    err_console.print(f"[red]Error:[/red] {message}")


def _warning(message: str) -> None:
    err_console.print(f"[yellow]Warning:[/yellow] {message}")


def _success(message: str) -> None:
    console.print(f"[green]✓[/green] {message}")


def _read_spec_file(spec: str) -> tuple[Path, str]:
    """Resolve and read a spec file, exiting on failure.

    Args:
        spec: Path given on the command line.

    Returns:
        Tuple of (resolved path, file content).

    Raises:
        typer.Exit: If the file is missing or unreadable.

    """
    spec_path = Path(spec).expanduser().resolve()
    if not spec_path.is_file():
        _error(f"Spec file not found: {spec}")
        raise typer.Exit(code=EXIT_ERROR)
    try:
        return spec_path, spec_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        _error(f"Cannot read spec file {spec}: {e}")
        raise typer.Exit(code=EXIT_ERROR) from None
