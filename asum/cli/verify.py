"""CLI command for checking a configuration file."""

from pathlib import Path
from typing import Optional

import typer

from asum.config import CONFIG_FILE_NAME
from asum.generator import GenerationError, verify


def verify_command(
    path: Optional[Path] = typer.Argument(
        None,
        help="Configuration file to check (default: ./asum.toml)",
    ),
) -> None:
    """Check that an asum.toml file parses and has valid values."""
    target = path if path is not None else Path(CONFIG_FILE_NAME)

    try:
        verify(target)
    except GenerationError as e:
        typer.echo(f"[ERROR] {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"[OK] {target} syntax is valid.")
