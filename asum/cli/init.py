"""CLI command for writing a starter asum.toml."""

from pathlib import Path

import typer

from asum import global_config
from asum.config import CONFIG_FILE_NAME


def init_command(
    global_: bool = typer.Option(
        False,
        "--global",
        "-g",
        help="Write ~/.asum/asum.toml instead of ./asum.toml",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite an existing file",
    ),
) -> None:
    """Write a commented default configuration file."""
    if global_:
        path = global_config.get_config_file_path()
    else:
        path = Path.cwd() / CONFIG_FILE_NAME

    try:
        global_config.write_default_config(path, force=force)
    except global_config.GlobalConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Wrote default configuration to {path}")
    typer.echo(f"Edit it, then check it with: asum verify {path}")
