"""CLI entry point for asum.

This module provides the main CLI application that combines all commands
and subcommands into a single unified interface.
"""

import typer

from asum.cli.config import config_app
from asum.cli.init import init_command
from asum.cli.main import main_command
from asum.cli.verify import verify_command

# Main application
app = typer.Typer(
    name="asum",
    help="asum: AI commit message summarizer",
    add_completion=False,
)

# Add subcommand groups
app.add_typer(config_app, name="config")

# Add individual commands
app.command("init")(init_command)
app.command("verify")(verify_command)

# Set the main callback for default behavior (includes --version flag)
app.callback(invoke_without_command=True)(main_command)


__all__ = [
    "app",
    "config_app",
    "init_command",
    "main_command",
    "verify_command",
]
