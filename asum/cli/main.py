"""Main CLI command for generating commit messages."""

from typing import Optional

import typer

from asum.cli.utils import apply_overrides, display_prompt, version_callback
from asum.clipboard import copy_to_clipboard
from asum.config import ConfigError, resolve_config
from asum.generator import GenerationError, describe_error, generate
from asum.git import GitError, read_diff
from asum.log import setup_logging


def main_command(
    ctx: typer.Context,
    provider: Optional[str] = typer.Option(
        None,
        "--provider",
        "-p",
        help="Override the backend (ollama/local-model, gemini/hosted-api)",
    ),
    model: Optional[str] = typer.Option(
        None,
        "--model",
        "-m",
        help="Override the model of the active backend",
    ),
    max_diff_length: Optional[int] = typer.Option(
        None,
        "--max-diff-length",
        min=1,
        help="Maximum bytes of diff sent to the model",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        min=0.1,
        help="Seconds to wait for the model",
    ),
    from_stdin: bool = typer.Option(
        False,
        "--stdin",
        help="Read the diff from stdin instead of the staged changes",
    ),
    no_copy: bool = typer.Option(
        False,
        "--no-copy",
        help="Do not copy the message to the clipboard",
    ),
    show_prompt: bool = typer.Option(
        False,
        "--show-prompt",
        help="Print the prompt sent to the model on stderr",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging on stderr",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Generate a conventional commit message from staged changes (or a diff on stdin with --stdin)."""
    setup_logging(verbose=verbose)

    # If a subcommand is invoked, don't run the default behavior
    if ctx.invoked_subcommand is not None:
        return

    try:
        config = resolve_config()
    except ConfigError as e:
        typer.echo(describe_error(e), err=True)
        raise typer.Exit(1)

    try:
        config = apply_overrides(config, provider, model, max_diff_length, timeout)
    except ValueError as e:
        typer.echo(f"Invalid --provider: {e}", err=True)
        typer.echo("Valid providers: ollama (local-model), gemini (hosted-api)", err=True)
        raise typer.Exit(1)

    try:
        raw_diff = read_diff(config.general.git_extensions, from_stdin=from_stdin)
    except GitError as e:
        typer.echo(describe_error(e), err=True)
        raise typer.Exit(1)

    try:
        result = generate(raw_diff, config)
    except GenerationError as e:
        typer.echo(f"Error: {e}", err=True)
        if e.raw_text is not None:
            typer.echo("\n[RAW MODEL RESPONSE]", err=True)
            typer.echo(e.raw_text, err=True)
        raise typer.Exit(1)

    if result.is_empty:
        typer.echo(result.filtered.empty_reason, err=True)
        raise typer.Exit(0)

    if show_prompt and result.prompt is not None:
        display_prompt(result.prompt)

    if result.filtered.truncated:
        typer.echo(
            f"Note: {len(result.filtered.omitted_files)} file(s) left out of the prompt "
            f"to stay under max_diff_length.",
            err=True,
        )

    message = result.message.render()
    typer.echo(message)

    if not no_copy and copy_to_clipboard(message):
        typer.echo("(copied to clipboard)", err=True)
