"""Shared utility functions for CLI commands."""

from typing import Optional

import typer

from asum import __version__
from asum.config import AsumConfig, LLMProvider
from asum.llm.prompts import PromptPayload


def apply_overrides(
    config: AsumConfig,
    provider: Optional[str] = None,
    model: Optional[str] = None,
    max_diff_length: Optional[int] = None,
    timeout: Optional[float] = None,
) -> AsumConfig:
    """Apply command-line overrides on top of the resolved configuration.

    --model applies to the provider that ends up active.

    Raises:
        ValueError: If the provider name is unknown.
    """
    general_updates = {}
    if provider:
        general_updates["active_provider"] = LLMProvider.from_name(provider)
    if max_diff_length is not None:
        general_updates["max_diff_length"] = max_diff_length
    if timeout is not None:
        general_updates["timeout_seconds"] = timeout

    if general_updates:
        config = config.model_copy(
            update={"general": config.general.model_copy(update=general_updates)}
        )

    if model:
        section = "gemini" if config.active_provider == LLMProvider.GEMINI else "ollama"
        current = getattr(config, section)
        config = config.model_copy(update={section: current.model_copy(update={"model": model})})

    return config


def display_prompt(prompt: PromptPayload) -> None:
    """Print the prompt sent to the model on stderr."""
    typer.echo("[SYSTEM PROMPT]", err=True)
    typer.echo(prompt.system, err=True)
    typer.echo("", err=True)
    typer.echo("[USER PROMPT]", err=True)
    typer.echo(prompt.user, err=True)
    typer.echo("", err=True)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"asum {__version__}")
        raise typer.Exit()
