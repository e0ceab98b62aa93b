"""CLI commands for inspecting the resolved configuration."""

import os

import typer

from asum.config import API_KEY_ENV_VARS, ConfigError, LLMProvider, get_search_paths, mask_api_key, resolve_config
from asum.generator import describe_error

# Subcommand group for configuration inspection
config_app = typer.Typer(
    name="config",
    help="Inspect asum configuration",
    add_completion=False,
)


def _gemini_key_display(configured: str | None) -> str:
    if configured:
        return f"{mask_api_key(configured)} (asum.toml)"
    for env_var in API_KEY_ENV_VARS[LLMProvider.GEMINI]:
        value = os.getenv(env_var)
        if value:
            return f"{mask_api_key(value)} ({env_var})"
    return "not set"


@config_app.command("show")
def config_show() -> None:
    """Show the resolved configuration and where it came from."""
    try:
        config = resolve_config()
    except ConfigError as e:
        typer.echo(describe_error(e), err=True)
        raise typer.Exit(1)

    typer.echo("Configuration sources (lowest precedence first):")
    if config.sources:
        for source in config.sources:
            typer.echo(f"  {source}")
    else:
        typer.echo("  (built-in defaults; searched " + ", ".join(str(p) for p in get_search_paths()) + ")")
    typer.echo()

    general = config.general
    typer.echo("[general]")
    typer.echo(f"  Provider: {general.active_provider.value}")
    typer.echo(f"  Model: {config.active_model}")
    typer.echo(f"  Max Diff Length: {general.max_diff_length}")
    typer.echo(f"  Timeout: {general.timeout_seconds:g}s")
    if general.ignore_patterns:
        typer.echo("  Ignore Patterns:")
        for pattern in general.ignore_patterns:
            typer.echo(f"    - {pattern}")
    if general.git_extensions:
        typer.echo(f"  Git Extensions: {', '.join(general.git_extensions)}")
    typer.echo()

    params = config.ai_params
    typer.echo("[ai_params]")
    typer.echo(f"  Temperature: {params.temperature}")
    typer.echo(f"  Top P: {params.top_p}")
    typer.echo(f"  Num Predict: {params.num_predict}")
    typer.echo()

    typer.echo("[ollama]")
    typer.echo(f"  URL: {config.ollama.url}")
    typer.echo(f"  Model: {config.ollama.model}")
    typer.echo(f"  Stream: {config.ollama.stream}")
    typer.echo()

    typer.echo("[gemini]")
    typer.echo(f"  Model: {config.gemini.model}")
    typer.echo(f"  API Key: {_gemini_key_display(config.gemini.api_key)}")
    if config.gemini.url:
        typer.echo(f"  URL: {config.gemini.url}")
    typer.echo()

    typer.echo("[prompts]")
    typer.echo(f"  System Prompt: {'custom' if config.prompts.system_prompt is not None else 'built-in'}")
    typer.echo(f"  User Prompt: {'custom' if config.prompts.user_prompt is not None else 'built-in'}")
