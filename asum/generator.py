"""Generation pipeline.

Runs one linear pipeline per invocation:

    resolve config -> filter diff -> build prompt -> call backend -> normalize

Every component error is re-raised as a GenerationError whose message says
what went wrong and what to do about it. The original exception stays
available as ``cause``.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from asum.config import (
    AsumConfig,
    ConfigError,
    ConfigNotFoundError,
    ConfigParseError,
    LLMProvider,
    mask_api_key,
    resolve_config,
    verify_config,
)
from asum.diff import FilteredDiff, filter_diff
from asum.formatters import CommitMessage, InvalidFormatError, NormalizeError, normalize_response
from asum.git import GitError
from asum.llm import (
    BadResponseError,
    BaseLLMProvider,
    GenerationParams,
    LLMResult,
    MissingAPIKeyError,
    ProviderError,
    ProviderTimeoutError,
    ProviderUnauthorizedError,
    ProviderUnreachableError,
    RateLimitedError,
    get_provider,
)
from asum.llm.prompts import PromptPayload, build_prompt

logger = logging.getLogger(__name__)


class GenerationError(Exception):
    """A pipeline failure with a user-facing message.

    Attributes:
        cause: The component exception that stopped the pipeline.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause

    @property
    def raw_text(self) -> Optional[str]:
        """Backend text that could not be normalized, if that was the failure."""
        if isinstance(self.cause, InvalidFormatError):
            return self.cause.raw_text
        return None


@dataclass
class GenerationResult:
    """Outcome of one generate() call.

    ``message`` is None when there was nothing to summarize; ``filtered``
    then carries the reason.
    """

    filtered: FilteredDiff
    message: Optional[CommitMessage] = None
    prompt: Optional[PromptPayload] = None
    provider_name: Optional[str] = None
    llm_result: Optional[LLMResult] = None

    @property
    def is_empty(self) -> bool:
        return self.message is None


def describe_error(exc: BaseException, config: Optional[AsumConfig] = None) -> str:
    """Build the user-facing message for a component error.

    Args:
        exc: The exception raised by a pipeline component.
        config: The resolved configuration, when available, for hints.

    Returns:
        A message naming the failure and the next step.
    """
    if isinstance(exc, ConfigNotFoundError):
        return f"Configuration file not found: {exc.path}\nRun 'asum init' to create one."
    if isinstance(exc, ConfigParseError):
        return f"Invalid configuration: {exc}"
    if isinstance(exc, ConfigError):
        return f"Configuration error: {exc}"
    if isinstance(exc, GitError):
        return f"Could not read staged changes: {exc}"
    if isinstance(exc, MissingAPIKeyError):
        return str(exc)
    if isinstance(exc, ProviderUnreachableError):
        return f"Model backend unreachable: {exc}"
    if isinstance(exc, ProviderUnauthorizedError):
        return f"Authentication failed: {exc}\nCheck the api_key in [gemini] or GEMINI_API_KEY."
    if isinstance(exc, RateLimitedError):
        return f"Rate limited: {exc}\nWait a moment and re-run asum."
    if isinstance(exc, ProviderTimeoutError):
        hint = "Increase timeout_seconds in [general]"
        if config is not None:
            hint += f" (currently {config.general.timeout_seconds:g})"
        return f"Timed out waiting for the model: {exc}\n{hint} or lower max_diff_length."
    if isinstance(exc, BadResponseError):
        return f"Bad response from the model backend: {exc}"
    if isinstance(exc, ProviderError):
        return f"Model backend error: {exc}"
    if isinstance(exc, InvalidFormatError):
        return f"The model did not return a valid commit message: {exc}"
    if isinstance(exc, NormalizeError):
        return f"Could not read the model response: {exc}"
    return str(exc)


def _log_provider(config: AsumConfig, provider: BaseLLMProvider) -> None:
    logger.info("Generating commit message with %s...", provider.name)
    if config.active_provider == LLMProvider.GEMINI:
        logger.debug("Gemini API key: %s", mask_api_key(config.gemini.api_key))


def generate(
    raw_diff: str,
    config: Optional[AsumConfig] = None,
    provider: Optional[BaseLLMProvider] = None,
) -> GenerationResult:
    """Generate a commit message for a raw diff.

    Args:
        raw_diff: The raw unified diff.
        config: The resolved configuration (resolved from disk if None).
        provider: The backend to use (built from config if None).

    Returns:
        The result; ``message`` is None when there is nothing to summarize,
        in which case no backend is contacted.

    Raises:
        GenerationError: If any component fails.
    """
    try:
        if config is None:
            config = resolve_config()

        filtered = filter_diff(raw_diff, config)
        if filtered.is_empty:
            logger.debug("Nothing to summarize: %s", filtered.empty_reason)
            return GenerationResult(filtered=filtered)

        if filtered.ignored_files:
            logger.debug("Ignored files: %s", ", ".join(filtered.ignored_files))

        prompt = build_prompt(filtered, config)

        if provider is None:
            provider = get_provider(config)
        _log_provider(config, provider)

        llm_result = provider.generate(prompt, GenerationParams.from_config(config))
        logger.debug(
            "Model %s used %d input / %d output tokens",
            llm_result.model,
            llm_result.input_tokens,
            llm_result.output_tokens,
        )

        message = normalize_response(llm_result.text)
    except (ConfigError, ProviderError, NormalizeError) as e:
        raise GenerationError(describe_error(e, config), e) from e

    return GenerationResult(
        filtered=filtered,
        message=message,
        prompt=prompt,
        provider_name=provider.name,
        llm_result=llm_result,
    )


def verify(path: Path) -> AsumConfig:
    """Check a configuration file without generating anything.

    Raises:
        GenerationError: If the file is missing, malformed or invalid.
    """
    try:
        return verify_config(path)
    except ConfigError as e:
        raise GenerationError(describe_error(e), e) from e
