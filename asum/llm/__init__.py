"""LLM provider module for asum.

This module provides a unified interface to the generation backends.
The active backend is chosen by [general] active_provider in asum.toml.
"""

from dotenv import load_dotenv

from asum.config import AsumConfig, LLMProvider
from asum.llm.base import BaseLLMProvider, GenerationParams, LLMResult
from asum.llm.exceptions import (
    BadResponseError,
    MissingAPIKeyError,
    ProviderError,
    ProviderTimeoutError,
    ProviderUnauthorizedError,
    ProviderUnreachableError,
    RateLimitedError,
)

# Load environment variables from .env file
load_dotenv()


def get_provider(config: AsumConfig, provider: LLMProvider | None = None) -> BaseLLMProvider:
    """Get a provider instance for the resolved configuration.

    Args:
        config: The resolved configuration.
        provider: Override for [general] active_provider.

    Returns:
        An instance of the appropriate provider.

    Raises:
        ValueError: If the provider is not supported.
    """
    provider = provider or config.active_provider

    if provider == LLMProvider.OLLAMA:
        from asum.llm.ollama_provider import OllamaProvider

        return OllamaProvider(
            model=config.ollama.model,
            url=config.ollama.url,
            stream=config.ollama.stream,
        )

    elif provider == LLMProvider.GEMINI:
        from asum.llm.gemini_provider import GeminiProvider

        return GeminiProvider(
            model=config.gemini.model,
            api_key=config.gemini.api_key,
            base_url=config.gemini.url,
        )

    else:
        raise ValueError(f"Unsupported provider: {provider}")


__all__ = [
    "BadResponseError",
    "BaseLLMProvider",
    "GenerationParams",
    "LLMResult",
    "MissingAPIKeyError",
    "ProviderError",
    "ProviderTimeoutError",
    "ProviderUnauthorizedError",
    "ProviderUnreachableError",
    "RateLimitedError",
    "get_provider",
]
