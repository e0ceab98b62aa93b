"""Base classes shared by generation backends."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from asum.config import AsumConfig
from asum.llm.prompts import PromptPayload


@dataclass(frozen=True)
class GenerationParams:
    """Sampling parameters and the wall-clock timeout for one request."""

    temperature: float
    top_p: float
    max_tokens: int
    timeout: float

    @classmethod
    def from_config(cls, config: AsumConfig) -> "GenerationParams":
        return cls(
            temperature=config.ai_params.temperature,
            top_p=config.ai_params.top_p,
            max_tokens=config.ai_params.num_predict,
            timeout=config.general.timeout_seconds,
        )


@dataclass
class LLMResult:
    """Result from a generation call, including token usage when reported."""

    text: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0


class BaseLLMProvider(ABC):
    """Abstract base class for generation backends."""

    model: str

    @property
    @abstractmethod
    def name(self) -> str:
        """Human readable backend name, including the model."""
        pass

    @abstractmethod
    def generate(self, prompt: PromptPayload, params: GenerationParams) -> LLMResult:
        """Generate raw text for a prompt.

        Streaming transports are consumed completely; the result is always
        the full aggregated text.

        Args:
            prompt: The system and user prompt strings.
            params: Sampling parameters and timeout.

        Returns:
            An LLMResult with the generated text.

        Raises:
            ProviderUnreachableError: If the backend cannot be reached.
            ProviderUnauthorizedError: If the credentials are rejected.
            RateLimitedError: If the backend returns HTTP 429.
            ProviderTimeoutError: If the timeout expires.
            BadResponseError: For any other unusable response.
        """
        pass
