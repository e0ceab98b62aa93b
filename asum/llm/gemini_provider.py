"""Google Gemini (hosted API) provider implementation."""

import logging
import os

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from asum.config import API_KEY_ENV_VARS, DEFAULT_GEMINI_MODEL, LLMProvider
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
from asum.llm.prompts import PromptPayload

logger = logging.getLogger(__name__)


class GeminiProvider(BaseLLMProvider):
    """Google Gemini LLM provider."""

    def __init__(
        self,
        model: str | None = None,
        api_key: str | None = None,
        base_url: str | None = None,
    ):
        """Initialize the Gemini provider.

        Args:
            model: The model to use. Defaults to gemini-2.0-flash.
            api_key: Key from the config file. Falls back to the environment.
            base_url: Override for the API endpoint (proxies, test servers).
        """
        self.model = model or DEFAULT_GEMINI_MODEL
        self.api_key = api_key
        self.base_url = base_url
        self.api_key_env_vars = API_KEY_ENV_VARS[LLMProvider.GEMINI]

    @property
    def name(self) -> str:
        return f"Gemini ({self.model})"

    def get_api_key(self) -> str:
        """Get the API key from the config file or the environment.

        Returns:
            The API key string.

        Raises:
            MissingAPIKeyError: If no key is configured.
        """
        if self.api_key:
            return self.api_key

        for env_var in self.api_key_env_vars:
            value = os.getenv(env_var)
            if value:
                return value

        raise MissingAPIKeyError(
            "Gemini API key not found. Set it using one of:\n"
            "  1. api_key under [gemini] in asum.toml\n"
            f"  2. Environment variable: export {self.api_key_env_vars[0]}=your_key\n"
            f"  3. A .env file containing {self.api_key_env_vars[0]}=your_key"
        )

    def _make_client(self, api_key: str, timeout: float) -> genai.Client:
        http_options = types.HttpOptions(
            base_url=self.base_url,
            timeout=int(timeout * 1000),
        )
        return genai.Client(api_key=api_key, http_options=http_options)

    def generate(self, prompt: PromptPayload, params: GenerationParams) -> LLMResult:
        """Generate a commit message using Google Gemini.

        Args:
            prompt: The system and user prompt strings.
            params: Sampling parameters and timeout.

        Returns:
            An LLMResult with the response text and token usage.

        Raises:
            MissingAPIKeyError: If the API key is not set.
            ProviderUnauthorizedError: If the key is rejected.
            RateLimitedError: On HTTP 429.
            ProviderTimeoutError: If the request times out.
            ProviderUnreachableError: If the API cannot be reached.
            BadResponseError: For any other failure.
        """
        api_key = self.get_api_key()
        client = self._make_client(api_key, params.timeout)

        config = types.GenerateContentConfig(
            system_instruction=prompt.system,
            temperature=params.temperature,
            top_p=params.top_p,
            max_output_tokens=params.max_tokens,
        )

        logger.debug("Calling Gemini model %s", self.model)
        try:
            response = client.models.generate_content(
                model=self.model,
                contents=prompt.user,
                config=config,
            )
        except genai_errors.APIError as e:
            raise _classify_api_error(e) from e
        except httpx.TimeoutException as e:
            raise ProviderTimeoutError(
                f"Gemini did not respond within {params.timeout:g}s"
            ) from e
        except httpx.TransportError as e:
            raise ProviderUnreachableError(f"Could not reach the Gemini API: {e}") from e

        try:
            if not response.candidates:
                raise BadResponseError("Google Gemini returned no candidates in response")

            candidate = response.candidates[0]
            finish_reason = str(getattr(candidate, "finish_reason", "") or "")
            if "SAFETY" in finish_reason or "PROHIBITED" in finish_reason:
                raise BadResponseError(
                    f"Google Gemini blocked response due to safety filters: {finish_reason}"
                )
            if "MAX_TOKENS" in finish_reason:
                logger.warning(
                    "Gemini stopped at the max token limit; the message may be cut short. "
                    "Raise num_predict in [ai_params] if this keeps happening."
                )

            raw_response = response.text

            if not raw_response or not raw_response.strip():
                raise BadResponseError("Google Gemini returned empty response")

            input_tokens = 0
            output_tokens = 0
            usage = getattr(response, "usage_metadata", None)
            if usage:
                input_tokens = getattr(usage, "prompt_token_count", 0) or 0
                output_tokens = getattr(usage, "candidates_token_count", 0) or 0

        except ProviderError:
            raise
        except Exception as e:
            raise BadResponseError(f"Could not read Gemini response: {e}") from e

        return LLMResult(
            text=raw_response,
            model=self.model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )


def _classify_api_error(error: genai_errors.APIError) -> ProviderError:
    """Map a google-genai API error to the provider error taxonomy."""
    code = getattr(error, "code", None)
    detail = getattr(error, "message", None) or str(error)

    if code in (401, 403):
        return ProviderUnauthorizedError(
            f"Gemini rejected the API key ({code}): {detail}"
        )
    if code == 429:
        return RateLimitedError(
            f"Gemini rate limit or quota exceeded (429): {detail}. Wait and try again."
        )
    return BadResponseError(f"Gemini API returned error: {code} - {detail}")
