"""Ollama (local model) provider implementation."""

import json
import logging
import time
from typing import Iterator

import requests

from asum.config import DEFAULT_OLLAMA_MODEL, DEFAULT_OLLAMA_URL
from asum.llm.base import BaseLLMProvider, GenerationParams, LLMResult
from asum.llm.exceptions import (
    BadResponseError,
    ProviderError,
    ProviderTimeoutError,
    ProviderUnreachableError,
)
from asum.llm.prompts import PromptPayload

logger = logging.getLogger(__name__)


class OllamaProvider(BaseLLMProvider):
    """Local Ollama runtime. Requires: ollama serve"""

    def __init__(self, model: str | None = None, url: str | None = None, stream: bool = False):
        """Initialize the Ollama provider.

        Args:
            model: The model to use. Defaults to llama3.
            url: The chat or generate endpoint. Defaults to /api/chat on localhost.
            stream: Ask Ollama for line-delimited JSON chunks.
        """
        self.model = model or DEFAULT_OLLAMA_MODEL
        self.url = url or DEFAULT_OLLAMA_URL
        self.stream = stream

    @property
    def name(self) -> str:
        return f"Ollama ({self.model})"

    def _is_generate_api(self) -> bool:
        return self.url.rstrip("/").endswith("/api/generate")

    def build_payload(self, prompt: PromptPayload, params: GenerationParams) -> dict:
        """Build the request body for the configured endpoint.

        /api/generate takes a system string and a prompt; /api/chat takes a
        message list with a system and a user message.
        """
        options = {
            "temperature": params.temperature,
            "top_p": params.top_p,
            "num_predict": params.max_tokens,
        }

        if self._is_generate_api():
            return {
                "model": self.model,
                "system": prompt.system,
                "prompt": prompt.user,
                "stream": self.stream,
                "options": options,
            }

        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": prompt.system},
                {"role": "user", "content": prompt.user},
            ],
            "stream": self.stream,
            "options": options,
        }

    def generate(self, prompt: PromptPayload, params: GenerationParams) -> LLMResult:
        """Generate a commit message with the local model.

        Args:
            prompt: The system and user prompt strings.
            params: Sampling parameters and timeout.

        Returns:
            An LLMResult with the aggregated response text.

        Raises:
            ProviderUnreachableError: If Ollama is not running.
            ProviderTimeoutError: If the response takes longer than the timeout.
            BadResponseError: On a non-2xx status or an unusable body.
        """
        payload = self.build_payload(prompt, params)
        deadline = time.monotonic() + params.timeout
        logger.debug("POST %s (model=%s, stream=%s)", self.url, self.model, self.stream)

        try:
            response = requests.post(
                self.url,
                json=payload,
                stream=self.stream,
                timeout=params.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise ProviderTimeoutError(
                f"Ollama did not respond within {params.timeout:g}s"
            ) from e
        except requests.exceptions.ConnectionError as e:
            if _is_read_timeout(e):
                raise ProviderTimeoutError(
                    f"Ollama did not respond within {params.timeout:g}s"
                ) from e
            raise ProviderUnreachableError(
                f"Could not connect to Ollama at {self.url}. Start it with: ollama serve"
            ) from e
        except requests.exceptions.RequestException as e:
            raise BadResponseError(f"Ollama request failed: {e}") from e

        try:
            self._check_status(response)
            return self._read_result(response, deadline, params.timeout)
        finally:
            response.close()

    def _check_status(self, response: requests.Response) -> None:
        if response.status_code == 404:
            raise BadResponseError(
                f"Ollama returned 404 for {self.url}: {_error_detail(response)}\n"
                f"If the model is missing, run: ollama pull {self.model}"
            )
        if not response.ok:
            raise BadResponseError(
                f"Ollama API returned error: {response.status_code} - {_error_detail(response)}"
            )

    def _read_result(self, response: requests.Response, deadline: float, timeout: float) -> LLMResult:
        """Read and aggregate the response body (single object or NDJSON stream)."""
        parts: list[str] = []
        input_tokens = 0
        output_tokens = 0

        try:
            chunks = self._iter_chunks(response, deadline, timeout) if self.stream else [_json_body(response)]
            for chunk in chunks:
                if not isinstance(chunk, dict):
                    raise BadResponseError(f"Unexpected Ollama response: {chunk!r}")
                if chunk.get("error"):
                    raise BadResponseError(f"Ollama error: {chunk['error']}")
                parts.append(_chunk_text(chunk))
                if chunk.get("done"):
                    input_tokens = chunk.get("prompt_eval_count", 0) or 0
                    output_tokens = chunk.get("eval_count", 0) or 0
        except ProviderError:
            raise
        except requests.exceptions.Timeout as e:
            raise ProviderTimeoutError(f"Ollama did not finish within {timeout:g}s") from e
        except requests.exceptions.ConnectionError as e:
            if _is_read_timeout(e):
                raise ProviderTimeoutError(f"Ollama did not finish within {timeout:g}s") from e
            raise ProviderUnreachableError(
                f"Connection to Ollama lost: {e}. Check that 'ollama serve' is still running."
            ) from e

        text = "".join(parts)
        if not text.strip():
            raise BadResponseError("Ollama returned an empty response.")

        return LLMResult(
            text=text,
            model=self.model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )

    @staticmethod
    def _iter_chunks(response: requests.Response, deadline: float, timeout: float) -> Iterator[dict]:
        """Yield decoded NDJSON chunks until the stream ends or the deadline passes."""
        for line in response.iter_lines():
            if time.monotonic() > deadline:
                raise ProviderTimeoutError(f"Ollama did not finish within {timeout:g}s")
            if not line:
                continue
            try:
                yield json.loads(line)
            except json.JSONDecodeError as e:
                raise BadResponseError(f"Invalid JSON chunk from Ollama: {line!r}") from e


def _is_read_timeout(error: requests.exceptions.ConnectionError) -> bool:
    # requests reports read timeouts during body download as ConnectionError
    return "timed out" in str(error).lower()


def _json_body(response: requests.Response) -> dict:
    try:
        return response.json()
    except ValueError as e:
        raise BadResponseError("Invalid response from Ollama: body is not JSON.") from e


def _chunk_text(chunk: dict) -> str:
    """Text of one chunk: message.content for /api/chat, response for /api/generate."""
    message = chunk.get("message")
    if isinstance(message, dict):
        return message.get("content") or ""
    return chunk.get("response") or ""


def _error_detail(response: requests.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text[:200] or response.reason or "unknown error"
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return str(data)[:200]
