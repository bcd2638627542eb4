# devscript/llm/anthropic_client.py
"""Anthropic messages backend (API key)."""

import logging

import anthropic

from .base import ProviderError, error_marker

logger = logging.getLogger(__name__)


class AnthropicGenerator:
    """Async backend for the Anthropic messages API."""

    provider_name = "anthropic"

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-5-20250929",
        max_tokens: int = 8192,
        timeout: int = 300,
    ):
        """
        Initialize Anthropic backend.

        Args:
            api_key:    Anthropic API key
            model:      Model name
            max_tokens: Maximum tokens in the response
            timeout:    Request timeout in seconds
        """
        self._api_key = api_key
        self._model = model
        self._max_tokens = max_tokens
        self._timeout = timeout
        self._client: "anthropic.AsyncAnthropic | None" = None

    @property
    def client(self) -> "anthropic.AsyncAnthropic":
        """Lazy-loaded Anthropic client."""
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(
                api_key=self._api_key, timeout=self._timeout
            )
        return self._client

    async def generate_response(self, prompt: str) -> str:
        logger.info(f"anthropic: model={self._model}, prompt={len(prompt)} chars")
        try:
            response = await self.client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.AuthenticationError as e:
            raise ProviderError(f"Authentication failed: {e}", self.provider_name, e) from e
        except anthropic.APIError as e:
            raise ProviderError(str(e), self.provider_name, e) from e

        if response.stop_reason == "refusal":
            return error_marker("Response refused by Anthropic safety filters")

        text = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )
        if not text.strip():
            return error_marker("Empty response from Anthropic")

        logger.info(
            f"anthropic: received {len(text)} chars "
            f"(input_tokens={response.usage.input_tokens}, "
            f"output_tokens={response.usage.output_tokens})"
        )
        return text

    async def close(self) -> None:
        """Close the async client if initialized."""
        if self._client is not None:
            await self._client.close()
            self._client = None
