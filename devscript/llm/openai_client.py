# devscript/llm/openai_client.py
"""OpenAI chat-completions backend (API key)."""

import logging

import openai
from openai import AsyncOpenAI

from .base import ProviderError, error_marker

logger = logging.getLogger(__name__)


class OpenAIGenerator:
    """
    Async OpenAI backend using the chat completions API.

    Also the base for OpenAI-compatible local servers (see LMStudioGenerator),
    which only change how a connection failure is reported.
    """

    provider_name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        base_url: str | None = None,
        timeout: int = 300,
    ):
        """
        Initialize OpenAI backend.

        Args:
            api_key:  OpenAI API key
            model:    Chat model name
            base_url: API base URL override (None = SDK default)
            timeout:  Request timeout in seconds
        """
        self.model = model
        self.base_url = base_url
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout)

    def _connection_failed(self, error: openai.APIConnectionError) -> str:
        raise ProviderError(f"Connection failed: {error}", self.provider_name, error) from error

    async def generate_response(self, prompt: str) -> str:
        """
        Send the prompt as a single user message.

        Returns:
            Response text, or an error marker if the output is empty or filtered

        Raises:
            ProviderError: On connection, authentication or API errors
        """
        logger.info(f"{self.provider_name}: model={self.model}, prompt={len(prompt)} chars")
        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
            )
        except openai.APIConnectionError as e:
            return self._connection_failed(e)
        except openai.AuthenticationError as e:
            raise ProviderError(f"Authentication failed: {e}", self.provider_name, e) from e
        except openai.APIError as e:
            raise ProviderError(str(e), self.provider_name, e) from e

        if not response.choices:
            return error_marker(f"No response from {self.provider_name}")

        choice = response.choices[0]
        if choice.finish_reason == "content_filter":
            return error_marker(f"Response blocked by {self.provider_name} content filter")

        content = choice.message.content or ""
        if not content.strip():
            return error_marker(f"Empty response from {self.provider_name}")

        logger.info(f"{self.provider_name}: received {len(content)} chars")
        return content
