# devscript/llm/ollama_client.py
"""Ollama backend with streaming generation."""

import logging

import httpx
from ollama import AsyncClient, ResponseError

from .base import ProviderError, error_marker
from .retry import transient_retry

logger = logging.getLogger(__name__)


class OllamaGenerator:
    """
    Async backend for a locally hosted Ollama server.

    Streams the chat response and accumulates it. When the server cannot be
    reached the failure is returned as an error marker that names the server
    URL, since the usual cause is that Ollama is not running.
    """

    provider_name = "ollama"

    def __init__(self, base_url: str = "http://localhost:11434", model: str = "llama3", timeout: int = 300):
        """
        Initialize Ollama backend.

        Args:
            base_url: Ollama API base URL (e.g., "http://localhost:11434")
            model:    Model name (e.g., "llama3")
            timeout:  Request timeout in seconds (generous for model loading)
        """
        self.base_url = base_url
        self.model = model
        self.client = AsyncClient(host=base_url, timeout=httpx.Timeout(timeout))

    @transient_retry
    async def _stream_chat(self, prompt: str) -> str:
        accumulated = []
        async for chunk in await self.client.chat(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            stream=True,
        ):
            if content := chunk.get("message", {}).get("content"):
                accumulated.append(content)
        return "".join(accumulated)

    async def generate_response(self, prompt: str) -> str:
        logger.info(f"ollama: model={self.model}, prompt={len(prompt)} chars")
        try:
            result = await self._stream_chat(prompt)
        except (ConnectionError, httpx.ConnectError) as e:
            logger.error(f"Ollama unreachable at {self.base_url}: {e}")
            return error_marker(f"Is Ollama running on {self.base_url}? - {e}")
        except ResponseError as e:
            raise ProviderError(
                f"{e.error} (status {e.status_code})", self.provider_name, e
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(f"Request failed: {e}", self.provider_name, e) from e

        if not result.strip():
            return error_marker("No response from Ollama")

        logger.info(f"ollama: received {len(result)} chars")
        return result
