# devscript/llm/lm_studio.py
"""LM Studio backend using its OpenAI-compatible API."""

import logging

import openai

from .base import error_marker
from .openai_client import OpenAIGenerator

logger = logging.getLogger(__name__)


class LMStudioGenerator(OpenAIGenerator):
    """
    Local LM Studio backend.

    LM Studio exposes an OpenAI-compatible endpoint at http://localhost:1234/v1
    and ignores the API key. An unreachable server is reported as an error
    marker pointing at the server URL rather than raised.
    """

    provider_name = "lm_studio"

    def __init__(
        self,
        base_url: str = "http://localhost:1234/v1",
        model: str = "local-model",
        timeout: int = 300,
    ):
        super().__init__(api_key="lm-studio", model=model, base_url=base_url, timeout=timeout)

    def _connection_failed(self, error: openai.APIConnectionError) -> str:
        logger.error(f"LM Studio unreachable at {self.base_url}: {error}")
        return error_marker(f"Is LM Studio running on {self.base_url}? - {error}")
