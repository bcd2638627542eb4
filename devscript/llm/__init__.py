# devscript/llm/__init__.py
"""Provider gateway: one TextGenerator per backend, selected by config."""

from .anthropic_client import AnthropicGenerator
from .base import (
    API_ERROR_PREFIX,
    ConfigurationError,
    ProviderError,
    TextGenerator,
    error_marker,
    is_error_response,
)
from .factory import available_providers, create_generator
from .gemini import GeminiKeyGenerator, GeminiOAuthGenerator
from .lm_studio import LMStudioGenerator
from .ollama_client import OllamaGenerator
from .openai_client import OpenAIGenerator
from .retry import transient_retry

__all__ = [
    "TextGenerator",
    "ProviderError",
    "ConfigurationError",
    "API_ERROR_PREFIX",
    "error_marker",
    "is_error_response",
    "create_generator",
    "available_providers",
    "GeminiKeyGenerator",
    "GeminiOAuthGenerator",
    "OpenAIGenerator",
    "AnthropicGenerator",
    "OllamaGenerator",
    "LMStudioGenerator",
    "transient_retry",
]
