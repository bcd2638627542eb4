# devscript/llm/base.py
"""Provider protocol, error types and the response error marker."""

from typing import Protocol, runtime_checkable

API_ERROR_PREFIX = "[API ERROR]"


class ProviderError(Exception):
    """
    Transport-level or authentication failure talking to a provider.

    Content-level failures (empty or filtered output) are NOT raised; they
    come back as an error-marker response string instead.

    Attributes:
        provider: Name of the provider that failed
        original_error: Wrapped exception, if any
    """

    def __init__(
        self, message: str, provider: str = "unknown", original_error: Exception | None = None
    ):
        self.provider = provider
        self.message = message
        self.original_error = original_error
        super().__init__(f"[{provider}] {message}")


class ConfigurationError(ProviderError):
    """Unknown provider name or missing credential. Fatal for the run."""


def error_marker(message: str) -> str:
    """Build a response string flagged as a content-level provider failure."""
    return f"{API_ERROR_PREFIX}: {message}"


def is_error_response(text: str) -> bool:
    return text.startswith(API_ERROR_PREFIX)


@runtime_checkable
class TextGenerator(Protocol):
    """
    Capability every backend implements: prompt in, response text out.

    Implementations:
        - return the response text on success
        - return error_marker(...) for empty/filtered/blocked output
        - raise ProviderError for network, HTTP and authentication failures
    """

    @property
    def provider_name(self) -> str:
        """Canonical provider identifier (e.g. "gemini", "ollama")."""
        ...

    async def generate_response(self, prompt: str) -> str:
        """Send the prompt and return the response text."""
        ...
