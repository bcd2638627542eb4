# devscript/llm/factory.py
"""
Single selection point for the configured provider.

Resolves DevScriptConfig.active_provider (or an explicit override) to a
TextGenerator once per run. An unknown name or a missing credential raises
ConfigurationError; there is no fallback provider.
"""

import logging
import os
from collections.abc import Callable

from devscript.config.schema import DevScriptConfig, OAuthTokens

from .anthropic_client import AnthropicGenerator
from .base import ConfigurationError, TextGenerator
from .gemini import GeminiKeyGenerator, GeminiOAuthGenerator
from .lm_studio import LMStudioGenerator
from .ollama_client import OllamaGenerator
from .openai_client import OpenAIGenerator

logger = logging.getLogger(__name__)

TokenCallback = Callable[[OAuthTokens], None]


def _require_key(provider: str, configured: str | None, env_var: str) -> str:
    key = configured or os.environ.get(env_var)
    if not key:
        raise ConfigurationError(
            f"API key not found. Use 'devscript config set-key {provider} <key>' "
            f"or set {env_var}.",
            provider,
        )
    return key


def _gemini(config: DevScriptConfig, on_tokens_refreshed: TokenCallback | None) -> TextGenerator:
    cfg = config.gemini
    return GeminiKeyGenerator(
        api_key=_require_key("gemini", cfg.api_key, "GEMINI_API_KEY"),
        model=cfg.model,
        base_url=cfg.base_url,
        timeout=cfg.timeout,
    )


def _gemini_oauth(config: DevScriptConfig, on_tokens_refreshed: TokenCallback | None) -> TextGenerator:
    cfg = config.gemini_oauth
    return GeminiOAuthGenerator(
        tokens=cfg.tokens,
        client_id=cfg.client_id or os.environ.get("GOOGLE_CLIENT_ID"),
        client_secret=cfg.client_secret or os.environ.get("GOOGLE_CLIENT_SECRET"),
        token_uri=cfg.token_uri,
        model=cfg.model,
        base_url=cfg.base_url,
        timeout=cfg.timeout,
        on_tokens_refreshed=on_tokens_refreshed,
    )


def _openai(config: DevScriptConfig, on_tokens_refreshed: TokenCallback | None) -> TextGenerator:
    cfg = config.openai
    return OpenAIGenerator(
        api_key=_require_key("openai", cfg.api_key, "OPENAI_API_KEY"),
        model=cfg.model,
        base_url=cfg.base_url,
        timeout=cfg.timeout,
    )


def _anthropic(config: DevScriptConfig, on_tokens_refreshed: TokenCallback | None) -> TextGenerator:
    cfg = config.anthropic
    return AnthropicGenerator(
        api_key=_require_key("anthropic", cfg.api_key, "ANTHROPIC_API_KEY"),
        model=cfg.model,
        max_tokens=cfg.max_tokens,
        timeout=cfg.timeout,
    )


def _ollama(config: DevScriptConfig, on_tokens_refreshed: TokenCallback | None) -> TextGenerator:
    cfg = config.ollama
    return OllamaGenerator(base_url=cfg.base_url, model=cfg.model, timeout=cfg.timeout)


def _lm_studio(config: DevScriptConfig, on_tokens_refreshed: TokenCallback | None) -> TextGenerator:
    cfg = config.lm_studio
    return LMStudioGenerator(base_url=cfg.base_url, model=cfg.model, timeout=cfg.timeout)


_BUILDERS: dict[str, Callable[[DevScriptConfig, TokenCallback | None], TextGenerator]] = {
    "gemini": _gemini,
    "gemini_oauth": _gemini_oauth,
    "openai": _openai,
    "anthropic": _anthropic,
    "ollama": _ollama,
    "lm_studio": _lm_studio,
}


def available_providers() -> list[str]:
    return list(_BUILDERS)


def create_generator(
    config: DevScriptConfig,
    provider: str | None = None,
    on_tokens_refreshed: TokenCallback | None = None,
) -> TextGenerator:
    """
    Create the TextGenerator for the active (or overridden) provider.

    Args:
        config:              Root DevScriptConfig
        provider:            Override for config.active_provider
        on_tokens_refreshed: Called with refreshed OAuth tokens (gemini_oauth only)

    Returns:
        Ready-to-use TextGenerator

    Raises:
        ConfigurationError: Unknown provider or missing credential
    """
    name = (provider or config.active_provider).strip().lower()
    builder = _BUILDERS.get(name)
    if builder is None:
        available = ", ".join(_BUILDERS)
        raise ConfigurationError(f"Unsupported provider '{name}'. Available: {available}", name)

    generator = builder(config, on_tokens_refreshed)
    logger.info(f"Using provider {name}")
    return generator
